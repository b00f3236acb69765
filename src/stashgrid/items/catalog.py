from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional

import yaml

from ..data import read_text
from ..exceptions import CatalogError
from .models import ItemDescriptor
from .schema import item_schema_errors

logger = logging.getLogger(__name__)


class ItemCatalog:
    """
    Read-only lookup from item id to its static descriptor.

    The engine never assumes the catalog is complete: ``get`` returns None for
    unknown ids and callers treat that as "no such item".
    """

    def __init__(self, items: Iterable[ItemDescriptor] = ()) -> None:
        self._defs: Dict[str, ItemDescriptor] = {}
        for item in items:
            self._register(item)

    def _register(self, item: ItemDescriptor) -> None:
        if item.id in self._defs:
            raise CatalogError(f"Duplicate item id: {item.id}")
        self._defs[item.id] = item

    def get(self, item_id: Optional[str]) -> Optional[ItemDescriptor]:
        if item_id is None:
            return None
        return self._defs.get(item_id)

    def require(self, item_id: str) -> ItemDescriptor:
        try:
            return self._defs[item_id]
        except KeyError as exc:
            raise CatalogError(f"Unknown item id: {item_id}") from exc

    def ids(self) -> List[str]:
        return sorted(self._defs)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._defs

    def __iter__(self) -> Iterator[ItemDescriptor]:
        return iter(self._defs.values())

    def __len__(self) -> int:
        return len(self._defs)

    @classmethod
    def from_records(cls, records: Iterable[Dict[str, Any]], *, source: str = "<records>") -> "ItemCatalog":
        """Build a catalog from raw dict records, validating each against the item schema."""
        problems: List[str] = []
        items: List[ItemDescriptor] = []
        for idx, record in enumerate(records):
            if not isinstance(record, dict):
                problems.append(f"items[{idx}]: expected a mapping, got {type(record).__name__}")
                continue
            errors = item_schema_errors(record)
            if errors:
                label = record.get("id", f"items[{idx}]")
                problems.extend(f"{label}: {e}" for e in errors)
                continue
            try:
                items.append(ItemDescriptor.from_dict(record))
            except ValueError as e:
                problems.append(f"{record['id']}: {e}")
        if problems:
            for p in problems:
                logger.error("Catalog %s: %s", source, p)
            raise CatalogError(f"Invalid item catalog {source}", errors=problems)
        catalog = cls(items)
        logger.info("Loaded %d items from %s", len(catalog), source)
        return catalog

    @classmethod
    def from_yaml_text(cls, text: str, *, source: str = "<yaml>") -> "ItemCatalog":
        try:
            raw = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise CatalogError(f"Failed to parse catalog {source}: {e}") from e
        if not isinstance(raw, dict) or not isinstance(raw.get("items", []), list):
            raise CatalogError(f"Catalog {source} must be a mapping with an 'items' list")
        return cls.from_records(raw.get("items", []), source=source)

    @classmethod
    def from_yaml(cls, path: Path | str) -> "ItemCatalog":
        path = Path(path)
        if not path.exists():
            raise CatalogError(f"Catalog file not found: {path}")
        return cls.from_yaml_text(path.read_text(encoding="utf-8"), source=str(path))


@lru_cache(maxsize=1)
def default_catalog() -> ItemCatalog:
    """The built-in catalog shipped as package data (cached)."""
    return ItemCatalog.from_yaml_text(read_text("items.yaml"), source="stashgrid.data/items.yaml")


__all__ = ["ItemCatalog", "default_catalog"]
