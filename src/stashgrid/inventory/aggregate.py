from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Mapping, Optional, Tuple

from ..data import make_validator
from ..exceptions import IntegrityError, SnapshotError
from ..items.catalog import ItemCatalog
from .occupancy import occupied_cells
from .regions import CellRef, Region, RegionId, RegionKind

if TYPE_CHECKING:
    from ..config.layout import RegionLayout

logger = logging.getLogger(__name__)


@dataclass
class EquipmentAggregate:
    """
    The complete set of one actor's regions.

    Treated as a value: engine operations take an aggregate and return a
    replacement built on a copy, so a caller holding the old one never
    observes partial edits.
    """

    regions: Dict[RegionId, Region] = field(default_factory=dict)

    @classmethod
    def empty(cls, layout: RegionLayout) -> "EquipmentAggregate":
        return cls(regions={spec.region_id: Region(spec=spec) for spec in layout})

    def copy(self) -> "EquipmentAggregate":
        # specs and CellRefs are frozen; only the cell lists need duplicating
        return EquipmentAggregate(
            regions={rid: Region(spec=r.spec, cells=list(r.cells)) for rid, r in self.regions.items()}
        )

    def region(self, region_id: RegionId) -> Optional[Region]:
        return self.regions.get(region_id)

    def __iter__(self) -> Iterator[Region]:
        return iter(self.regions.values())

    def item_ids(self) -> List[str]:
        """Distinct item ids present, in region order."""
        seen: Dict[str, None] = {}
        for region in self.regions.values():
            for ref in region.cells:
                if ref is not None:
                    seen.setdefault(ref.item_id, None)
        return list(seen)

    def locate(self, item_id: str) -> Optional[Tuple[RegionId, int]]:
        """(region, anchor) of an item, or None when absent."""
        for region in self.regions.values():
            anchor = region.anchor_of(item_id)
            if anchor is not None:
                return region.region_id, anchor
        return None

    def contains(self, item_id: str) -> bool:
        return any(region.contains(item_id) for region in self.regions.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "regions": {
                region_id.value: {
                    "cells": [
                        None if ref is None else {"item": ref.item_id, "anchor": ref.anchor}
                        for ref in region.cells
                    ]
                }
                for region_id, region in self.regions.items()
            }
        }

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        layout: RegionLayout,
        catalog: Optional[ItemCatalog] = None,
    ) -> "EquipmentAggregate":
        """Rebuild an aggregate from a ``to_dict`` snapshot.

        Regions missing from the snapshot start empty; regions the layout does
        not know raise SnapshotError. When a catalog is given the cell
        invariants are checked too (IntegrityError).
        """
        validator = make_validator("equipment")
        errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
        if errors:
            for err in errors:
                logger.error("Snapshot validation error at %s: %s", list(err.path), err.message)
            first = errors[0]
            raise SnapshotError(f"Invalid equipment snapshot at {'/'.join(map(str, first.path)) or '<root>'}: {first.message}")

        agg = cls.empty(layout)
        for name, raw in data["regions"].items():
            try:
                region_id = RegionId.parse(name)
            except ValueError:
                raise SnapshotError(f"Unknown region in snapshot: {name!r}") from None
            region = agg.regions.get(region_id)
            if region is None:
                raise SnapshotError(f"Region {region_id.value} is not part of this layout")
            cells = raw["cells"]
            if len(cells) != region.spec.cell_count:
                raise SnapshotError(
                    f"Region {region_id.value} expects {region.spec.cell_count} cells, got {len(cells)}"
                )
            region.cells = [None if c is None else CellRef(item_id=c["item"], anchor=c["anchor"]) for c in cells]
        if catalog is not None:
            check_integrity(agg, catalog)
        return agg


def clear_item(aggregate: EquipmentAggregate, item_id: str) -> EquipmentAggregate:
    """Return a copy with every cell referencing ``item_id`` cleared, in every region."""
    result = aggregate.copy()
    cleared = sum(region.remove(item_id) for region in result)
    if cleared:
        logger.debug("Removed %s from aggregate (%d cells)", item_id, cleared)
    return result


def total_value(aggregate: EquipmentAggregate, catalog: ItemCatalog) -> int:
    """Sum of catalog values, counting each distinct item once; unknown ids count as zero."""
    total = 0
    for item_id in aggregate.item_ids():
        item = catalog.get(item_id)
        if item is not None:
            total += item.value
    return total


def check_integrity(aggregate: EquipmentAggregate, catalog: ItemCatalog) -> None:
    """
    Verify the cell invariants of every region.

    Raises IntegrityError when an item is recorded in more than one region,
    when a region's cells for an item are not exactly its footprint block at
    its anchor, or when the block leaves the region's bounds.
    """
    owner: Dict[str, RegionId] = {}
    for region in aggregate:
        for item_id in region.occupants(range(len(region.cells))):
            if item_id in owner:
                raise IntegrityError(
                    f"{item_id} appears in both {owner[item_id].value} and {region.region_id.value}"
                )
            owner[item_id] = region.region_id

            indices = region.indices_of(item_id)
            anchors = {region.cells[i].anchor for i in indices}  # type: ignore[union-attr]
            if len(anchors) != 1:
                raise IntegrityError(f"{item_id} in {region.region_id.value} has several anchors: {sorted(anchors)}")
            anchor = anchors.pop()
            if region.anchored_at(anchor) != item_id:
                raise IntegrityError(f"{item_id} in {region.region_id.value} has no anchor cell at {anchor}")

            item = catalog.get(item_id)
            if item is None:
                if len(indices) != 1:
                    raise IntegrityError(f"Unknown item {item_id} covers {len(indices)} cells")
                continue
            if region.kind is RegionKind.SLOT:
                expected: Tuple[int, ...] = (anchor,) if item.is_single_cell else ()
            else:
                expected = occupied_cells(region, anchor, item)
            if not expected:
                raise IntegrityError(
                    f"{item_id} ({item.width}x{item.height}) does not fit {region.region_id.value} at {anchor}"
                )
            if sorted(expected) != indices:
                raise IntegrityError(
                    f"{item_id} in {region.region_id.value} covers {indices}, expected {sorted(expected)}"
                )


__all__ = [
    "EquipmentAggregate",
    "check_integrity",
    "clear_item",
    "total_value",
]
