from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

import yaml

from ..exceptions import LayoutError
from ..inventory.regions import GridSpec, RegionId, RegionKind, RegionSpec, SlotSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegionLayout:
    """The fixed set of regions an actor owns, in display/search order."""

    specs: Tuple[RegionSpec, ...]

    def __post_init__(self) -> None:
        seen = set()
        for spec in self.specs:
            if spec.region_id in seen:
                raise LayoutError(f"Region {spec.region_id.value} configured twice")
            seen.add(spec.region_id)

    def __iter__(self) -> Iterator[RegionSpec]:
        return iter(self.specs)

    def __contains__(self, region_id: object) -> bool:
        return any(s.region_id == region_id for s in self.specs)

    def get(self, region_id: RegionId) -> Optional[RegionSpec]:
        for spec in self.specs:
            if spec.region_id == region_id:
                return spec
        return None

    def region_ids(self) -> List[RegionId]:
        return [s.region_id for s in self.specs]

    def slots(self) -> List[SlotSpec]:
        return [s for s in self.specs if s.kind is RegionKind.SLOT]  # type: ignore[misc]

    def containers(self) -> List[GridSpec]:
        return [s for s in self.specs if s.kind is RegionKind.GRID]  # type: ignore[misc]


def _deep_merge(base: dict, overlay: dict) -> dict:
    merged = dict(base)
    for k, v in (overlay or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            merged[k] = _deep_merge(base[k], v)
        else:
            merged[k] = v
    return merged


def _region_id(name: Any, section: str) -> RegionId:
    try:
        region_id = RegionId.parse(name)
    except ValueError:
        raise LayoutError(f"Unknown region name in {section}: {name!r}") from None
    if section == "slots" and region_id.is_container:
        raise LayoutError(f"{region_id.value} is a container and cannot be configured as a slot")
    if section == "containers" and not region_id.is_container:
        raise LayoutError(f"{region_id.value} is a slot and cannot be configured as a container")
    return region_id


def _build_slot(region_id: RegionId, raw: Any) -> SlotSpec:
    if not isinstance(raw, dict):
        raise LayoutError(f"Slot {region_id.value} must be a mapping, got {type(raw).__name__}")
    allow = raw.get("allow")
    if allow is None:
        return SlotSpec(region_id=region_id)
    if not isinstance(allow, list) or not all(isinstance(a, str) and a for a in allow):
        raise LayoutError(f"Slot {region_id.value} 'allow' must be a list of sub-category names")
    return SlotSpec(region_id=region_id, allowed=frozenset(allow))


def _build_container(region_id: RegionId, raw: Any) -> GridSpec:
    if not isinstance(raw, dict) or not isinstance(raw.get("blocks"), list) or not raw["blocks"]:
        raise LayoutError(f"Container {region_id.value} needs a non-empty 'blocks' list")
    shapes = []
    for block in raw["blocks"]:
        if (
            not isinstance(block, (list, tuple))
            or len(block) != 2
            or not all(isinstance(n, int) and not isinstance(n, bool) for n in block)
        ):
            raise LayoutError(f"Container {region_id.value} block must be [width, height], got {block!r}")
        w, h = block
        if w < 1 or h < 1:
            raise LayoutError(f"Container {region_id.value} block {w}x{h} must be at least 1x1")
        shapes.append((w, h))
    return GridSpec.chained(region_id, shapes)


def build_layout(data: Mapping[str, Any]) -> RegionLayout:
    """Build a RegionLayout from a parsed configuration mapping."""
    if not isinstance(data, Mapping):
        raise LayoutError("Layout configuration must be a mapping")
    unknown = set(data) - {"slots", "containers"}
    if unknown:
        raise LayoutError(f"Unknown layout sections: {', '.join(sorted(unknown))}")

    specs: List[RegionSpec] = []
    for name, raw in (data.get("slots") or {}).items():
        region_id = _region_id(name, "slots")
        if raw is None:
            logger.debug("Slot %s disabled by configuration", region_id.value)
            continue
        specs.append(_build_slot(region_id, raw))

    containers = data.get("containers") or {}
    for name, raw in containers.items():
        region_id = _region_id(name, "containers")
        if raw is None:
            logger.debug("Container %s disabled by configuration", region_id.value)
            continue
        specs.append(_build_container(region_id, raw))
    return RegionLayout(specs=tuple(specs))


def _load_default_data() -> Dict[str, Any]:
    text = resources.files("stashgrid.config").joinpath("default_layout.yaml").read_text(encoding="utf-8")
    return yaml.safe_load(text) or {}


def load_layout(path: Optional[Path] = None, overrides: Optional[Mapping[str, Any]] = None) -> RegionLayout:
    """Load the layout from built-in defaults, an optional user YAML file and an optional overlay.

    Later sources are deep-merged over earlier ones; a region set to null is left out.
    """
    data = _load_default_data()
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise LayoutError(f"Layout file not found: {path}")
        with path.open("r", encoding="utf-8") as f:
            try:
                user_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise LayoutError(f"Failed to parse layout {path}: {e}") from e
        if not isinstance(user_data, dict):
            raise LayoutError(f"Layout file {path} must contain a mapping")
        data = _deep_merge(data, user_data)
        logger.info("Loaded layout overrides from %s", path)
    if overrides:
        data = _deep_merge(data, dict(overrides))
    layout = build_layout(data)
    logger.debug("Layout regions: %s", [s.describe() for s in layout])
    return layout


def default_layout() -> RegionLayout:
    return load_layout()


__all__ = ["RegionLayout", "build_layout", "default_layout", "load_layout"]
