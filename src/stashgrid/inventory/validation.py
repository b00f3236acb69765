from __future__ import annotations

import logging
from typing import Union

from ..items.models import ItemDescriptor
from .occupancy import occupied_cells
from .regions import Region, RegionKind, RegionSpec, SlotSpec

logger = logging.getLogger(__name__)


def slot_accepts(spec: SlotSpec, item: ItemDescriptor) -> bool:
    """Footprint and allow-list check for a single equipment slot."""
    if not item.is_single_cell:
        return False
    if spec.allowed is None or item.is_wildcard:
        return True
    return item.sub_category in spec.allowed


def can_place(item: ItemDescriptor, region: Union[Region, RegionSpec], anchor_index: int) -> bool:
    """
    Whether the item is legal in the region at this anchor.

    Slots check footprint and sub-category; containers check geometry only.
    Cells already held by other items are not considered here: the move
    resolver evicts or swaps them instead of refusing.
    """
    spec = region.spec if isinstance(region, Region) else region
    if spec.kind is RegionKind.SLOT:
        assert isinstance(spec, SlotSpec)
        if anchor_index != 0:
            return False
        ok = slot_accepts(spec, item)
    else:
        ok = bool(occupied_cells(spec, anchor_index, item))
    if not ok:
        logger.debug(
            "%s (%dx%d, %s) cannot be placed in %s at %d",
            item.id, item.width, item.height, item.sub_category, spec.region_id.value, anchor_index,
        )
    return ok


__all__ = ["can_place", "slot_accepts"]
