from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ..items.catalog import ItemCatalog
from ..items.models import ItemDescriptor
from .aggregate import EquipmentAggregate
from .mover import MoveStatus, RejectReason
from .occupancy import occupied_cells
from .regions import RegionId, RegionKind, SlotSpec
from .validation import can_place

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlacementResult:
    status: MoveStatus
    aggregate: EquipmentAggregate
    reason: Optional[RejectReason] = None
    region: Optional[RegionId] = None
    index: Optional[int] = None

    @property
    def applied(self) -> bool:
        return self.status is MoveStatus.APPLIED


def _search_order(aggregate: EquipmentAggregate) -> List[RegionId]:
    """Containers first, then unrestricted slots, each in layout order.

    Restricted slots (helmet, weapon, ...) are only filled by an explicit move.
    """
    grids = [r.region_id for r in aggregate if r.kind is RegionKind.GRID]
    slots = [
        r.region_id for r in aggregate
        if isinstance(r.spec, SlotSpec) and r.spec.allowed is None
    ]
    return grids + slots


def find_free_anchor(
    aggregate: EquipmentAggregate,
    item: ItemDescriptor,
    regions: Optional[Iterable[RegionId]] = None,
) -> Optional[Tuple[RegionId, int]]:
    """First (region, anchor) where the item is legal and every covered cell is empty."""
    order = list(regions) if regions is not None else _search_order(aggregate)
    for region_id in order:
        region = aggregate.region(region_id)
        if region is None:
            continue
        for index in range(region.spec.cell_count):
            if not can_place(item, region, index):
                continue
            if region.is_free(occupied_cells(region, index, item)):
                return region_id, index
    return None


def place_item(
    aggregate: EquipmentAggregate,
    item_id: str,
    catalog: ItemCatalog,
    regions: Optional[Iterable[RegionId]] = None,
) -> PlacementResult:
    """
    Put a new item (e.g. freshly looted) into the first free spot.

    Never evicts anything. Rejected when the item is unknown, already present
    in the aggregate, or there is no room.
    """
    item = catalog.get(item_id)
    if item is None:
        return PlacementResult(MoveStatus.REJECTED, aggregate, reason=RejectReason.UNKNOWN_ITEM)
    if aggregate.contains(item_id):
        logger.info("Cannot place %s: already equipped", item_id)
        return PlacementResult(MoveStatus.REJECTED, aggregate, reason=RejectReason.ALREADY_PRESENT)

    spot = find_free_anchor(aggregate, item, regions)
    if spot is None:
        logger.info("No room for %s (%dx%d)", item_id, item.width, item.height)
        return PlacementResult(MoveStatus.REJECTED, aggregate, reason=RejectReason.INVALID_PLACEMENT)

    region_id, index = spot
    result = aggregate.copy()
    region = result.regions[region_id]
    region.write(item_id, index, occupied_cells(region, index, item))
    logger.debug("Placed %s in %s at %d", item_id, region_id.value, index)
    return PlacementResult(MoveStatus.APPLIED, result, region=region_id, index=index)


__all__ = ["PlacementResult", "find_free_anchor", "place_item"]
