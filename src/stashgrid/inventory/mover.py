from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from ..items.catalog import ItemCatalog
from ..items.models import ItemDescriptor
from .aggregate import EquipmentAggregate
from .occupancy import occupied_cells
from .regions import Region, RegionId
from .validation import can_place

logger = logging.getLogger(__name__)


class MoveStatus(Enum):
    APPLIED = "applied"
    REJECTED = "rejected"


class RejectReason(Enum):
    UNKNOWN_ITEM = "unknown_item"
    UNKNOWN_REGION = "unknown_region"
    NOT_AT_SOURCE = "not_at_source"
    SAME_POSITION = "same_position"
    INVALID_PLACEMENT = "invalid_placement"
    ALREADY_PRESENT = "already_present"


@dataclass(frozen=True)
class MoveRequest:
    source_region: RegionId
    source_index: int
    item_id: str
    dest_region: RegionId
    dest_index: int

    def describe(self) -> str:
        return (
            f"{self.item_id}: {self.source_region.value}[{self.source_index}]"
            f" -> {self.dest_region.value}[{self.dest_index}]"
        )


@dataclass(frozen=True)
class MoveResult:
    """
    Outcome of a move. ``aggregate`` is the replacement when applied and the
    caller's original, untouched, when rejected.
    """

    status: MoveStatus
    aggregate: EquipmentAggregate
    reason: Optional[RejectReason] = None
    swapped: Optional[str] = None
    lost_blocker: Optional[str] = None
    evicted: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def dropped(self) -> Tuple[str, ...]:
        """Every item removed from the aggregate by this move."""
        lost = (self.lost_blocker,) if self.lost_blocker is not None else ()
        return lost + self.evicted

    @property
    def applied(self) -> bool:
        return self.status is MoveStatus.APPLIED

    @classmethod
    def rejected(cls, aggregate: EquipmentAggregate, reason: RejectReason) -> "MoveResult":
        return cls(status=MoveStatus.REJECTED, aggregate=aggregate, reason=reason)


def _blocker(region: Region, cells: Tuple[int, ...], anchor_index: int) -> Optional[str]:
    """Item anchoring one of the destination cells; the destination anchor wins ties."""
    found = region.anchored_at(anchor_index)
    if found is not None:
        return found
    for idx in cells:
        found = region.anchored_at(idx)
        if found is not None:
            return found
    return None


def _fits_vacated_source(
    item: ItemDescriptor,
    region: Region,
    anchor_index: int,
    reserved: Tuple[int, ...],
) -> Tuple[int, ...]:
    """Cells the blocker would take at the vacated source, or () when it does not fit there."""
    if not can_place(item, region, anchor_index):
        return ()
    cells = occupied_cells(region, anchor_index, item)
    if not region.is_free(cells) or set(cells) & set(reserved):
        return ()
    return cells


def move(aggregate: EquipmentAggregate, request: MoveRequest, catalog: ItemCatalog) -> MoveResult:
    """
    Relocate an item, swapping or evicting whatever anchors the destination.

    Steps: resolve the item by id, validate the destination, find the blocker,
    evacuate the source, send the blocker back to the vacated source when it
    fits there (otherwise it is dropped from the aggregate), clear anything
    else under the destination block and write the moved item. All edits
    happen on a copy; a rejected move returns the input aggregate as is.
    """
    item = catalog.get(request.item_id)
    if item is None:
        logger.info("Move rejected, unknown item: %s", request.describe())
        return MoveResult.rejected(aggregate, RejectReason.UNKNOWN_ITEM)

    source = aggregate.region(request.source_region)
    dest = aggregate.region(request.dest_region)
    if source is None or dest is None:
        logger.info("Move rejected, region not in layout: %s", request.describe())
        return MoveResult.rejected(aggregate, RejectReason.UNKNOWN_REGION)

    held = source.cell(request.source_index)
    if held is None or held.item_id != item.id:
        logger.info("Move rejected, item not at source: %s", request.describe())
        return MoveResult.rejected(aggregate, RejectReason.NOT_AT_SOURCE)
    source_anchor = held.anchor

    if request.source_region == request.dest_region and source_anchor == request.dest_index:
        logger.debug("Move is a no-op: %s", request.describe())
        return MoveResult.rejected(aggregate, RejectReason.SAME_POSITION)

    if not can_place(item, dest, request.dest_index):
        logger.info("Move rejected, invalid placement: %s", request.describe())
        return MoveResult.rejected(aggregate, RejectReason.INVALID_PLACEMENT)

    dest_cells = occupied_cells(dest, request.dest_index, item)
    blocker = _blocker(dest, dest_cells, request.dest_index)

    result = aggregate.copy()
    work_source = result.regions[request.source_region]
    work_dest = result.regions[request.dest_region]

    work_source.remove(item.id)

    swapped: Optional[str] = None
    lost: Optional[str] = None
    evicted: List[str] = []
    if blocker is not None and blocker != item.id:
        work_dest.remove(blocker)
        blocker_item = catalog.get(blocker)
        reserved = dest_cells if request.source_region == request.dest_region else ()
        cells: Tuple[int, ...] = ()
        if blocker_item is not None:
            cells = _fits_vacated_source(blocker_item, work_source, source_anchor, reserved)
        if cells:
            work_source.write(blocker, source_anchor, cells)
            swapped = blocker
        else:
            # TODO: confirm with product whether a blocker that cannot swap back should reject the move instead
            logger.warning(
                "Blocker %s does not fit %s[%d]; dropping it from equipment",
                blocker, request.source_region.value, source_anchor,
            )
            lost = blocker

    for other in work_dest.occupants(dest_cells):
        if other == item.id:
            continue
        work_dest.remove(other)
        logger.warning("Evicted %s from %s while placing %s", other, request.dest_region.value, item.id)
        evicted.append(other)

    work_dest.write(item.id, request.dest_index, dest_cells)
    logger.debug("Move applied: %s (swapped=%s, lost=%s, evicted=%s)", request.describe(), swapped, lost, evicted)
    return MoveResult(
        status=MoveStatus.APPLIED,
        aggregate=result,
        swapped=swapped,
        lost_blocker=lost,
        evicted=tuple(evicted),
    )


__all__ = [
    "MoveRequest",
    "MoveResult",
    "MoveStatus",
    "RejectReason",
    "move",
]
