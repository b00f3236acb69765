from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Optional

from ..events import (
    EventBus,
    ItemDiscardedEvent,
    ItemDroppedEvent,
    ItemMovedEvent,
    ItemPlacedEvent,
    MoveRejectedEvent,
)
from ..items.catalog import ItemCatalog
from .aggregate import EquipmentAggregate, clear_item, total_value
from .autoplace import PlacementResult, place_item
from .mover import MoveRequest, MoveResult, move

if TYPE_CHECKING:
    from ..config.layout import RegionLayout

logger = logging.getLogger(__name__)


class EquipmentStore:
    """
    Single-writer holder of one actor's authoritative aggregate.

    The engine functions are pure; this store serializes calls against the
    current snapshot and swaps in the replacement only when an operation is
    applied. Events are emitted after the swap; handlers run synchronously
    on the calling thread while the lock is held.
    """

    def __init__(
        self,
        layout: RegionLayout,
        catalog: ItemCatalog,
        event_bus: Optional[EventBus] = None,
        aggregate: Optional[EquipmentAggregate] = None,
    ) -> None:
        self.layout = layout
        self.catalog = catalog
        self.event_bus = event_bus or EventBus()
        self._lock = threading.RLock()
        self._aggregate = aggregate if aggregate is not None else EquipmentAggregate.empty(layout)

    @property
    def aggregate(self) -> EquipmentAggregate:
        return self._aggregate

    def total_value(self) -> int:
        return total_value(self._aggregate, self.catalog)

    def move(self, request: MoveRequest) -> MoveResult:
        with self._lock:
            result = move(self._aggregate, request, self.catalog)
            if not result.applied:
                assert result.reason is not None
                self.event_bus.emit(MoveRejectedEvent(item_id=request.item_id, reason=result.reason.value))
                return result
            self._aggregate = result.aggregate
            self.event_bus.emit(
                ItemMovedEvent(
                    item_id=request.item_id,
                    source_region=request.source_region.value,
                    source_index=request.source_index,
                    dest_region=request.dest_region.value,
                    dest_index=request.dest_index,
                    swapped=result.swapped,
                )
            )
            if result.lost_blocker is not None:
                self.event_bus.emit(ItemDroppedEvent(item_id=result.lost_blocker, reason="lost_blocker"))
            for evicted in result.evicted:
                self.event_bus.emit(ItemDroppedEvent(item_id=evicted, reason="evicted"))
            return result

    def place(self, item_id: str) -> PlacementResult:
        with self._lock:
            result = place_item(self._aggregate, item_id, self.catalog)
            if result.applied:
                self._aggregate = result.aggregate
                assert result.region is not None and result.index is not None
                self.event_bus.emit(ItemPlacedEvent(item_id=item_id, region=result.region.value, index=result.index))
            return result

    def discard(self, item_id: str) -> bool:
        """Remove an item that was consumed or thrown away. Returns False if it was not present."""
        with self._lock:
            if not self._aggregate.contains(item_id):
                return False
            self._aggregate = clear_item(self._aggregate, item_id)
            logger.debug("Discarded %s", item_id)
            self.event_bus.emit(ItemDiscardedEvent(item_id=item_id))
            return True


__all__ = ["EquipmentStore"]
