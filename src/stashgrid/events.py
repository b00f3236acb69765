import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple, Type, TypeVar, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ItemMovedEvent:
    item_id: str
    source_region: str
    source_index: int
    dest_region: str
    dest_index: int
    swapped: Optional[str] = None


@dataclass(frozen=True)
class ItemDroppedEvent:
    item_id: str
    reason: str  # "lost_blocker" or "evicted"


@dataclass(frozen=True)
class MoveRejectedEvent:
    item_id: str
    reason: str


@dataclass(frozen=True)
class ItemPlacedEvent:
    item_id: str
    region: str
    index: int


@dataclass(frozen=True)
class ItemDiscardedEvent:
    item_id: str


EquipmentEvent = Union[ItemMovedEvent, ItemDroppedEvent, MoveRejectedEvent, ItemPlacedEvent, ItemDiscardedEvent]
EVENT_TYPES: Tuple[type, ...] = (
    ItemMovedEvent,
    ItemDroppedEvent,
    MoveRejectedEvent,
    ItemPlacedEvent,
    ItemDiscardedEvent,
)

E = TypeVar("E", ItemMovedEvent, ItemDroppedEvent, MoveRejectedEvent, ItemPlacedEvent, ItemDiscardedEvent)
Handler = Callable[[EquipmentEvent], None]


class EventBus:
    """In-process bus for equipment events.

    Handlers subscribe to one event class or, via ``subscribe_all``, to every
    equipment event. Delivery is synchronous on the emitting thread: handlers
    for the exact event class first, then catch-all handlers, each in
    subscription order.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._by_type: Dict[type, List[Callable[..., None]]] = {}
        self._catch_all: List[Handler] = []

    def subscribe(self, event_type: Type[E], handler: Callable[[E], None]) -> None:
        if event_type not in EVENT_TYPES:
            raise TypeError(f"{getattr(event_type, '__name__', event_type)!r} is not an equipment event")
        with self._lock:
            self._by_type.setdefault(event_type, []).append(handler)

    def subscribe_all(self, handler: Handler) -> None:
        with self._lock:
            self._catch_all.append(handler)

    def unsubscribe(self, event_type: Type[E], handler: Callable[[E], None]) -> None:
        with self._lock:
            handlers = self._by_type.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)
                if not handlers:
                    self._by_type.pop(event_type, None)

    def unsubscribe_all(self, handler: Handler) -> None:
        with self._lock:
            if handler in self._catch_all:
                self._catch_all.remove(handler)

    def emit(self, event: EquipmentEvent) -> None:
        if type(event) not in EVENT_TYPES:
            raise TypeError(f"Cannot emit {type(event).__name__}: not an equipment event")
        with self._lock:
            handlers = list(self._by_type.get(type(event), ())) + list(self._catch_all)
        logger.debug("Emitting %s to %d handler(s)", event, len(handlers))
        for h in handlers:
            h(event)


__all__ = [
    "EVENT_TYPES",
    "EquipmentEvent",
    "EventBus",
    "ItemDiscardedEvent",
    "ItemDroppedEvent",
    "ItemMovedEvent",
    "ItemPlacedEvent",
    "MoveRejectedEvent",
]
