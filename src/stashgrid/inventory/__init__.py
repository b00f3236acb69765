"""
Spatial allocation engine: regions, occupancy, placement rules, and the
move/swap resolver operating on an actor's equipment aggregate.
"""
from .aggregate import EquipmentAggregate, check_integrity, clear_item, total_value
from .autoplace import PlacementResult, find_free_anchor, place_item
from .mover import MoveRequest, MoveResult, MoveStatus, RejectReason, move
from .occupancy import occupied_cells
from .regions import CellRef, GridSpec, Region, RegionId, RegionKind, SlotSpec, SubGrid
from .validation import can_place

__all__ = [
    "CellRef",
    "EquipmentAggregate",
    "GridSpec",
    "MoveRequest",
    "MoveResult",
    "MoveStatus",
    "PlacementResult",
    "Region",
    "RegionId",
    "RegionKind",
    "RejectReason",
    "SlotSpec",
    "SubGrid",
    "can_place",
    "check_integrity",
    "clear_item",
    "find_free_anchor",
    "move",
    "occupied_cells",
    "place_item",
    "total_value",
]
