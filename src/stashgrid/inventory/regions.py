from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)


class RegionId(str, Enum):
    """Every storage region an actor can own. Each name has a statically known kind."""

    HELMET = "helmet"
    ARMOR = "armor"
    CLOTHES = "clothes"
    POCKET0 = "pocket0"
    POCKET1 = "pocket1"
    POCKET2 = "pocket2"
    POCKET3 = "pocket3"
    SPECIAL0 = "special0"
    SPECIAL1 = "special1"
    SPECIAL2 = "special2"
    WEAPON = "weapon"
    SCOPE = "scope"
    TACTICAL = "tactical"
    SUPPRESSOR = "suppressor"
    RIG = "rig"
    BAG = "bag"
    BACKPACK = "backpack"

    @property
    def is_container(self) -> bool:
        return self in CONTAINER_IDS

    @classmethod
    def parse(cls, value: Union[str, "RegionId"]) -> "RegionId":
        if isinstance(value, RegionId):
            return value
        return cls(str(value).strip().lower())


CONTAINER_IDS: FrozenSet[RegionId] = frozenset({RegionId.RIG, RegionId.BAG, RegionId.BACKPACK})
SLOT_IDS: Tuple[RegionId, ...] = tuple(r for r in RegionId if r not in CONTAINER_IDS)


class RegionKind(Enum):
    SLOT = "slot"
    GRID = "grid"


@dataclass(frozen=True)
class SubGrid:
    """A fixed-size block of a grid container; ``offset`` is its first container index."""

    width: int
    height: int
    offset: int = 0

    @property
    def cell_count(self) -> int:
        return self.width * self.height

    def contains(self, index: int) -> bool:
        return self.offset <= index < self.offset + self.cell_count


@dataclass(frozen=True)
class SlotSpec:
    """Single-cell equipment slot. ``allowed`` of None means any 1x1 item."""

    region_id: RegionId
    allowed: Optional[FrozenSet[str]] = None

    kind = RegionKind.SLOT

    @property
    def cell_count(self) -> int:
        return 1

    def describe(self) -> str:
        if self.allowed is None:
            return f"{self.region_id.value}: slot (any)"
        return f"{self.region_id.value}: slot ({', '.join(sorted(self.allowed))})"


@dataclass(frozen=True)
class GridSpec:
    """
    Grid container made of one or more sub-grids chained end to end.

    The container is addressed by a single contiguous index range; the cell
    table mapping each index to (block, column, row) is built once here so
    occupancy lookups never re-derive block boundaries.
    """

    region_id: RegionId
    blocks: Tuple[SubGrid, ...]
    _cells: Tuple[Tuple[int, int, int], ...] = field(init=False, repr=False, compare=False)

    kind = RegionKind.GRID

    def __post_init__(self) -> None:
        if not self.blocks:
            raise ValueError(f"Grid container {self.region_id.value} needs at least one block")
        table: List[Tuple[int, int, int]] = []
        for b, block in enumerate(self.blocks):
            if block.width < 1 or block.height < 1:
                raise ValueError(f"Block {b} of {self.region_id.value} must be at least 1x1")
            if block.offset != len(table):
                raise ValueError(
                    f"Block {b} of {self.region_id.value} starts at {block.offset}, expected {len(table)}"
                )
            for row in range(block.height):
                for col in range(block.width):
                    table.append((b, col, row))
        object.__setattr__(self, "_cells", tuple(table))

    @classmethod
    def chained(cls, region_id: RegionId, shapes: Iterable[Tuple[int, int]]) -> "GridSpec":
        """Build a container from (width, height) shapes, assigning offsets in order."""
        blocks = []
        offset = 0
        for w, h in shapes:
            blocks.append(SubGrid(width=w, height=h, offset=offset))
            offset += w * h
        return cls(region_id=region_id, blocks=tuple(blocks))

    @property
    def cell_count(self) -> int:
        return len(self._cells)

    @property
    def width(self) -> int:
        return max(b.width for b in self.blocks)

    @property
    def height(self) -> int:
        return sum(b.height for b in self.blocks)

    def locate(self, index: int) -> Optional[Tuple[SubGrid, int, int]]:
        """Resolve a container index to (block, column, row), or None when out of range."""
        if not 0 <= index < len(self._cells):
            return None
        b, col, row = self._cells[index]
        return self.blocks[b], col, row

    @staticmethod
    def index_in(block: SubGrid, col: int, row: int) -> int:
        return block.offset + row * block.width + col

    def describe(self) -> str:
        shapes = " + ".join(f"{b.width}x{b.height}" for b in self.blocks)
        return f"{self.region_id.value}: grid {shapes}"


RegionSpec = Union[SlotSpec, GridSpec]


@dataclass(frozen=True)
class CellRef:
    """An occupied cell: the item it belongs to and that item's anchor index."""

    item_id: str
    anchor: int


@dataclass
class Region:
    """Mutable cell state of one region. Only touched on working copies inside the engine."""

    spec: RegionSpec
    cells: List[Optional[CellRef]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.cells:
            self.cells = [None] * self.spec.cell_count
        elif len(self.cells) != self.spec.cell_count:
            raise ValueError(
                f"Region {self.region_id.value} expects {self.spec.cell_count} cells, got {len(self.cells)}"
            )

    @property
    def region_id(self) -> RegionId:
        return self.spec.region_id

    @property
    def kind(self) -> RegionKind:
        return self.spec.kind

    def cell(self, index: int) -> Optional[CellRef]:
        if not 0 <= index < len(self.cells):
            return None
        return self.cells[index]

    def anchored_at(self, index: int) -> Optional[str]:
        """Item id whose anchor is exactly this cell, if any."""
        ref = self.cell(index)
        if ref is not None and ref.anchor == index:
            return ref.item_id
        return None

    def anchor_of(self, item_id: str) -> Optional[int]:
        for idx, ref in enumerate(self.cells):
            if ref is not None and ref.item_id == item_id and ref.anchor == idx:
                return idx
        return None

    def indices_of(self, item_id: str) -> List[int]:
        return [idx for idx, ref in enumerate(self.cells) if ref is not None and ref.item_id == item_id]

    def contains(self, item_id: str) -> bool:
        return any(ref is not None and ref.item_id == item_id for ref in self.cells)

    def is_free(self, indices: Iterable[int]) -> bool:
        return all(self.cell(i) is None for i in indices)

    def occupants(self, indices: Iterable[int]) -> List[str]:
        """Distinct item ids touching any of the given cells, in index order."""
        seen: Dict[str, None] = {}
        for i in indices:
            ref = self.cell(i)
            if ref is not None:
                seen.setdefault(ref.item_id, None)
        return list(seen)

    def remove(self, item_id: str) -> int:
        """Clear every cell referencing the item; returns the number of cells cleared."""
        cleared = 0
        for idx, ref in enumerate(self.cells):
            if ref is not None and ref.item_id == item_id:
                self.cells[idx] = None
                cleared += 1
        if cleared:
            logger.debug("Cleared %s from %s (%d cells)", item_id, self.region_id.value, cleared)
        return cleared

    def write(self, item_id: str, anchor: int, indices: Iterable[int]) -> None:
        for idx in indices:
            self.cells[idx] = CellRef(item_id=item_id, anchor=anchor)
        logger.debug("Wrote %s into %s at anchor %d", item_id, self.region_id.value, anchor)

    def items(self) -> List[str]:
        """Distinct item ids anchored in this region, in index order."""
        return [ref.item_id for idx, ref in enumerate(self.cells) if ref is not None and ref.anchor == idx]


__all__ = [
    "CONTAINER_IDS",
    "CellRef",
    "GridSpec",
    "Region",
    "RegionId",
    "RegionKind",
    "RegionSpec",
    "SLOT_IDS",
    "SlotSpec",
    "SubGrid",
]
