from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

logger = logging.getLogger(__name__)

WILDCARD_SUB_CATEGORY = "any"


class ItemCategory(Enum):
    CONSUMABLE = "consumable"
    GEAR = "gear"
    WEAPON = "weapon"
    ATTACHMENT = "attachment"
    VALUABLE = "valuable"
    KEY = "key"


@dataclass(frozen=True)
class ItemDescriptor:
    """
    Immutable catalog entry. The footprint is width x height in cells and the
    sub-category is what equipment slot allow-lists match against.
    """

    id: str
    name: str
    category: ItemCategory
    sub_category: str = WILDCARD_SUB_CATEGORY
    width: int = 1
    height: int = 1
    value: int = 0
    stackable: bool = False
    max_stack: int = 1

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Item id must be non-empty")
        if self.width < 1 or self.height < 1:
            raise ValueError(f"Item {self.id} footprint must be at least 1x1, got {self.width}x{self.height}")
        if self.value < 0:
            raise ValueError(f"Item {self.id} value cannot be negative")
        if self.max_stack < 1:
            raise ValueError(f"Item {self.id} max_stack must be >= 1")
        if not self.stackable and self.max_stack != 1:
            raise ValueError(f"Non-stackable item {self.id} cannot have max_stack {self.max_stack}")

    @property
    def footprint(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def is_single_cell(self) -> bool:
        return self.width == 1 and self.height == 1

    @property
    def is_wildcard(self) -> bool:
        return self.sub_category == WILDCARD_SUB_CATEGORY

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ItemDescriptor":
        stackable = bool(data.get("stackable", False))
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", data["id"])),
            category=ItemCategory(str(data["category"]).lower()),
            sub_category=str(data.get("sub_category", WILDCARD_SUB_CATEGORY)),
            width=int(data.get("width", 1)),
            height=int(data.get("height", 1)),
            value=int(data.get("value", 0)),
            stackable=stackable,
            max_stack=int(data.get("max_stack", 1)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "sub_category": self.sub_category,
            "width": self.width,
            "height": self.height,
            "value": self.value,
            "stackable": self.stackable,
            "max_stack": self.max_stack,
        }


def format_roubles(value: int) -> str:
    """Format a value with space-separated thousands and the rouble sign, e.g. ``50 000 ₽``."""
    return f"{value:,}".replace(",", " ") + " ₽"


__all__ = [
    "ItemCategory",
    "ItemDescriptor",
    "WILDCARD_SUB_CATEGORY",
    "format_roubles",
]
