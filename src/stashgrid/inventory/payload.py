from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .mover import MoveRequest
from .regions import RegionId


class MoveRequestPayload(BaseModel):
    """Move request as sent by the drag-and-drop layer (camelCase or snake_case keys)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    source_region: RegionId = Field(..., alias="sourceRegionRef", description="Region the item is dragged from")
    source_index: int = Field(..., alias="sourceAnchorIndex", ge=0, description="Cell index at the source")
    item_id: str = Field(..., alias="itemId", min_length=1, description="Item being moved")
    dest_region: RegionId = Field(..., alias="destRegionRef", description="Region the item is dropped on")
    dest_index: int = Field(..., alias="destAnchorIndex", ge=0, description="Anchor cell index at the destination")

    @field_validator("source_region", "dest_region", mode="before")
    @classmethod
    def normalize_region(cls, v: object) -> object:
        # Region refs arrive in whatever case the UI used
        if isinstance(v, str):
            return v.strip().lower()
        return v

    def to_request(self) -> MoveRequest:
        return MoveRequest(
            source_region=self.source_region,
            source_index=self.source_index,
            item_id=self.item_id,
            dest_region=self.dest_region,
            dest_index=self.dest_index,
        )


__all__ = ["MoveRequestPayload"]
