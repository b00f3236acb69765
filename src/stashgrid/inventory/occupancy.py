from __future__ import annotations

from typing import Tuple, Union

from ..items.models import ItemDescriptor
from .regions import GridSpec, Region, RegionKind, RegionSpec


def occupied_cells(
    region: Union[Region, RegionSpec], anchor_index: int, item: ItemDescriptor
) -> Tuple[int, ...]:
    """
    Cell indices the item would cover if anchored at ``anchor_index``.

    Equipment slots always report the single index; footprint legality there is
    the validator's concern. For grid containers the anchor is resolved to
    (column, row) inside its sub-grid and the footprint enumerated row-major.
    An empty tuple means the footprint leaves the sub-grid (or the anchor is out
    of range).
    """
    spec = region.spec if isinstance(region, Region) else region
    if spec.kind is RegionKind.SLOT:
        return (anchor_index,)

    assert isinstance(spec, GridSpec)
    located = spec.locate(anchor_index)
    if located is None:
        return ()
    block, col, row = located
    if col + item.width > block.width or row + item.height > block.height:
        return ()
    return tuple(
        GridSpec.index_in(block, col + dx, row + dy)
        for dy in range(item.height)
        for dx in range(item.width)
    )


__all__ = ["occupied_cells"]
