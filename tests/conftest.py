import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from stashgrid.config import load_layout  # noqa: E402
from stashgrid.inventory import EquipmentAggregate, RegionId, occupied_cells  # noqa: E402
from stashgrid.items import default_catalog  # noqa: E402


@pytest.fixture
def catalog():
    return default_catalog()


@pytest.fixture
def layout():
    return load_layout()


@pytest.fixture
def empty(layout):
    return EquipmentAggregate.empty(layout)


@pytest.fixture
def seed(catalog):
    """Return a helper writing an item straight into a copy of an aggregate."""

    def _seed(aggregate, region_id: RegionId, index: int, item_id: str):
        out = aggregate.copy()
        region = out.regions[region_id]
        cells = occupied_cells(region, index, catalog.require(item_id))
        assert cells, f"{item_id} does not fit {region_id.value} at {index}"
        assert region.is_free(cells)
        region.write(item_id, index, cells)
        return out

    return _seed
