import pytest

from stashgrid.exceptions import IntegrityError, SnapshotError
from stashgrid.inventory import (
    CellRef,
    EquipmentAggregate,
    RegionId,
    check_integrity,
    clear_item,
    total_value,
)
from stashgrid.items import format_roubles

R = RegionId


def test_empty_aggregate_has_every_layout_region(layout, empty):
    assert list(empty.regions) == layout.region_ids()
    assert len(empty.regions) == 17
    assert len(empty.regions[R.BACKPACK].cells) == 6
    assert empty.item_ids() == []


def test_clear_item_removes_every_cell(empty, seed):
    agg = seed(seed(empty, R.RIG, 0, "golden_freddy"), R.POCKET0, 0, "medkit")

    cleared = clear_item(agg, "golden_freddy")

    assert cleared.regions[R.RIG].cells == [None] * 4
    assert cleared.regions[R.POCKET0].cells == [CellRef("medkit", 0)]
    # input untouched
    assert agg.regions[R.RIG].cells == [CellRef("golden_freddy", 0)] * 4


def test_clear_item_missing_is_harmless(empty):
    assert clear_item(empty, "medkit").to_dict() == empty.to_dict()


def test_total_value_counts_multi_cell_items_once(empty, seed, catalog):
    agg = seed(seed(empty, R.RIG, 0, "golden_freddy"), R.POCKET0, 0, "medkit")

    assert total_value(agg, catalog) == 53500
    assert format_roubles(total_value(agg, catalog)) == "53 500 ₽"


def test_total_value_ignores_unknown_items(empty, seed, catalog):
    agg = seed(empty, R.POCKET0, 0, "medkit")
    agg.regions[R.POCKET1].write("mystery_box", 0, [0])

    assert total_value(agg, catalog) == 3500
    assert total_value(empty, catalog) == 0


def test_snapshot_round_trip(empty, seed, layout, catalog):
    agg = seed(seed(empty, R.BACKPACK, 4, "tablet"), R.HELMET, 0, "security_helmet")

    data = agg.to_dict()
    assert data["regions"]["backpack"]["cells"][4] == {"item": "tablet", "anchor": 4}
    restored = EquipmentAggregate.from_dict(data, layout, catalog)

    assert restored == agg


def test_snapshot_missing_regions_start_empty(layout):
    agg = EquipmentAggregate.from_dict({"regions": {"pocket0": {"cells": [{"item": "knife", "anchor": 0}]}}}, layout)

    assert agg.locate("knife") == (R.POCKET0, 0)
    assert agg.regions[R.RIG].cells == [None] * 4


@pytest.mark.parametrize(
    "data",
    [
        {},
        {"regions": {"rig": {"cells": [{"item": "medkit"}, None, None, None]}}},
        {"regions": {"rig": {"cells": [{"item": "medkit", "anchor": -1}, None, None, None]}}},
        {"regions": {"rig": {}}},
    ],
)
def test_snapshot_schema_violations(layout, data):
    with pytest.raises(SnapshotError):
        EquipmentAggregate.from_dict(data, layout)


def test_snapshot_unknown_region(layout):
    with pytest.raises(SnapshotError, match="Unknown region"):
        EquipmentAggregate.from_dict({"regions": {"sidecar": {"cells": [None]}}}, layout)


def test_snapshot_wrong_cell_count(layout):
    with pytest.raises(SnapshotError, match="expects 4 cells"):
        EquipmentAggregate.from_dict({"regions": {"rig": {"cells": [None]}}}, layout)


def test_snapshot_region_outside_layout(catalog):
    from stashgrid.config import load_layout

    layout = load_layout(overrides={"containers": {"backpack": None}})
    with pytest.raises(SnapshotError, match="not part of this layout"):
        EquipmentAggregate.from_dict({"regions": {"backpack": {"cells": [None] * 6}}}, layout)


def test_snapshot_partial_footprint_fails_integrity(layout, catalog):
    cells = [{"item": "tablet", "anchor": 0}, None, None, None]
    with pytest.raises(IntegrityError, match="expected"):
        EquipmentAggregate.from_dict({"regions": {"rig": {"cells": cells}}}, layout, catalog)


def test_integrity_rejects_item_in_two_regions(empty, seed, catalog):
    agg = seed(seed(empty, R.POCKET0, 0, "medkit"), R.POCKET1, 0, "medkit")

    with pytest.raises(IntegrityError, match="both"):
        check_integrity(agg, catalog)


def test_integrity_rejects_multi_cell_item_in_slot(empty, catalog):
    agg = empty.copy()
    agg.regions[R.POCKET0].write("tablet", 0, [0])

    with pytest.raises(IntegrityError, match="does not fit"):
        check_integrity(agg, catalog)


def test_integrity_rejects_orphan_cells(empty, catalog):
    agg = empty.copy()
    agg.regions[R.RIG].write("medkit", 0, [1])

    with pytest.raises(IntegrityError, match="no anchor cell"):
        check_integrity(agg, catalog)


def test_integrity_accepts_valid_layout(empty, seed, catalog):
    agg = seed(seed(empty, R.RIG, 0, "foxy_plush"), R.RIG, 1, "medkit")
    check_integrity(agg, catalog)


def test_copy_shares_specs_but_not_cells(empty, seed):
    agg = seed(empty, R.RIG, 0, "tablet")

    dup = agg.copy()
    dup.regions[R.RIG].remove("tablet")

    assert dup.regions[R.RIG].spec is agg.regions[R.RIG].spec
    assert dup.regions[R.RIG].cells is not agg.regions[R.RIG].cells
    assert agg.regions[R.RIG].indices_of("tablet") == [0, 1]
    assert list(dup.regions) == list(agg.regions)
