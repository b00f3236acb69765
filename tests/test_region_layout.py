import pytest

from stashgrid.config import build_layout, load_layout
from stashgrid.exceptions import LayoutError
from stashgrid.inventory.regions import GridSpec, RegionId, SlotSpec


def test_default_layout_regions(layout):
    ids = layout.region_ids()
    assert len(ids) == 17
    assert ids[0] is RegionId.HELMET
    assert ids[-3:] == [RegionId.RIG, RegionId.BAG, RegionId.BACKPACK]
    assert len(layout.slots()) == 14
    assert [c.cell_count for c in layout.containers()] == [4, 4, 6]


def test_default_slot_restrictions(layout):
    assert layout.get(RegionId.HELMET).allowed == frozenset({"helmet"})
    assert layout.get(RegionId.WEAPON).allowed == frozenset({"weapon"})
    assert layout.get(RegionId.SCOPE).allowed == frozenset({"module"})
    assert layout.get(RegionId.POCKET0).allowed is None
    assert layout.get(RegionId.SPECIAL2).allowed is None


def test_backpack_is_two_chained_blocks(layout):
    backpack = layout.get(RegionId.BACKPACK)
    assert isinstance(backpack, GridSpec)
    assert [(b.width, b.height, b.offset) for b in backpack.blocks] == [(2, 2, 0), (2, 1, 4)]
    assert backpack.describe() == "backpack: grid 2x2 + 2x1"


def test_overrides_deep_merge_over_defaults():
    layout = load_layout(overrides={"containers": {"bag": {"blocks": [[3, 2]]}}, "slots": {"pocket3": None}})
    assert layout.get(RegionId.BAG).cell_count == 6
    assert RegionId.POCKET3 not in layout
    assert RegionId.RIG in layout
    assert layout.get(RegionId.HELMET).allowed == frozenset({"helmet"})


def test_user_file_is_merged(tmp_path):
    path = tmp_path / "layout.yaml"
    path.write_text("slots:\n  pocket0: {allow: [medical]}\ncontainers:\n  backpack: null\n", encoding="utf-8")

    layout = load_layout(path)

    assert layout.get(RegionId.POCKET0).allowed == frozenset({"medical"})
    assert layout.get(RegionId.BACKPACK) is None
    assert len(layout.region_ids()) == 16


def test_missing_or_broken_file(tmp_path):
    with pytest.raises(LayoutError, match="not found"):
        load_layout(tmp_path / "nope.yaml")
    bad = tmp_path / "bad.yaml"
    bad.write_text("slots: [", encoding="utf-8")
    with pytest.raises(LayoutError, match="Failed to parse"):
        load_layout(bad)
    listing = tmp_path / "list.yaml"
    listing.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(LayoutError, match="mapping"):
        load_layout(listing)


@pytest.mark.parametrize(
    "data,message",
    [
        ({"slots": {"hat": {}}}, "Unknown region"),
        ({"slots": {"rig": {}}}, "is a container"),
        ({"containers": {"helmet": {"blocks": [[1, 1]]}}}, "is a slot"),
        ({"containers": {"rig": {"blocks": []}}}, "non-empty"),
        ({"containers": {"rig": {"blocks": [[0, 2]]}}}, "at least 1x1"),
        ({"containers": {"rig": {"blocks": [[2]]}}}, "width, height"),
        ({"slots": {"helmet": {"allow": "helmet"}}}, "list of sub-category"),
        ({"slots": {"helmet": []}}, "must be a mapping"),
        ({"pockets": {}}, "Unknown layout sections"),
    ],
)
def test_invalid_layout_data(data, message):
    with pytest.raises(LayoutError, match=message):
        build_layout(data)


def test_build_layout_preserves_order():
    layout = build_layout({"slots": {"weapon": {"allow": ["weapon"]}, "pocket0": {}}, "containers": {"bag": {"blocks": [[1, 1]]}}})
    assert layout.region_ids() == [RegionId.WEAPON, RegionId.POCKET0, RegionId.BAG]
    assert isinstance(layout.get(RegionId.POCKET0), SlotSpec)
