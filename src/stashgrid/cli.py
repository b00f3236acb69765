from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from . import __version__
from .config.layout import RegionLayout, load_layout
from .exceptions import CatalogError, StashgridError
from .inventory.aggregate import EquipmentAggregate, total_value
from .inventory.mover import MoveRequest, move
from .inventory.regions import GridSpec, Region, RegionId, RegionKind
from .items.catalog import ItemCatalog, default_catalog
from .items.models import format_roubles

logger = logging.getLogger(__name__)


def _load_catalog(args: argparse.Namespace) -> ItemCatalog:
    return ItemCatalog.from_yaml(args.catalog) if args.catalog else default_catalog()


def _load_layout(args: argparse.Namespace) -> RegionLayout:
    return load_layout(Path(args.layout)) if args.layout else load_layout()


def _load_snapshot(path: Path, layout: RegionLayout, catalog: ItemCatalog) -> EquipmentAggregate:
    with path.open("r", encoding="utf-8") as fh:
        data = json.load(fh)
    return EquipmentAggregate.from_dict(data, layout, catalog)


def _parse_address(value: str) -> Tuple[RegionId, int]:
    name, _, index = value.partition(":")
    try:
        return RegionId.parse(name), int(index or 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected REGION[:INDEX], got {value!r}") from None


def render_region(region: Region) -> List[str]:
    """Text rows for one region; covered cells show the anchor's id in parentheses."""
    if region.kind is RegionKind.SLOT:
        ref = region.cells[0]
        return [f"{region.region_id.value:<10} [{ref.item_id if ref else '.'}]"]
    spec = region.spec
    assert isinstance(spec, GridSpec)
    lines = [f"{region.region_id.value}:"]
    for block in spec.blocks:
        for row in range(block.height):
            cells = []
            for col in range(block.width):
                idx = GridSpec.index_in(block, col, row)
                ref = region.cells[idx]
                if ref is None:
                    cells.append(".")
                elif ref.anchor == idx:
                    cells.append(ref.item_id)
                else:
                    cells.append(f"({ref.item_id})")
            lines.append("  " + " | ".join(f"{c:<16}" for c in cells).rstrip())
    return lines


def _cmd_validate_catalog(args: argparse.Namespace) -> int:
    try:
        catalog = ItemCatalog.from_yaml(args.path)
    except CatalogError as e:
        print(f"INVALID: {args.path}\n{e.to_human()}")
        return 1
    print(f"OK: {args.path} ({len(catalog)} items)")
    return 0


def _cmd_show(args: argparse.Namespace) -> int:
    catalog = _load_catalog(args)
    agg = _load_snapshot(Path(args.snapshot), _load_layout(args), catalog)
    for region in agg:
        for line in render_region(region):
            print(line)
    print(f"Total value: {format_roubles(total_value(agg, catalog))}")
    return 0


def _cmd_move(args: argparse.Namespace) -> int:
    catalog = _load_catalog(args)
    agg = _load_snapshot(Path(args.snapshot), _load_layout(args), catalog)
    (src_region, src_index), (dst_region, dst_index) = args.source, args.dest
    request = MoveRequest(src_region, src_index, args.item, dst_region, dst_index)
    result = move(agg, request, catalog)
    if not result.applied:
        assert result.reason is not None
        print(f"REJECTED: {result.reason.value}")
        return 1
    if result.swapped:
        print(f"Swapped: {result.swapped}")
    for dropped in result.dropped:
        print(f"Dropped: {dropped}")
    payload = json.dumps(result.aggregate.to_dict(), indent=2)
    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(payload + "\n", encoding="utf-8")
    else:
        print(payload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="stashgrid", description="Inventory grid placement tools")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    p.add_argument("--catalog", help="Item catalog YAML (default: built-in catalog)")
    p.add_argument("--layout", help="Layout override YAML merged over the default layout")
    sub = p.add_subparsers(dest="cmd", required=True)

    v = sub.add_parser("validate-catalog", help="Validate an item catalog YAML file")
    v.add_argument("path", help="Path to the catalog YAML")
    v.set_defaults(func=_cmd_validate_catalog)

    s = sub.add_parser("show", help="Render an equipment snapshot as text")
    s.add_argument("snapshot", help="Equipment snapshot JSON")
    s.set_defaults(func=_cmd_show)

    m = sub.add_parser("move", help="Apply a single move to an equipment snapshot")
    m.add_argument("snapshot", help="Equipment snapshot JSON")
    m.add_argument("--item", required=True, help="Item id being moved")
    m.add_argument("--from", dest="source", required=True, type=_parse_address, help="REGION[:INDEX]")
    m.add_argument("--to", dest="dest", required=True, type=_parse_address, help="REGION[:INDEX]")
    m.add_argument("--out", help="Write the new snapshot here instead of stdout")
    m.set_defaults(func=_cmd_move)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except (StashgridError, OSError, json.JSONDecodeError) as e:
        logger.error("%s", e)
        return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
