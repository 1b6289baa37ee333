from __future__ import annotations

import argparse
from pathlib import Path
from typing import Protocol, cast

from .edgefan.export_svg import export_fans_svg
from .edgefan.fan_types import FanParams, FanVariant
from .edgefan.table import n_rows
from .edgefan.table_io import edges_long, edges_wide, read_table_csv
from .edgefan.variants import fan_paths
from .utils import debug, debug_helpers


class CliArgs(Protocol):
    nodes: str
    edges: str
    output: str
    variant: str
    spread: float
    n: int
    stroke: str
    stroke_width: float
    node_radius: float
    verbose: bool


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(
        description="Draw parallel edges between fixed node positions as fans"
    )
    ap.add_argument("--nodes", required=True, help="CSV with name,x,y (+ extras)")
    ap.add_argument(
        "--edges", required=True, help="CSV with from,to (+ filter, colour, ...)"
    )
    ap.add_argument("--output", required=True, help="Output SVG")
    ap.add_argument(
        "--variant",
        choices=[v.value for v in FanVariant],
        default=FanVariant.FULL.value,
        help="fan: subdivided curves, fan2: endpoint-interpolated, fan0: raw beziers",
    )
    ap.add_argument(
        "--spread", type=float, default=1.0, help="Fan width multiplier (>1 wider)"
    )
    ap.add_argument("--n", type=int, default=100, help="Points per subdivided edge")
    ap.add_argument("--stroke", default="#000000", help="Default edge colour")
    ap.add_argument("--stroke_width", type=float, default=1.0)
    ap.add_argument("--node_radius", type=float, default=3.0)
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logs")

    args = cast(CliArgs, ap.parse_args(argv))
    with debug.verbose_logging(args.verbose):
        _render(args)


def _render(args: CliArgs) -> None:
    if args.stroke_width <= 0:
        raise ValueError("stroke_width must be positive")
    if args.node_radius < 0:
        raise ValueError("node_radius must be >= 0")

    variant = FanVariant(args.variant)
    params = FanParams(spread=args.spread, n=args.n)

    # 1) CSV -> node and edge tables
    nodes = read_table_csv(Path(args.nodes))
    edges = read_table_csv(Path(args.edges))
    debug_helpers.log_table("nodes", nodes)
    debug_helpers.log_table("edges", edges)

    # 2) Attach endpoint positions in the layout the variant expects
    if variant is FanVariant.PER_ENDPOINT:
        table = edges_long(nodes, edges)
    else:
        table = edges_wide(nodes, edges)

    # 3) Fan geometry (+ subdivision)
    fans = fan_paths(table, params, variant)
    debug_helpers.log_table("fans", fans)

    # 4) SVG
    export_fans_svg(
        args.output,
        fans,
        variant,
        stroke=args.stroke,
        stroke_width=args.stroke_width,
        nodes=nodes,
        node_radius=args.node_radius,
    )
    print(f"Saved: {args.output}  rows={n_rows(fans)}  variant={variant.value}")


if __name__ == "__main__":
    main()
