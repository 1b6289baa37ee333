from __future__ import annotations

from collections.abc import Mapping

import numpy as np
import svgwrite  # type: ignore[reportMissingTypeStubs]
from matplotlib import colors as mcolors

from .bezier import beziers_to_svg_path_d, elevate_triples
from .fan_types import INDEX_COLUMN, EdgeValidationError, FanVariant
from .table import n_rows

# Edge style columns; the node_ forms come from per-endpoint (long) tables.
COLOUR_COLUMNS = ("colour", "node_colour")
ALPHA_COLUMNS = ("alpha", "node_alpha")
WIDTH_COLUMNS = ("width", "node_width")


def _stroke(colour: object, alpha: object, default: str) -> tuple[str, float]:
    """SVG-safe hex colour plus opacity (colour alpha times the alpha column)."""
    rgba = mcolors.to_rgba(str(colour) if colour is not None else default)
    opacity = rgba[3] * (float(alpha) if alpha is not None else 1.0)
    return mcolors.to_hex(rgba, keep_alpha=False), float(opacity)


def _column_value(
    fans: Mapping[str, np.ndarray], names: tuple[str, ...], row: int
) -> object:
    for name in names:
        if name in fans:
            return fans[name][row]
    return None


def _edge_slices(fans: Mapping[str, np.ndarray], variant: FanVariant) -> list[slice]:
    rows = n_rows(fans)
    if not variant.subdivided:
        if rows % 3 != 0:
            raise EdgeValidationError(f"expected 3 rows per edge, got {rows} rows")
        return [slice(i, i + 3) for i in range(0, rows, 3)]
    if INDEX_COLUMN not in fans:
        raise EdgeValidationError("subdivided fans need an index column")
    starts = np.flatnonzero(fans[INDEX_COLUMN] == 0.0).tolist()
    ends = starts[1:] + [rows]
    return [slice(a, b) for a, b in zip(starts, ends)]


def export_fans_svg(
    out_path: str,
    fans: Mapping[str, np.ndarray],
    variant: FanVariant,
    stroke: str = "#000000",
    stroke_width: float | str = 1.0,
    viewbox: tuple[float, float, float, float] | None = None,
    canvas_size: tuple[float, float] | tuple[str, str] | None = None,
    nodes: Mapping[str, np.ndarray] | None = None,
    node_radius: float = 3.0,
    node_fill: str = "#444444",
) -> None:
    """
    fans: output of fan_paths for `variant`
    nodes: optional table with x, y drawn as circles on top of the edges

    RAW triples are written as native cubic paths; subdivided edges as
    polylines, or as one line per step when colour/alpha change along the edge.
    Optional `colour`, `alpha` and `width` columns style each edge; without
    them the `node_colour`, `node_alpha` and `node_width` columns of a
    per-endpoint table are used, so blended endpoint styles are drawn.
    """
    xs = np.asarray(fans["x"], dtype=np.float64)
    ys = np.asarray(fans["y"], dtype=np.float64)

    # Determine viewBox from data if not provided
    if viewbox is None:
        allp = np.stack([xs, ys], axis=1)
        if nodes is not None:
            node_p = np.stack(
                [
                    np.asarray(nodes["x"], dtype=np.float64),
                    np.asarray(nodes["y"], dtype=np.float64),
                ],
                axis=1,
            )
            allp = np.vstack([allp, node_p])
        if allp.shape[0] == 0:
            allp = np.zeros((1, 2))
        minx, miny = allp.min(axis=0)
        maxx, maxy = allp.max(axis=0)
        pad = 10.0 + node_radius
        viewbox = (
            float(minx - pad),
            float(miny - pad),
            float((maxx - minx) + 2 * pad),
            float((maxy - miny) + 2 * pad),
        )

    if canvas_size is None:
        dwg = svgwrite.Drawing(out_path, profile="tiny")
    else:
        dwg = svgwrite.Drawing(out_path, profile="tiny", size=canvas_size)
    dwg.attribs["viewBox"] = f"{viewbox[0]} {viewbox[1]} {viewbox[2]} {viewbox[3]}"

    for sl in _edge_slices(fans, variant):
        first = sl.start
        width = _column_value(fans, WIDTH_COLUMNS, first)
        edge_width = float(width) if width is not None else stroke_width

        if not variant.subdivided:
            p = np.stack([xs[sl], ys[sl]], axis=1)
            seg = elevate_triples(p[0:1], p[1:2], p[2:3])
            colour, opacity = _stroke(
                _column_value(fans, COLOUR_COLUMNS, first),
                _column_value(fans, ALPHA_COLUMNS, first),
                stroke,
            )
            dwg.add(
                dwg.path(
                    d=beziers_to_svg_path_d(seg),
                    stroke=colour,
                    fill="none",
                    stroke_width=edge_width,
                    stroke_opacity=opacity,
                )
            )
            continue

        styles = [
            _stroke(
                _column_value(fans, COLOUR_COLUMNS, i),
                _column_value(fans, ALPHA_COLUMNS, i),
                stroke,
            )
            for i in range(sl.start, sl.stop)
        ]
        points = [(float(x), float(y)) for x, y in zip(xs[sl], ys[sl])]
        if len(set(styles)) == 1:
            colour, opacity = styles[0]
            dwg.add(
                dwg.polyline(
                    points=points,
                    stroke=colour,
                    fill="none",
                    stroke_width=edge_width,
                    stroke_opacity=opacity,
                )
            )
            continue

        # Gradient edge: each step takes the style of its first point.
        for k in range(len(points) - 1):
            colour, opacity = styles[k]
            dwg.add(
                dwg.line(
                    start=points[k],
                    end=points[k + 1],
                    stroke=colour,
                    stroke_width=edge_width,
                    stroke_opacity=opacity,
                )
            )

    if nodes is not None:
        for x, y in zip(nodes["x"].tolist(), nodes["y"].tolist()):
            dwg.add(
                dwg.circle(center=(float(x), float(y)), r=node_radius, fill=node_fill)
            )

    dwg.save()
