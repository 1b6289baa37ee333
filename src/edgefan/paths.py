from __future__ import annotations

from collections.abc import Mapping

import numpy as np
from matplotlib import colors as mcolors

from ..utils import debug, debug_helpers
from .bezier import elevate_triples, sample_beziers
from .fan_types import INDEX_COLUMN, SEQUENCE_COLUMN, EdgeTable, EdgeValidationError
from .table import n_rows


COLOUR_HINTS = ("colour", "color", "fill")


def _is_colour_column(name: str, values: np.ndarray) -> bool:
    if not any(hint in name.lower() for hint in COLOUR_HINTS):
        return False
    if values.dtype.kind not in ("U", "S", "O") or values.size == 0:
        return False
    return all(isinstance(v, str) and mcolors.is_color_like(v) for v in values.tolist())


def _blend_colours(start: np.ndarray, end: np.ndarray, t: np.ndarray) -> np.ndarray:
    """Linear RGBA blend; (E,) start/end colours and (M,) t -> (E*M,) hex strings."""
    c0 = mcolors.to_rgba_array(start.tolist())
    c1 = mcolors.to_rgba_array(end.tolist())
    w = t[None, :, None]
    mixed = (c0[:, None, :] * (1.0 - w) + c1[:, None, :] * w).reshape(-1, 4)
    keep_alpha = bool(np.any(mixed[:, 3] < 1.0))
    return np.array([mcolors.to_hex(c, keep_alpha=keep_alpha) for c in mixed])


def _interpolate_column(
    name: str, start: np.ndarray, end: np.ndarray, t: np.ndarray
) -> np.ndarray:
    M = t.shape[0]
    if np.array_equal(start, end):
        return np.repeat(start, M)
    if start.dtype.kind in ("i", "u", "f") and end.dtype.kind in ("i", "u", "f"):
        s = start.astype(np.float64)[:, None]
        e = end.astype(np.float64)[:, None]
        return (s * (1.0 - t) + e * t).reshape(-1)
    if _is_colour_column(name, start) and _is_colour_column(name, end):
        return _blend_colours(start, end, t)
    # Anything else switches from the start value to the end value halfway.
    debug_helpers.log_once(
        f"switch:{name}", f"subdivide_triples: column {name!r} switches at index 0.5"
    )
    return np.where(t[None, :] >= 0.5, end[:, None], start[:, None]).reshape(-1)


def subdivide_triples(
    triples: Mapping[str, np.ndarray],
    n: int,
    *,
    interpolate: bool = False,
) -> EdgeTable:
    """
    Turn anchor/control/anchor triples into n points per edge.

    triples: 3 rows per edge, sorted by sequence_index (as from compute_fans)
    n: points per edge, including both anchors
    interpolate: blend passthrough columns from the start row towards the
        end row along the curve; otherwise every point keeps the start row.

    Returns E*n rows, edge-major, with `index` in [0, 1] along each edge.
    """
    rows = n_rows(triples)
    if rows % 3 != 0:
        raise EdgeValidationError(f"expected 3 rows per edge, got {rows} rows")
    if n < 2:
        raise EdgeValidationError("n must be >= 2")
    E = rows // 3

    xy = np.stack(
        [
            np.asarray(triples["x"], dtype=np.float64),
            np.asarray(triples["y"], dtype=np.float64),
        ],
        axis=1,
    ).reshape(E, 3, 2)
    segments = elevate_triples(xy[:, 0], xy[:, 1], xy[:, 2])
    points = sample_beziers(segments, n).reshape(-1, 2)
    t = np.linspace(0.0, 1.0, n, dtype=np.float64)
    debug.log(f"edges={E} n={n} interpolate={interpolate}", stage="subdivide")

    out: EdgeTable = {}
    for name, col in triples.items():
        if name in ("x", "y", SEQUENCE_COLUMN):
            continue
        start = col[0::3]
        if interpolate:
            out[name] = _interpolate_column(name, start, col[2::3], t)
        else:
            out[name] = np.repeat(start, n)
    out["x"] = points[:, 0].copy()
    out["y"] = points[:, 1].copy()
    out[INDEX_COLUMN] = np.tile(t, E)
    return out
