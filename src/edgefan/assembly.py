from __future__ import annotations

from collections.abc import Mapping

import numpy as np
from beartype import beartype
from jaxtyping import Float, jaxtyped

from ..utils import debug, debug_helpers
from .fan_types import SEQUENCE_COLUMN, EdgeTable, FanParams
from .geometry import fan_control_points
from .grouping import fan_positions
from .table import concat_tables, n_rows, take_rows, with_columns


def table_coords(table: Mapping[str, np.ndarray]) -> Float[np.ndarray, "N 2"]:
    """(N,2) float64 array from the x/y columns."""
    return np.stack(
        [
            np.asarray(table["x"], dtype=np.float64),
            np.asarray(table["y"], dtype=np.float64),
        ],
        axis=1,
    ).reshape(-1, 2)


def _with_coords(table: Mapping[str, np.ndarray], xy: np.ndarray) -> EdgeTable:
    return with_columns(table, x=xy[:, 0].copy(), y=xy[:, 1].copy())


@jaxtyped(typechecker=beartype)
def assemble_triples(
    start: dict[str, np.ndarray],
    control: Float[np.ndarray, "N 2"],
    end: dict[str, np.ndarray],
) -> dict[str, np.ndarray]:
    """
    start, end: endpoint frames with identical columns, one row per edge
    control: (N,2) control point per edge

    Returns 3N rows ordered start_0, control_0, end_0, start_1, ...
    with `sequence_index` 3k, 3k+1, 3k+2 for the k-th edge.
    """
    N = control.shape[0]
    base = np.arange(N, dtype=np.int64) * 3
    frames = [
        _with_coords(start, table_coords(start)),
        _with_coords(start, control),
        _with_coords(end, table_coords(end)),
    ]
    frames = [
        with_columns(frame, **{SEQUENCE_COLUMN: base + j})
        for j, frame in enumerate(frames)
    ]
    data = concat_tables(frames)
    order = np.argsort(data[SEQUENCE_COLUMN], kind="stable")
    return take_rows(data, order)


def create_fans(
    start: Mapping[str, np.ndarray],
    end: Mapping[str, np.ndarray],
    params: FanParams,
) -> EdgeTable:
    """
    Fan out parallel edges given the two endpoint frames of every edge.

    Grouping uses `from` of the start frame and `to` of the end frame, so the
    long format (one row per endpoint) and the wide format behave the same.
    """
    N = n_rows(start)
    if params.panel_column in start:
        panel = start[params.panel_column]
    else:
        panel = np.ones(N, dtype=np.int64)

    offset, max_fans = fan_positions(start["from"], end["to"], panel)
    debug_helpers.log_array("fan_offset", offset)
    debug.log(
        f"edges={N} max_fans={max_fans} spread={params.spread:g}", stage="create_fans"
    )

    p0 = table_coords(start)
    p2 = table_coords(end)
    control = fan_control_points(p0, p2, offset, max_fans, float(params.spread))
    debug_helpers.log_array("fan_control", control)
    return assemble_triples(dict(start), control, dict(end))
