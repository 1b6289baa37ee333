from __future__ import annotations

import numpy as np

from ..utils import debug_helpers
from .assembly import create_fans
from .fan_types import (
    LONG_REQUIRED,
    WIDE_REQUIRED,
    EdgeTable,
    EdgeValidationError,
    FanParams,
    FanVariant,
    TableLike,
)
from .paths import subdivide_triples
from .table import (
    drop_columns,
    filter_edges,
    n_rows,
    take_rows,
    validate_table,
    with_columns,
)


def setup_fan(table: TableLike, params: FanParams) -> EdgeTable:
    """
    Wide input: one row per edge with x, y, xend, yend, from, to.

    Every edge becomes its own `group`; the start frame keeps (x, y) and the
    end frame takes (xend, yend) as its (x, y).
    """
    data = filter_edges(validate_table(table, WIDE_REQUIRED))
    debug_helpers.log_table("fan_input", data)
    data = with_columns(data, group=np.arange(n_rows(data), dtype=np.int64))
    end = with_columns(data, x=data["xend"], y=data["yend"])
    start = drop_columns(data, "xend", "yend")
    end = drop_columns(end, "xend", "yend")
    return create_fans(start, end, params)


def setup_fan2(table: TableLike, params: FanParams) -> EdgeTable:
    """
    Long input: two rows per edge sharing `group`, one per endpoint, each
    carrying that endpoint's own columns. After a stable sort by group the
    even rows are the start frame and the odd rows the end frame.
    """
    data = filter_edges(validate_table(table, LONG_REQUIRED))
    debug_helpers.log_table("fan2_input", data)
    rows = n_rows(data)
    if rows % 2 != 0:
        raise EdgeValidationError(
            f"long edge table needs two rows per edge, got {rows} rows"
        )
    data = take_rows(data, np.argsort(data["group"], kind="stable"))
    start = take_rows(data, np.arange(0, rows, 2))
    end = take_rows(data, np.arange(1, rows, 2))
    return create_fans(start, end, params)


def setup_fan0(table: TableLike, params: FanParams) -> EdgeTable:
    """Wide input, same triples as setup_fan; meant for native bezier backends."""
    return setup_fan(table, params)


_SETUP = {
    FanVariant.FULL: setup_fan,
    FanVariant.PER_ENDPOINT: setup_fan2,
    FanVariant.RAW: setup_fan0,
}


def compute_fans(
    table: TableLike,
    params: FanParams | None = None,
    variant: FanVariant = FanVariant.FULL,
) -> EdgeTable:
    """
    Anchor/control/anchor rows for every edge that survives filtering,
    sorted by `sequence_index`.
    """
    if params is None:
        params = FanParams()
    return _SETUP[variant](table, params)


def fan_paths(
    table: TableLike,
    params: FanParams | None = None,
    variant: FanVariant = FanVariant.FULL,
) -> EdgeTable:
    """
    Rows ready for drawing.

    FULL and PER_ENDPOINT are subdivided into params.n points per edge with an
    `index` column in [0, 1]; PER_ENDPOINT additionally blends the endpoint
    columns along the curve. RAW returns the triples themselves.
    """
    if params is None:
        params = FanParams()
    triples = compute_fans(table, params, variant)
    if not variant.subdivided:
        return triples
    return subdivide_triples(
        triples,
        int(params.n),
        interpolate=variant is FanVariant.PER_ENDPOINT,
    )
