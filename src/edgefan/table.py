from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

import numpy as np

from .fan_types import FILTER_COLUMN, EdgeTable, EdgeValidationError


def n_rows(table: Mapping[str, np.ndarray]) -> int:
    for col in table.values():
        return int(col.shape[0])
    return 0


def validate_table(
    table: Mapping[str, np.ndarray | Sequence[object]],
    required: Iterable[str] = (),
) -> EdgeTable:
    """
    Returns a copy of `table` with every column as a 1-D array.
    Raises EdgeValidationError on missing required columns or ragged columns.
    """
    out: EdgeTable = {}
    for name, values in table.items():
        arr = np.asarray(values)
        if arr.ndim != 1:
            raise EdgeValidationError(f"column {name!r} must be 1-D, got {arr.shape}")
        out[name] = arr

    missing = [name for name in required if name not in out]
    if missing:
        raise EdgeValidationError(f"edge table missing columns: {', '.join(missing)}")

    lengths = {name: int(arr.shape[0]) for name, arr in out.items()}
    if len(set(lengths.values())) > 1:
        raise EdgeValidationError(f"edge table columns differ in length: {lengths}")
    return out


def filter_edges(table: Mapping[str, np.ndarray]) -> EdgeTable:
    """Drop rows whose `filter` is False, then drop the `filter` column itself."""
    if FILTER_COLUMN not in table:
        return dict(table)
    keep = table[FILTER_COLUMN]
    if keep.size == 0:
        # An empty column carries no dtype information of its own.
        keep = keep.astype(np.bool_)
    if keep.dtype != np.bool_:
        raise EdgeValidationError("filter must be logical")
    return {
        name: col[keep] for name, col in table.items() if name != FILTER_COLUMN
    }


def drop_columns(table: Mapping[str, np.ndarray], *names: str) -> EdgeTable:
    return {name: col for name, col in table.items() if name not in names}


def take_rows(table: Mapping[str, np.ndarray], rows: np.ndarray) -> EdgeTable:
    """Select (and reorder) rows by integer index or boolean mask."""
    return {name: col[rows] for name, col in table.items()}


def with_columns(table: Mapping[str, np.ndarray], **columns: np.ndarray) -> EdgeTable:
    out = dict(table)
    out.update(columns)
    return out


def concat_tables(tables: Sequence[Mapping[str, np.ndarray]]) -> EdgeTable:
    """Row-wise concatenation; every table must have the same column names."""
    if not tables:
        return {}
    names = list(tables[0].keys())
    for t in tables[1:]:
        if set(t.keys()) != set(names):
            raise EdgeValidationError(
                f"cannot concatenate tables with columns {sorted(names)} "
                f"and {sorted(t.keys())}"
            )
    return {name: np.concatenate([t[name] for t in tables]) for name in names}
