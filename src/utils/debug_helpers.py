from __future__ import annotations

from collections.abc import Mapping

import numpy as np

from . import debug

_seen: set[str] = set()


def log_once(key: str, message: str) -> None:
    if debug.is_verbose() and key not in _seen:
        _seen.add(key)
        debug.log(message)


def log_array(name: str, arr: np.ndarray) -> None:
    """Log shape, dtype and finite range of a numeric array."""
    if not debug.is_verbose():
        return
    if arr.size == 0 or not np.issubdtype(arr.dtype, np.number):
        debug.log(f"{name}: shape={arr.shape} dtype={arr.dtype}")
        return
    finite_mask = np.isfinite(arr)
    finite_all = bool(finite_mask.all())
    if finite_mask.any():
        finite_vals = arr[finite_mask]
        min_val = float(np.min(finite_vals))
        max_val = float(np.max(finite_vals))
    else:
        min_val = float("nan")
        max_val = float("nan")
    debug.log(
        f"{name}: shape={arr.shape} dtype={arr.dtype} "
        f"finite_all={finite_all} min={min_val:.6g} max={max_val:.6g}"
    )


def log_table(name: str, table: Mapping[str, np.ndarray]) -> None:
    """Log row count and column dtypes of an edge table."""
    if not debug.is_verbose():
        return
    n_rows = len(next(iter(table.values()))) if table else 0
    cols = " ".join(f"{k}:{np.asarray(v).dtype}" for k, v in table.items())
    debug.log(f"{name}: rows={n_rows} columns=[{cols}]")
