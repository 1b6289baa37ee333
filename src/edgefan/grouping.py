from __future__ import annotations

from collections import Counter, defaultdict

import numpy as np
from beartype import beartype
from jaxtyping import jaxtyped

from .fan_types import GroupKey, NpColumn, NpOffsets


@jaxtyped(typechecker=beartype)
def group_keys(
    from_: NpColumn,
    to: NpColumn,
    panel: NpColumn,
) -> list[GroupKey]:
    """
    One key per edge: (panel, min(from, to), max(from, to)).
    Edges A->B and B->A in the same panel share a key.
    """
    keys: list[GroupKey] = []
    for p, a, b in zip(panel.tolist(), from_.tolist(), to.tolist()):
        lo, hi = (a, b) if a <= b else (b, a)
        keys.append((p, lo, hi))
    return keys


def group_sizes(keys: list[GroupKey]) -> Counter[GroupKey]:
    return Counter(keys)


@jaxtyped(typechecker=beartype)
def fan_positions(
    from_: NpColumn,
    to: NpColumn,
    panel: NpColumn,
) -> tuple[NpOffsets, int]:
    """
    Signed lateral rank of every edge inside its parallel group.

    Within a group of size c, edges are stably sorted by `from` and ranked
    r = 1..c; the rank is centred as r - 0.5 - c/2 so a group fans out
    symmetrically around the straight line. Edges with from >= to get the
    sign flipped so opposite directions land on opposite sides.

    Returns
    - offset: (N,) in input row order.
    - max_fans: largest group size over the whole input (0 if empty).
    """
    keys = group_keys(from_, to, panel)
    members: defaultdict[GroupKey, list[int]] = defaultdict(list)
    for i, key in enumerate(keys):
        members[key].append(i)

    src = from_.tolist()
    dst = to.tolist()
    offset = np.zeros(len(keys), dtype=np.float64)
    for rows in members.values():
        # sorted() is stable: ties in `from` keep input order.
        ranked = sorted(rows, key=lambda i: src[i])
        c = len(ranked)
        for r, i in enumerate(ranked, start=1):
            sign = 1.0 if src[i] < dst[i] else -1.0
            offset[i] = (r - 0.5 - c / 2.0) * sign

    max_fans = max((len(rows) for rows in members.values()), default=0)
    return offset, max_fans
