from __future__ import annotations

import numpy as np
from beartype import beartype
from jaxtyping import jaxtyped

from .fan_types import NpCoords, NpOffsets


@jaxtyped(typechecker=beartype)
def perpendicular_steps(
    start: NpCoords,
    end: NpCoords,
    max_fans: int,
    spread: float = 1.0,
) -> NpCoords:
    """
    Lateral displacement per unit of offset: the edge direction rotated by
    +90 degrees, scaled by spread / (2 * max_fans).
    """
    d = end - start
    scale = spread / (2.0 * max(max_fans, 1))
    return np.stack([-d[:, 1], d[:, 0]], axis=1) * scale


@jaxtyped(typechecker=beartype)
def fan_control_points(
    start: NpCoords,
    end: NpCoords,
    offset: NpOffsets,
    max_fans: int,
    spread: float = 1.0,
) -> NpCoords:
    """
    start, end: (N,2) anchor coordinates
    offset: (N,) signed lateral rank from fan_positions
    max_fans: largest parallel group in the whole drawing

    Control point = midpoint + perpendicular_step * offset. max_fans is the
    global maximum, not the size of the edge's own group, so every bundle in
    a drawing uses the same step and the widest bundle stays within
    +-spread/4 of the edge length.
    Zero-length edges and self loops get a zero step (control == midpoint).
    """
    mean = 0.5 * (start + end)
    step = perpendicular_steps(start, end, max_fans, spread)
    return mean + step * offset[:, None]
