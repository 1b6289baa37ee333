from __future__ import annotations

from math import comb

import numpy as np
from beartype import beartype
from jaxtyping import Float, jaxtyped

from .fan_types import NpBezierSegments, NpCurveSamples


@jaxtyped(typechecker=beartype)
def make_bezier_basis(
    n_samples: int,
    degree: int = 3,
) -> Float[np.ndarray, "n_samples n_ctrl"]:
    """
    Returns B: (n_samples, degree+1) Bernstein weights at evenly spaced t in
    [0, 1], such that X = B @ P for one curve with control points P.
    """
    if n_samples < 2:
        raise ValueError("n_samples must be >= 2")
    if degree < 1:
        raise ValueError("degree must be >= 1")
    ts = np.linspace(0.0, 1.0, n_samples, dtype=np.float64)
    B_mat = np.zeros((n_samples, degree + 1), dtype=np.float64)
    for i in range(degree + 1):
        B_mat[:, i] = comb(degree, i) * ts**i * (1.0 - ts) ** (degree - i)
    return B_mat


@jaxtyped(typechecker=beartype)
def elevate_triples(
    start: Float[np.ndarray, "E 2"],
    control: Float[np.ndarray, "E 2"],
    end: Float[np.ndarray, "E 2"],
) -> NpBezierSegments:
    """
    Degree-elevate anchor/control/anchor triples to cubic segments.

    The quadratic (p0, c, p2) and the cubic (p0, p0 + 2/3 (c - p0),
    p2 + 2/3 (c - p2), p2) trace the same curve.
    """
    c1 = start + (2.0 / 3.0) * (control - start)
    c2 = end + (2.0 / 3.0) * (control - end)
    return np.stack([start, c1, c2, end], axis=1)


@jaxtyped(typechecker=beartype)
def sample_beziers(
    segments: Float[np.ndarray, "E K 2"],
    n_samples: int,
) -> NpCurveSamples:
    """Evaluate every segment at n_samples evenly spaced t (endpoints included)."""
    B = make_bezier_basis(n_samples, degree=segments.shape[1] - 1)
    return np.einsum("mn,cnd->cmd", B, segments)


def beziers_to_svg_path_d(
    segs: np.ndarray,
    *,
    precision: int = 3,
) -> str:
    """Build an SVG path 'd' string from chained cubic Bezier segments (S,4,2)."""

    if len(segs) == 0:
        return ""
    fmt = f".{int(precision):d}f"

    def f(x: float) -> str:
        return format(float(x), fmt)

    p0 = segs[0][0]
    parts = [f"M {f(p0[0])},{f(p0[1])}"]
    for _p0, c1, c2, p3 in segs:
        parts.append(
            f"C {f(c1[0])},{f(c1[1])} {f(c2[0])},{f(c2[1])} {f(p3[0])},{f(p3[1])}"
        )
    return " ".join(parts)
