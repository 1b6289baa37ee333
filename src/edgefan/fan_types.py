from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias, Union

import numpy as np
from jaxtyping import Float, Shaped

EdgeTable: TypeAlias = dict[str, np.ndarray]
TableLike: TypeAlias = Mapping[str, Union[np.ndarray, Sequence[object]]]
GroupKey: TypeAlias = tuple[object, object, object]

NpColumn: TypeAlias = Shaped[np.ndarray, "N"]
NpCoords: TypeAlias = Float[np.ndarray, "N 2"]
NpOffsets: TypeAlias = Float[np.ndarray, "N"]
NpBezierSegments: TypeAlias = Float[np.ndarray, "E 4 2"]
NpCurveSamples: TypeAlias = Float[np.ndarray, "E M 2"]

WIDE_REQUIRED = ("x", "y", "xend", "yend", "from", "to")
LONG_REQUIRED = ("x", "y", "group", "from", "to")

SEQUENCE_COLUMN = "sequence_index"
INDEX_COLUMN = "index"
FILTER_COLUMN = "filter"


class EdgeValidationError(ValueError):
    """Raised when an edge table or fan parameter set is malformed."""


class FanVariant(Enum):
    """How fanned edges are handed to the renderer."""

    FULL = "fan"
    PER_ENDPOINT = "fan2"
    RAW = "fan0"

    @property
    def subdivided(self) -> bool:
        return self is not FanVariant.RAW

    @property
    def required_columns(self) -> tuple[str, ...]:
        if self is FanVariant.PER_ENDPOINT:
            return LONG_REQUIRED
        return WIDE_REQUIRED


@dataclass(frozen=True)
class FanParams:
    """
    spread: linear multiplier of the lateral fan width (> 1 widens fans).
    n: points per edge produced by subdivision; ignored by the raw variant.
    panel_column: column whose values scope the parallel groups.
    """

    spread: float = 1.0
    n: int = 100
    panel_column: str = "panel"

    def __post_init__(self) -> None:
        if not math.isfinite(float(self.spread)):
            raise EdgeValidationError("spread must be finite")
        if int(self.n) < 2:
            raise EdgeValidationError("n must be >= 2")
