from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

import numpy as np

from .errors import DataMismatchError


@dataclass(frozen=True)
class FitData:
    """Observations a model is fit to.

    ``x`` holds one input per row (or a 1-D array of scalar inputs) and ``y``
    one observation per input. Anything else a cost function might need goes
    in ``extras``.
    """

    x: Any
    y: Any
    extras: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        nx = np.shape(self.x)
        ny = np.shape(self.y)
        if len(nx) == 0 or len(ny) == 0:
            raise DataMismatchError("x and y must be arrays with one entry per observation.")
        if nx[0] != ny[0]:
            raise DataMismatchError(
                f"x has {nx[0]} observations but y has {ny[0]}."
            )

    @staticmethod
    def from_mapping(data: Mapping[str, Any]) -> "FitData":
        """Create FitData from a mapping with at least ``x`` and ``y``."""
        missing = [k for k in ("x", "y") if k not in data]
        if missing:
            raise DataMismatchError(f"data is missing fields: {missing}")
        extras = {k: v for k, v in data.items() if k not in ("x", "y")}
        return FitData(x=data["x"], y=data["y"], extras=extras)


def as_fit_data(data: Any) -> FitData:
    """Coerce a FitData, a mapping or an object with ``.x``/``.y`` to FitData."""
    if isinstance(data, FitData):
        return data
    if isinstance(data, Mapping):
        return FitData.from_mapping(data)
    if hasattr(data, "x") and hasattr(data, "y"):
        return FitData(x=data.x, y=data.y)
    raise DataMismatchError(
        f"Cannot use {type(data).__name__} as fit data; expected fields x and y."
    )
