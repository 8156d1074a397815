from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import jax.numpy as jnp

from .kernels import as_points


class MeanFunction:
    """Base class of mean functions. ``m(x)`` returns one value per input."""

    def __call__(self, x: Any) -> Any:
        raise NotImplementedError


@dataclass(frozen=True, eq=False)
class ZeroMean(MeanFunction):
    def __call__(self, x: Any) -> Any:
        return jnp.zeros(as_points(x).shape[0])


@dataclass(frozen=True, eq=False)
class ConstMean(MeanFunction):
    """Constant mean ``m(x) = c``."""

    c: Any

    def __call__(self, x: Any) -> Any:
        return self.c * jnp.ones(as_points(x).shape[0])
