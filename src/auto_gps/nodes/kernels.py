"""Covariance functions and the algebra used to combine them.

Kernels are immutable. Combining them with ``+``, ``*`` or a scalar factor
returns new composite kernels::

    k = 2.0 * with_lengthscale(SEKernel(), 1.0) + 3.0 * Matern32Kernel() * Matern52Kernel()

Inputs are either a 1-D array (one scalar input per point) or a 2-D array
with one point per row.
"""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Real
from typing import Any, Optional, Tuple

import jax.numpy as jnp

METRICS = ("euclidean", "sqeuclidean")


def as_points(x: Any) -> Any:
    """Return inputs as a 2-D array with one point per row."""
    x = jnp.asarray(x)
    if x.ndim == 1:
        return x[:, None]
    if x.ndim != 2:
        raise ValueError("inputs must be a 1-D array or a 2-D array of row vectors.")
    return x


def _pairwise(metric: str, x: Any, y: Any) -> Any:
    diff = x[:, None, :] - y[None, :, :]
    d2 = jnp.sum(diff * diff, axis=-1)
    if metric == "sqeuclidean":
        return d2
    # sqrt has an infinite derivative at 0; keep gradients finite on the diagonal.
    pos = d2 > 0
    return jnp.where(pos, jnp.sqrt(jnp.where(pos, d2, 1.0)), 0.0)


class Kernel:
    """Base class of all kernels."""

    def kernelmatrix(self, x: Any, y: Optional[Any] = None) -> Any:
        x = as_points(x)
        y = x if y is None else as_points(y)
        return self._matrix(x, y)

    def kernelmatrix_diag(self, x: Any) -> Any:
        return self._diag(as_points(x))

    def _matrix(self, x: Any, y: Any) -> Any:
        raise NotImplementedError

    def _diag(self, x: Any) -> Any:
        raise NotImplementedError

    # ---- algebra ----
    def __add__(self, other: Any) -> "KernelSum":
        if not isinstance(other, Kernel):
            return NotImplemented
        return KernelSum(_children(self, KernelSum) + _children(other, KernelSum))

    def __mul__(self, other: Any) -> "Kernel":
        if isinstance(other, Kernel):
            return KernelProduct(
                _children(self, KernelProduct) + _children(other, KernelProduct)
            )
        if isinstance(other, Real):
            return ScaledKernel(self, other)
        return NotImplemented

    def __rmul__(self, other: Any) -> "Kernel":
        if isinstance(other, Real):
            return ScaledKernel(self, other)
        return NotImplemented


def _children(k: Kernel, cls: type) -> Tuple[Kernel, ...]:
    return tuple(k.kernels) if isinstance(k, cls) else (k,)


class SimpleKernel(Kernel):
    """Stationary kernel ``k(x, y) = kappa(d(x, y))`` with a fixed metric."""

    metric: str

    def __post_init__(self) -> None:
        if self.metric not in METRICS:
            raise ValueError(f"Unknown metric {self.metric!r}. Available: {METRICS}")

    def kappa(self, d: Any) -> Any:
        raise NotImplementedError

    def _matrix(self, x: Any, y: Any) -> Any:
        return self.kappa(_pairwise(self.metric, x, y))

    def _diag(self, x: Any) -> Any:
        return self.kappa(jnp.zeros(x.shape[0]))


@dataclass(frozen=True, eq=False)
class SEKernel(SimpleKernel):
    """Squared exponential kernel, ``exp(-d^2 / 2)``."""

    metric: str = "euclidean"

    def kappa(self, d: Any) -> Any:
        return jnp.exp(-0.5 * d * d)


@dataclass(frozen=True, eq=False)
class Matern32Kernel(SimpleKernel):
    metric: str = "euclidean"

    def kappa(self, d: Any) -> Any:
        r = jnp.sqrt(3.0) * d
        return (1.0 + r) * jnp.exp(-r)


@dataclass(frozen=True, eq=False)
class Matern52Kernel(SimpleKernel):
    metric: str = "euclidean"

    def kappa(self, d: Any) -> Any:
        r = jnp.sqrt(5.0) * d
        return (1.0 + r + r * r / 3.0) * jnp.exp(-r)


@dataclass(frozen=True, eq=False)
class KernelSum(Kernel):
    kernels: Tuple[Kernel, ...]

    def _matrix(self, x: Any, y: Any) -> Any:
        return sum(k._matrix(x, y) for k in self.kernels)

    def _diag(self, x: Any) -> Any:
        return sum(k._diag(x) for k in self.kernels)


@dataclass(frozen=True, eq=False)
class KernelProduct(Kernel):
    kernels: Tuple[Kernel, ...]

    def _matrix(self, x: Any, y: Any) -> Any:
        out = self.kernels[0]._matrix(x, y)
        for k in self.kernels[1:]:
            out = out * k._matrix(x, y)
        return out

    def _diag(self, x: Any) -> Any:
        out = self.kernels[0]._diag(x)
        for k in self.kernels[1:]:
            out = out * k._diag(x)
        return out


@dataclass(frozen=True, eq=False)
class ScaleTransform:
    """Input transform ``x -> s * x``."""

    s: Any

    def __call__(self, x: Any) -> Any:
        return self.s * x


@dataclass(frozen=True, eq=False)
class TransformedKernel(Kernel):
    """``k(t(x), t(y))`` for an input transform ``t``."""

    kernel: Kernel
    transform: ScaleTransform

    def _matrix(self, x: Any, y: Any) -> Any:
        return self.kernel._matrix(self.transform(x), self.transform(y))

    def _diag(self, x: Any) -> Any:
        return self.kernel._diag(self.transform(x))


@dataclass(frozen=True, eq=False)
class ScaledKernel(Kernel):
    """``sigma2 * k(x, y)``."""

    kernel: Kernel
    sigma2: Any

    def _matrix(self, x: Any, y: Any) -> Any:
        return self.sigma2 * self.kernel._matrix(x, y)

    def _diag(self, x: Any) -> Any:
        return self.sigma2 * self.kernel._diag(x)


def with_lengthscale(kernel: Kernel, lengthscale: float) -> TransformedKernel:
    """Return ``kernel`` evaluated on inputs divided by ``lengthscale``."""
    return TransformedKernel(kernel, ScaleTransform(1.0 / lengthscale))
