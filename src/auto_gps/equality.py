"""Tolerance-aware structural equality of model nodes.

``isequal`` is a plain predicate for tests and sanity checks: nodes of
different types are never equal, discrete fields must match exactly and
continuous fields are compared with :func:`auto_gps.util.isapprox`.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Sequence

import numpy as np

from .nodes import (
    GP,
    SVA,
    SVGP,
    BernoulliLikelihood,
    ConstMean,
    FiniteGP,
    KernelProduct,
    KernelSum,
    LatentGP,
    Matern32Kernel,
    Matern52Kernel,
    NoisyGP,
    PoissonLikelihood,
    ScaledKernel,
    ScaleTransform,
    SEKernel,
    TransformedKernel,
    VariationalGaussian,
    ZeroMean,
)
from .util import isapprox

__all__ = ["isequal"]


def isequal(a: Any, b: Any) -> bool:
    """Return True if ``a`` and ``b`` are the same model up to tolerance."""
    if type(a) is not type(b):
        return False
    compare = _EQUALITY.get(type(a))
    if compare is None:
        return False
    return bool(compare(a, b))


def _pairwise(xs: Sequence[Any], ys: Sequence[Any]) -> bool:
    if len(xs) != len(ys):
        return False
    return all(isequal(x, y) for x, y in zip(xs, ys))


def _same_metric(a: Any, b: Any) -> bool:
    return a.metric == b.metric


def _true(a: Any, b: Any) -> bool:
    return True


def _same_tril(a: Any, b: Any) -> bool:
    a, b = np.asarray(a), np.asarray(b)
    if a.ndim != 2 or b.ndim != 2:
        return False
    return isapprox(np.tril(a), np.tril(b))


_EQUALITY: Dict[type, Callable[[Any, Any], bool]] = {
    ZeroMean: _true,
    ConstMean: lambda a, b: isapprox(a.c, b.c),
    SEKernel: _same_metric,
    Matern32Kernel: _same_metric,
    Matern52Kernel: _same_metric,
    KernelSum: lambda a, b: _pairwise(a.kernels, b.kernels),
    KernelProduct: lambda a, b: _pairwise(a.kernels, b.kernels),
    TransformedKernel: lambda a, b: (
        isequal(a.kernel, b.kernel) and isequal(a.transform, b.transform)
    ),
    ScaledKernel: lambda a, b: isequal(a.kernel, b.kernel) and isapprox(a.sigma2, b.sigma2),
    ScaleTransform: lambda a, b: isapprox(a.s, b.s),
    BernoulliLikelihood: _true,
    PoissonLikelihood: _true,
    GP: lambda a, b: isequal(a.mean, b.mean) and isequal(a.kernel, b.kernel),
    FiniteGP: lambda a, b: (
        isequal(a.f, b.f) and isapprox(a.x, b.x) and isapprox(a.noise, b.noise)
    ),
    LatentGP: lambda a, b: (
        isequal(a.f, b.f) and isequal(a.lik, b.lik) and isapprox(a.Sigma_y, b.Sigma_y)
    ),
    VariationalGaussian: lambda a, b: (
        isapprox(a.mean, b.mean) and _same_tril(a.scale_tril, b.scale_tril)
    ),
    SVA: lambda a, b: isequal(a.fz, b.fz) and isequal(a.q, b.q),
    NoisyGP: lambda a, b: isequal(a.gp, b.gp) and isapprox(a.obs_noise, b.obs_noise),
    SVGP: lambda a, b: (
        a.fixed_inducing_points == b.fixed_inducing_points
        and isequal(a.lgp, b.lgp)
        and isequal(a.sva, b.sva)
    ),
}
