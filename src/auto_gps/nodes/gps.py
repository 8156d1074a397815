"""Gaussian processes and their finite-dimensional projections."""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Real
from typing import Any, Optional

import jax.numpy as jnp
import numpy as np
from jax.scipy.linalg import solve_triangular

from ..util import sample_mvn
from .kernels import Kernel
from .likelihoods import Likelihood
from .means import ConstMean, MeanFunction

# Diagonal variance added when a process is projected without explicit noise.
DEFAULT_JITTER = 1e-6


@dataclass(frozen=True, eq=False)
class GP:
    """Gaussian process prior ``f ~ GP(mean, kernel)``.

    A plain number for ``mean`` is promoted to :class:`ConstMean`.
    """

    mean: MeanFunction
    kernel: Kernel

    def __post_init__(self) -> None:
        if isinstance(self.mean, Real):
            object.__setattr__(self, "mean", ConstMean(float(self.mean)))

    def __call__(self, x: Any, noise: Any = DEFAULT_JITTER) -> "FiniteGP":
        return FiniteGP(self, x, noise)


@dataclass(frozen=True, eq=False)
class FiniteGP:
    """A process evaluated at inputs ``x`` with i.i.d. Gaussian noise variance."""

    f: GP
    x: Any
    noise: Any = DEFAULT_JITTER

    def mean(self) -> Any:
        return self.f.mean(self.x)

    def cov(self) -> Any:
        K = self.f.kernel.kernelmatrix(self.x)
        return K + self.noise * jnp.eye(K.shape[0])

    def logpdf(self, y: Any) -> Any:
        """Log density of observations ``y`` under ``N(mean(), cov())``."""
        L = jnp.linalg.cholesky(self.cov())
        r = jnp.asarray(y, dtype=float) - self.mean()
        alpha = solve_triangular(L, r, lower=True)
        n = r.shape[0]
        return (
            -0.5 * jnp.dot(alpha, alpha)
            - jnp.sum(jnp.log(jnp.diag(L)))
            - 0.5 * n * jnp.log(2.0 * jnp.pi)
        )

    def sample(
        self, rng: Optional[np.random.Generator] = None, nsamples: Optional[int] = None
    ) -> np.ndarray:
        """Draw samples; shape ``(n,)`` or ``(nsamples, n)``."""
        rng = np.random.default_rng() if rng is None else rng
        mean = np.asarray(self.mean(), dtype=float)
        cov = np.asarray(self.cov(), dtype=float)
        draws = sample_mvn(mean, cov, 1 if nsamples is None else int(nsamples), rng)
        return draws[0] if nsamples is None else draws


@dataclass(frozen=True, eq=False)
class LatentGP:
    """Latent process ``f`` observed through a non-Gaussian likelihood."""

    f: GP
    lik: Likelihood
    Sigma_y: Any = DEFAULT_JITTER

    def __call__(self, x: Any) -> "LatentFiniteGP":
        return LatentFiniteGP(self.f(x, self.Sigma_y), self.lik)


@dataclass(frozen=True, eq=False)
class LatentFiniteGP:
    fx: FiniteGP
    lik: Likelihood
