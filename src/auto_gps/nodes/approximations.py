"""Sparse variational approximation and its evidence lower bound."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple

import jax.numpy as jnp
import numpy as np
from jax.scipy.linalg import solve_triangular

from .gps import FiniteGP, LatentFiniteGP


@dataclass(frozen=True, eq=False)
class VariationalGaussian:
    """``q(u) = N(mean, L L^T)`` with ``L`` the lower triangle of ``scale_tril``."""

    mean: Any
    scale_tril: Any

    def cov(self) -> Any:
        L = jnp.tril(self.scale_tril)
        return L @ L.T


def variational_gaussian(n: int) -> VariationalGaussian:
    """Standard normal initialisation for ``n`` inducing values."""
    return VariationalGaussian(np.zeros(n), np.eye(n))


@dataclass(frozen=True, eq=False)
class SparseVariationalApproximation:
    """Inducing prior ``fz = f(z)`` paired with a variational ``q(u)``."""

    fz: FiniteGP
    q: VariationalGaussian

    def marginals(self, x: Any) -> Tuple[Any, Any]:
        """Mean and variance of the approximate posterior at ``x``."""
        f, z = self.fz.f, self.fz.x
        Lz = jnp.linalg.cholesky(self.fz.cov())
        A = solve_triangular(Lz, f.kernel.kernelmatrix(z, x), lower=True)
        B = solve_triangular(Lz.T, A, lower=False)
        Lq = jnp.tril(self.q.scale_tril)

        mean = f.mean(x) + A.T @ solve_triangular(
            Lz, self.q.mean - self.fz.mean(), lower=True
        )
        var = (
            f.kernel.kernelmatrix_diag(x)
            - jnp.sum(A * A, axis=0)
            + jnp.sum((Lq.T @ B) ** 2, axis=0)
        )
        return mean, var

    def kl_divergence(self) -> Any:
        """``KL(q(u) || p(u))`` with ``p(u) = N(fz.mean(), fz.cov())``."""
        Lz = jnp.linalg.cholesky(self.fz.cov())
        Lq = jnp.tril(self.q.scale_tril)
        m = self.q.mean.shape[0]

        trace = jnp.sum(solve_triangular(Lz, Lq, lower=True) ** 2)
        r = solve_triangular(Lz, self.fz.mean() - self.q.mean, lower=True)
        logdet_p = 2.0 * jnp.sum(jnp.log(jnp.diag(Lz)))
        logdet_q = 2.0 * jnp.sum(jnp.log(jnp.abs(jnp.diag(Lq))))
        return 0.5 * (trace + jnp.dot(r, r) - m + logdet_p - logdet_q)


SVA = SparseVariationalApproximation


def elbo(lfx: LatentFiniteGP, sva: SparseVariationalApproximation, y: Any) -> Any:
    """Evidence lower bound of observations ``y`` at the inputs of ``lfx``."""
    mean, var = sva.marginals(lfx.fx.x)
    return jnp.sum(lfx.lik.expected_loglik(y, mean, var)) - sva.kl_divergence()
