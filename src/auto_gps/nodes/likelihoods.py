from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import jax
import jax.numpy as jnp
import numpy as np
from jax.scipy.special import gammaln

# Gauss-Hermite rule for E_{f ~ N(m, v)}[log p(y | f)] when no closed form exists.
N_QUADRATURE = 20


class Likelihood:
    """Observation model ``p(y | f)`` for a latent function value ``f``."""

    def log_density(self, y: Any, f: Any) -> Any:
        raise NotImplementedError

    def expected_loglik(self, y: Any, mean: Any, var: Any) -> Any:
        """Elementwise ``E[log p(y | f)]`` for ``f ~ N(mean, var)``."""
        t, w = np.polynomial.hermite.hermgauss(N_QUADRATURE)
        # Marginal variances can dip just below zero through round-off.
        scale = jnp.sqrt(2.0 * jnp.maximum(var, 1e-12))
        f = mean[:, None] + scale[:, None] * t[None, :]
        logp = self.log_density(jnp.asarray(y)[:, None], f)
        return jnp.sum(w[None, :] * logp, axis=-1) / np.sqrt(np.pi)


@dataclass(frozen=True, eq=False)
class BernoulliLikelihood(Likelihood):
    """Binary observations ``y in {0, 1}`` with a logistic link."""

    def log_density(self, y: Any, f: Any) -> Any:
        return jax.nn.log_sigmoid((2.0 * y - 1.0) * f)


@dataclass(frozen=True, eq=False)
class PoissonLikelihood(Likelihood):
    """Count observations with rate ``exp(f)``."""

    def log_density(self, y: Any, f: Any) -> Any:
        return y * f - jnp.exp(f) - gammaln(y + 1.0)

    def expected_loglik(self, y: Any, mean: Any, var: Any) -> Any:
        y = jnp.asarray(y, dtype=float)
        return y * mean - jnp.exp(mean + 0.5 * var) - gammaln(y + 1.0)
