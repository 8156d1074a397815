"""Top-level wrappers that carry everything a cost function needs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .approximations import SparseVariationalApproximation
from .gps import GP, LatentGP


@dataclass(frozen=True, eq=False)
class NoisyGP:
    """A process observed with i.i.d. Gaussian noise of variance ``obs_noise``."""

    gp: GP
    obs_noise: Any


def with_gaussian_noise(gp: GP, obs_noise: float) -> NoisyGP:
    if not isinstance(gp, GP):
        raise TypeError("with_gaussian_noise expects a GP.")
    return NoisyGP(gp, obs_noise)


@dataclass(frozen=True, eq=False)
class SVGP:
    """Sparse variational GP: latent process, approximation and a flag.

    With ``fixed_inducing_points=True`` the inducing locations are not
    optimized and a fitted SVGP shares them with the original.
    """

    lgp: LatentGP
    sva: SparseVariationalApproximation
    fixed_inducing_points: bool = False
