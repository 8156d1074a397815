"""Extract free parameters from model nodes and rebuild nodes from them.

Every node type has a :class:`Rule` pairing an ``extract`` function, which
maps a node to a parameter tree (see :mod:`auto_gps.params`), with an
``apply`` function, which rebuilds a node of the same type from the node's
shape and a tree of plain values. Composite rules recurse into their
children in a fixed order, so a parameter tree always mirrors the node it
came from.

Only scales reachable through :class:`ScaleTransform` or
:class:`ScaledKernel` are free; the stationary kernels themselves expose
nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Tuple

import jax.numpy as jnp

from .errors import DispatchError, ShapeMismatchError
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
from .params import Free, Positive, value

__all__ = [
    "Rule",
    "Parameterized",
    "parameterize",
    "extract_parameters",
    "apply_parameters",
    "extract_sva",
    "register_rule",
    "get_rule",
    "registered_types",
]


@dataclass(frozen=True)
class Rule:
    extract: Callable[[Any], Any]
    apply: Callable[[Any, Any], Any]


def get_rule(node: Any) -> Rule:
    """Return the rule registered for ``type(node)``."""
    try:
        return _RULES[type(node)]
    except KeyError as e:
        raise DispatchError(type(node)) from e


def register_rule(
    cls: type, extract: Callable[[Any], Any], apply: Callable[[Any, Any], Any]
) -> None:
    _RULES[cls] = Rule(extract=extract, apply=apply)


def registered_types() -> Tuple[type, ...]:
    return tuple(_RULES)


def extract_parameters(node: Any) -> Any:
    return get_rule(node).extract(node)


def apply_parameters(node: Any, theta: Any) -> Any:
    """Rebuild ``node`` with plain (already constrained) parameter values."""
    return get_rule(node).apply(node, theta)


@dataclass(frozen=True, eq=False)
class Parameterized:
    """Reconstructor: ``Parameterized(node)(extract_parameters(node))`` ~ ``node``."""

    thing: Any

    def __call__(self, theta: Any) -> Any:
        return apply_parameters(self.thing, value(theta))


def parameterize(thing: Any) -> Tuple[Parameterized, Any]:
    """Return a reconstructor for ``thing`` and its initial parameters."""
    return Parameterized(thing), extract_parameters(thing)


def _unpack(theta: Any, n: int, node: Any) -> Tuple[Any, ...]:
    if not isinstance(theta, tuple) or len(theta) != n:
        got = len(theta) if isinstance(theta, tuple) else type(theta).__name__
        raise ShapeMismatchError(
            f"{type(node).__name__} expects a tuple of {n} parameters, got {got}."
        )
    return theta


# ---- leaves without free parameters -----------------------------------------


def _extract_none(node: Any) -> None:
    return None


def _apply_none(node: Any, theta: Any) -> Any:
    return node


# ---- means and transforms ----------------------------------------------------


def _extract_const_mean(m: ConstMean) -> Free:
    return Free(m.c)


def _apply_const_mean(m: ConstMean, theta: Any) -> ConstMean:
    return ConstMean(theta)


def _extract_scale_transform(t: ScaleTransform) -> Positive:
    return Positive(t.s)


def _apply_scale_transform(t: ScaleTransform, theta: Any) -> ScaleTransform:
    return ScaleTransform(theta)


# ---- composite kernels ---------------------------------------------------------


def _extract_children(k: Any) -> Tuple[Any, ...]:
    return tuple(extract_parameters(c) for c in k.kernels)


def _apply_children(k: Any, theta: Any) -> Any:
    theta = _unpack(theta, len(k.kernels), k)
    return type(k)(tuple(apply_parameters(c, t) for c, t in zip(k.kernels, theta)))


def _extract_transformed(k: TransformedKernel) -> Tuple[Any, Any]:
    return (extract_parameters(k.kernel), extract_parameters(k.transform))


def _apply_transformed(k: TransformedKernel, theta: Any) -> TransformedKernel:
    tk, tt = _unpack(theta, 2, k)
    return TransformedKernel(
        apply_parameters(k.kernel, tk), apply_parameters(k.transform, tt)
    )


def _extract_scaled(k: ScaledKernel) -> Tuple[Any, Positive]:
    return (extract_parameters(k.kernel), Positive(k.sigma2))


def _apply_scaled(k: ScaledKernel, theta: Any) -> ScaledKernel:
    tk, sigma2 = _unpack(theta, 2, k)
    return ScaledKernel(apply_parameters(k.kernel, tk), sigma2)


# ---- processes ---------------------------------------------------------------


def _extract_gp(f: GP) -> Tuple[Any, Any]:
    return (extract_parameters(f.mean), extract_parameters(f.kernel))


def _apply_gp(f: GP, theta: Any) -> GP:
    tm, tk = _unpack(theta, 2, f)
    return GP(apply_parameters(f.mean, tm), apply_parameters(f.kernel, tk))


def _extract_latent_gp(f: LatentGP) -> Tuple[Any, Any]:
    return (extract_parameters(f.f), extract_parameters(f.lik))


def _apply_latent_gp(f: LatentGP, theta: Any) -> LatentGP:
    tf, tl = _unpack(theta, 2, f)
    return LatentGP(apply_parameters(f.f, tf), apply_parameters(f.lik, tl), f.Sigma_y)


# ---- approximations --------------------------------------------------------


def _extract_variational_gaussian(q: VariationalGaussian) -> Tuple[Free, Free]:
    return (Free(q.mean), Free(q.scale_tril))


def _apply_variational_gaussian(q: VariationalGaussian, theta: Any) -> VariationalGaussian:
    mean, scale = _unpack(theta, 2, q)
    return VariationalGaussian(mean, jnp.tril(scale))


def extract_sva(sva: SVA, fixed_inducing_points: bool = False) -> Tuple[Any, Any]:
    """Parameters of ``sva``; inducing locations are ``None`` when fixed."""
    inducing = None if fixed_inducing_points else Free(sva.fz.x)
    return (inducing, extract_parameters(sva.q))


def _apply_sva(sva: SVA, theta: Any) -> SVA:
    tz, tq = _unpack(theta, 2, sva)
    # None keeps the very same fz (and so the same inducing array object).
    fz = sva.fz if tz is None else FiniteGP(sva.fz.f, tz, sva.fz.noise)
    return SVA(fz, apply_parameters(sva.q, tq))


# ---- wrappers ----------------------------------------------------------------


def _extract_noisy_gp(f: NoisyGP) -> Tuple[Any, Positive]:
    return (extract_parameters(f.gp), Positive(f.obs_noise))


def _apply_noisy_gp(f: NoisyGP, theta: Any) -> NoisyGP:
    tg, noise = _unpack(theta, 2, f)
    return NoisyGP(apply_parameters(f.gp, tg), noise)


def _extract_svgp(f: SVGP) -> Tuple[Any, Any]:
    return (extract_parameters(f.lgp), extract_sva(f.sva, f.fixed_inducing_points))


def _apply_svgp(f: SVGP, theta: Any) -> SVGP:
    tl, ts = _unpack(theta, 2, f)
    return SVGP(
        apply_parameters(f.lgp, tl),
        apply_parameters(f.sva, ts),
        f.fixed_inducing_points,
    )


_RULES: Dict[type, Rule] = {
    ZeroMean: Rule(_extract_none, _apply_none),
    ConstMean: Rule(_extract_const_mean, _apply_const_mean),
    SEKernel: Rule(_extract_none, _apply_none),
    Matern32Kernel: Rule(_extract_none, _apply_none),
    Matern52Kernel: Rule(_extract_none, _apply_none),
    KernelSum: Rule(_extract_children, _apply_children),
    KernelProduct: Rule(_extract_children, _apply_children),
    TransformedKernel: Rule(_extract_transformed, _apply_transformed),
    ScaledKernel: Rule(_extract_scaled, _apply_scaled),
    ScaleTransform: Rule(_extract_scale_transform, _apply_scale_transform),
    BernoulliLikelihood: Rule(_extract_none, _apply_none),
    PoissonLikelihood: Rule(_extract_none, _apply_none),
    GP: Rule(_extract_gp, _apply_gp),
    LatentGP: Rule(_extract_latent_gp, _apply_latent_gp),
    VariationalGaussian: Rule(_extract_variational_gaussian, _apply_variational_gaussian),
    SVA: Rule(extract_sva, _apply_sva),
    NoisyGP: Rule(_extract_noisy_gp, _apply_noisy_gp),
    SVGP: Rule(_extract_svgp, _apply_svgp),
}
