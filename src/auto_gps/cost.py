"""Scalar objectives minimized by :func:`auto_gps.fit`.

Each function assembles a JAX scalar from a fully built node and the data;
gradients are taken by the caller.
"""

from __future__ import annotations

from typing import Any, Callable, Dict

from .errors import DispatchError
from .nodes import GP, SVGP, DEFAULT_JITTER, NoisyGP, elbo

__all__ = ["costfunction", "register_cost"]


def costfunction(node: Any, data: Any) -> Any:
    """Return the cost of ``node`` on ``data`` (anything with ``.x``, ``.y``)."""
    try:
        cost = _COSTS[type(node)]
    except KeyError as e:
        raise DispatchError(type(node), "cost") from e
    return cost(node, data)


def register_cost(cls: type, cost: Callable[[Any, Any], Any]) -> None:
    _COSTS[cls] = cost


def _gp_cost(f: GP, data: Any) -> Any:
    """Negative log marginal likelihood with only diagonal jitter as noise."""
    return -f(data.x, DEFAULT_JITTER).logpdf(data.y)


def _noisy_gp_cost(f: NoisyGP, data: Any) -> Any:
    return -f.gp(data.x, f.obs_noise).logpdf(data.y)


def _svgp_cost(f: SVGP, data: Any) -> Any:
    return -elbo(f.lgp(data.x), f.sva, data.y)


_COSTS: Dict[type, Callable[[Any, Any], Any]] = {
    GP: _gp_cost,
    NoisyGP: _noisy_gp_cost,
    SVGP: _svgp_cost,
}
