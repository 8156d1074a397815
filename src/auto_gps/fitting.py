"""Fit model nodes: extract parameters, optimize them, rebuild the node."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import logging
from typing import Any, Callable, Dict, Mapping, Optional

import jax
import jax.numpy as jnp
import numpy as np
from scipy.optimize import minimize

from .cost import costfunction
from .errors import NumericalError
from .flatten import flatten
from .inputs import FitData, as_fit_data
from .parameterize import parameterize

logger = logging.getLogger(__name__)

__all__ = ["DEFAULT_ITERATIONS", "FitOptions", "optimize", "fit"]

DEFAULT_ITERATIONS = 1000


@dataclass(frozen=True)
class FitOptions:
    """Optimizer configuration.

    - iterations: maximum number of optimizer iterations (default 1000)
    - method: any gradient-based ``scipy.optimize.minimize`` method
    - options: extra options forwarded to ``scipy.optimize.minimize``;
      ``maxiter`` is always taken from ``iterations``
    """

    iterations: int = DEFAULT_ITERATIONS
    method: str = "BFGS"
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        it = self.iterations
        if isinstance(it, bool) or not isinstance(it, (int, np.integer)) or it < 1:
            raise ValueError(f"iterations must be a positive integer, got {it!r}.")
        if not isinstance(self.method, str):
            raise TypeError("method must be a string.")

    def scipy_options(self) -> Dict[str, Any]:
        opts = dict(self.options)
        opts["maxiter"] = int(self.iterations)
        return opts


_FIELDS = ("iterations", "method", "options")


def _split(settings: Mapping[str, Any]) -> Dict[str, Any]:
    """Keep FitOptions fields; everything else goes to the scipy options."""
    known = {k: v for k, v in settings.items() if k in _FIELDS}
    extra = {k: v for k, v in settings.items() if k not in _FIELDS}
    if extra:
        known["options"] = {**dict(known.get("options", {})), **extra}
    return known


def _resolve_options(options: Any, overrides: Mapping[str, Any]) -> FitOptions:
    if options is None:
        return FitOptions(**_split(overrides))
    if isinstance(options, FitOptions):
        if not overrides:
            return options
        fields = _split(overrides)
        if "options" in fields:
            fields["options"] = {**dict(options.options), **fields["options"]}
        return replace(options, **fields)
    if isinstance(options, Mapping):
        return _resolve_options(FitOptions(**_split(options)), overrides)
    raise TypeError("options must be FitOptions, a mapping, or None.")


def optimize(
    model: Callable[[Any], Any],
    theta0: Any,
    data: Any,
    options: Any = None,
    **overrides: Any,
) -> Any:
    """Return optimized parameters for ``model``, starting from ``theta0``.

    ``model(theta)`` must build a node with a registered cost function. The
    result is a parameter tree shaped like ``theta0``, not a node. Running
    out of iterations is not an error: the last iterate is returned.
    Trial points with a non-finite cost are reported to the optimizer as
    ``inf`` so its line search backs off; a non-finite cost at the start or
    at the returned iterate raises :class:`NumericalError`.
    """
    opts = _resolve_options(options, overrides)
    data = as_fit_data(data)
    par0, unflatten = flatten(theta0)
    npar = int(par0.shape[0])
    logger.debug("optimize: %d free parameters", npar)
    if npar == 0:
        return unflatten(par0)

    def objective(par: Any) -> Any:
        return costfunction(model(unflatten(par)), data)

    value_and_grad = jax.jit(jax.value_and_grad(objective))

    def evaluate(par: np.ndarray):
        val, grad = value_and_grad(jnp.asarray(par))
        return float(val), np.asarray(grad, dtype=float)

    def fun(par: np.ndarray):
        val, grad = evaluate(par)
        if not (np.isfinite(val) and np.all(np.isfinite(grad))):
            logger.debug("optimize: non-finite cost at a trial point")
            return np.inf, np.zeros_like(grad)
        return val, grad

    x0 = np.asarray(par0, dtype=float)
    val0, grad0 = evaluate(x0)
    if not np.isfinite(val0):
        raise NumericalError(f"initial cost is not finite ({val0}).")
    if not np.all(np.isfinite(grad0)):
        raise NumericalError("gradient of the initial cost is not finite.")

    res = minimize(
        fun,
        x0,
        jac=True,
        method=opts.method,
        options=opts.scipy_options(),
    )
    logger.debug(
        "optimize: %s (iterations=%s, cost=%g)",
        res.message,
        getattr(res, "nit", None),
        float(res.fun),
    )
    if not np.isfinite(res.fun):
        raise NumericalError(f"optimizer returned a non-finite cost ({res.fun}).")
    return unflatten(jnp.asarray(res.x))


def fit(node: Any, *args: Any, options: Any = None, **overrides: Any) -> Any:
    """Fit ``node`` to data and return a new node of the same type.

    Call as ``fit(node, data)`` with a FitData (or a mapping with ``x`` and
    ``y``), or as ``fit(node, x, y)``. Either form takes optimizer settings
    as a trailing positional ``options`` (FitOptions or a mapping), as
    ``options=``, or as keyword overrides such as ``iterations=10``.
    """
    if args and (
        isinstance(args[-1], FitOptions)
        or (len(args) in (2, 3) and isinstance(args[-1], Mapping))
    ):
        if options is not None:
            raise TypeError("fit() got options both positionally and by keyword.")
        args, options = args[:-1], args[-1]
    if len(args) == 1:
        bundle = as_fit_data(args[0])
    elif len(args) == 2:
        bundle = FitData(x=args[0], y=args[1])
    else:
        raise TypeError("fit() expects fit(node, data) or fit(node, x, y).")

    model, theta0 = parameterize(node)
    logger.debug("fit: %s", type(node).__name__)
    theta = optimize(model, theta0, bundle, options, **overrides)
    return model(theta)
