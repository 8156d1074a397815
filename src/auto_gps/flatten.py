"""Flatten a parameter tree into one vector and back.

Built on :func:`jax.flatten_util.ravel_pytree`. ``Positive`` leaves live in
log space on the flat vector; unflattening maps any real entry ``r`` to
``exp(r) + POSITIVE_EPS``, which is always strictly positive. ``unflatten``
uses only ``jax.numpy`` and can be traced for differentiation.
"""

from __future__ import annotations

from typing import Any, Callable, Tuple

import jax.numpy as jnp
import numpy as np
from jax.flatten_util import ravel_pytree

from .errors import ShapeMismatchError
from .params import Free, Positive

__all__ = ["POSITIVE_EPS", "flatten"]

POSITIVE_EPS = float(np.sqrt(np.finfo(float).eps))


def _to_raw(params: Any) -> Any:
    if params is None:
        return None
    if isinstance(params, Free):
        return jnp.asarray(params.value, dtype=float)
    if isinstance(params, Positive):
        v = np.asarray(params.value, dtype=float)
        if not np.all(v > POSITIVE_EPS):
            raise ShapeMismatchError(
                f"Positive parameter must exceed {POSITIVE_EPS:g}, got {v!r}."
            )
        return jnp.log(v - POSITIVE_EPS)
    if isinstance(params, tuple):
        return tuple(_to_raw(p) for p in params)
    raise ShapeMismatchError(
        f"Unexpected entry of type {type(params).__name__} in a parameter tree."
    )


def _from_raw(template: Any, raw: Any) -> Any:
    if template is None:
        return None
    if isinstance(template, Free):
        return Free(raw)
    if isinstance(template, Positive):
        return Positive(jnp.exp(raw) + POSITIVE_EPS)
    return tuple(_from_raw(t, r) for t, r in zip(template, raw))


def flatten(params: Any) -> Tuple[Any, Callable[[Any], Any]]:
    """Return ``(vector, unflatten)`` for a parameter tree.

    ``unflatten(vector)`` rebuilds a tree with the same nesting, the same
    ``None`` positions and the same leaf kinds as ``params``.
    """
    vec, unravel = ravel_pytree(_to_raw(params))
    size = int(vec.shape[0])

    def unflatten(v: Any) -> Any:
        if jnp.shape(v) != (size,):
            raise ShapeMismatchError(
                f"Expected a flat vector of shape ({size},), got {jnp.shape(v)}."
            )
        return _from_raw(params, unravel(jnp.asarray(v, dtype=vec.dtype)))

    return vec, unflatten
