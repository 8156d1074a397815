"""Parameter values produced by extraction.

A parameter tree is built from

- ``None``: the node has no free parameters,
- :class:`Free`: an unconstrained scalar or array,
- :class:`Positive`: a strictly positive scalar or array,
- ``tuple``: one entry per child or field of a composite node, in order.

``Positive.value`` holds the positive value itself. The mapping to an
unconstrained coordinate is done once, by :mod:`auto_gps.flatten`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


__all__ = ["Free", "Positive", "value", "is_leaf"]


@dataclass(frozen=True, eq=False)
class Free:
    value: Any


@dataclass(frozen=True, eq=False)
class Positive:
    value: Any


def is_leaf(p: Any) -> bool:
    return isinstance(p, (Free, Positive))


def value(params: Any) -> Any:
    """Strip leaf wrappers, keeping ``None`` and tuple structure.

    Entries that are already plain values (numbers, arrays) pass through, so
    a tree may mix leaves with resolved values.
    """
    if params is None:
        return None
    if is_leaf(params):
        return params.value
    if isinstance(params, tuple):
        return tuple(value(p) for p in params)
    return params
