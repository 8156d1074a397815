"""Error types raised by auto_gps."""

from __future__ import annotations

__all__ = [
    "AutoGPsError",
    "DispatchError",
    "ShapeMismatchError",
    "NumericalError",
    "DataMismatchError",
]


class AutoGPsError(Exception):
    """Base class for all auto_gps errors."""


class DispatchError(AutoGPsError, TypeError):
    """No extract/apply/cost rule is registered for a node type."""

    def __init__(self, node_type: type, what: str = "parameter"):
        self.node_type = node_type
        name = getattr(node_type, "__qualname__", repr(node_type))
        super().__init__(f"No {what} rule registered for {name}.")


class ShapeMismatchError(AutoGPsError, ValueError):
    """A parameter tree and a flat vector (or a node shape) disagree."""


class NumericalError(AutoGPsError, ArithmeticError):
    """The cost or its gradient is not finite."""


class DataMismatchError(AutoGPsError, ValueError):
    """Data fields are missing or have incompatible shapes."""
