"""auto_gps public API."""
import jax

# Kernel matrices need double precision.
jax.config.update("jax_enable_x64", True)

from . import nodes
from .cost import costfunction, register_cost
from .equality import isequal
from .errors import (
    AutoGPsError,
    DataMismatchError,
    DispatchError,
    NumericalError,
    ShapeMismatchError,
)
from .fitting import DEFAULT_ITERATIONS, FitOptions, fit, optimize
from .flatten import flatten
from .inputs import FitData
from .nodes import *  # noqa: F401,F403
from .parameterize import (
    Parameterized,
    apply_parameters,
    extract_parameters,
    parameterize,
    register_rule,
)
from .params import Free, Positive, value

__all__ = [
    "fit",
    "optimize",
    "parameterize",
    "Parameterized",
    "extract_parameters",
    "apply_parameters",
    "register_rule",
    "isequal",
    "flatten",
    "value",
    "Free",
    "Positive",
    "costfunction",
    "register_cost",
    "FitData",
    "FitOptions",
    "DEFAULT_ITERATIONS",
    "AutoGPsError",
    "DispatchError",
    "ShapeMismatchError",
    "NumericalError",
    "DataMismatchError",
    "nodes",
] + list(nodes.__all__)
