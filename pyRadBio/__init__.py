"""
Python package for effect based fluence optimization in radiation therapy.

This package provides
- Influence data and structure set data structures (matRad compatible).
- The biological effect in the linear-quadratic model.
- An effect based objective function with an analytic gradient.
- An objective function adapter for external non-linear solvers.

Import packages as follows:

    from pyRadBio import (
        validate_dij,
        validate_cst,
        evaluate,
        BioObjectiveFunction,
    )
"""

from importlib.metadata import version, PackageNotFoundError
import logging

from .dij import Dij, create_dij, validate_dij
from .cst import Structure, StructureSet, create_cst, validate_cst
from .constraints import ConstraintKind, ConstraintSpec
from .optimization import BioObjectiveFunction, evaluate

try:
    __version__ = version(__name__)
except PackageNotFoundError:
    # package is not installed
    pass

# Logging is not exposed by default and needs to be configured by the user.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "Dij",
    "create_dij",
    "validate_dij",
    "Structure",
    "StructureSet",
    "create_cst",
    "validate_cst",
    "ConstraintKind",
    "ConstraintSpec",
    "BioObjectiveFunction",
    "evaluate",
]
