"""Module defining the constraint specifications attached to structures."""

from ._constraint import ConstraintKind, ConstraintSpec
from ._factory import get_available_constraints, get_constraint

__all__ = [
    "ConstraintKind",
    "ConstraintSpec",
    "get_available_constraints",
    "get_constraint",
]
