"""Factory methods to obtain constraint specifications."""

import logging
from typing import Union

from ._constraint import ConstraintKind, ConstraintSpec

logger = logging.getLogger(__name__)


def get_available_constraints() -> dict[str, ConstraintKind]:
    """
    Get the available constraint kinds.

    Returns
    -------
    dict
        The constraint kinds keyed by their matRad type string.
    """
    return {kind.value: kind for kind in ConstraintKind}


def get_constraint(constraint_desc: Union[str, dict, ConstraintSpec]) -> ConstraintSpec:
    """
    Returns a constraint instance based on a descriptive parameter.

    Parameters
    ----------
    constraint_desc : Union[str, dict, ConstraintSpec]
        A string with the constraint kind (only sensible for kinds without
        required parameters), a dictionary with the constraint configuration
        (pythonic or matRad-like) or a constraint instance

    Returns
    -------
    ConstraintSpec
        A constraint instance
    """
    if isinstance(constraint_desc, ConstraintSpec):
        constraint = constraint_desc
    elif isinstance(constraint_desc, str):
        constraint = ConstraintSpec(kind=constraint_desc)
    elif isinstance(constraint_desc, dict):
        if "kind" not in constraint_desc and "type" not in constraint_desc:
            raise ValueError(f"Invalid constraint description: {constraint_desc}")
        if "type" in constraint_desc:
            logger.debug("Constraint given as matRad-like definition.")
        constraint = ConstraintSpec.model_validate(constraint_desc)
    else:
        raise ValueError(f"Invalid constraint description: {constraint_desc}")

    return constraint
