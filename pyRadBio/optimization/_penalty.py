"""Penalty terms of a single constraint evaluated on a structure's effect."""

from typing import NamedTuple

import numpy as np
from numpy.typing import NDArray
from numba import njit

from pyRadBio.core import ConstraintKindError
from pyRadBio.constraints import ConstraintKind, ConstraintSpec


class PenaltyResult(NamedTuple):
    """
    Contribution of one constraint.

    Attributes
    ----------
    value : float
        Scalar contribution to the objective.
    delta : NDArray
        Per voxel effect sensitivity, aligned with the structure's voxels.
    """

    value: float
    delta: NDArray


def reference_effect(ax: NDArray, bx: NDArray, dose: float) -> NDArray:
    """Effect of a uniform physical dose level given the voxels' alpha_x and beta_x."""
    return ax * dose + bx * dose**2


def evaluate_penalty(
    constraint: ConstraintSpec, effect: NDArray, ax: NDArray, bx: NDArray
) -> PenaltyResult:
    """
    Evaluate one constraint on the effect of a structure.

    Parameters
    ----------
    constraint : ConstraintSpec
        The constraint to evaluate.
    effect : NDArray
        Effect in the structure's voxels.
    ax : NDArray
        alpha_x in the structure's voxels.
    bx : NDArray
        beta_x in the structure's voxels.

    Returns
    -------
    PenaltyResult
        Objective contribution and effect sensitivity. The squared penalties
        report ``(penalty / N) * diff``, which is half of their derivative.
        MEAN and EUD report their full derivative.

    Raises
    ------
    ConstraintKindError
        If the constraint kind is not known.
    """
    kind = constraint.kind

    if kind == ConstraintKind.UNDERDOSE:
        ref = reference_effect(ax, bx, constraint.reference_dose)
        value, delta = _squared_underdosing(effect, ref, constraint.penalty)
    elif kind == ConstraintKind.OVERDOSE:
        ref = reference_effect(ax, bx, constraint.reference_dose)
        value, delta = _squared_overdosing(effect, ref, constraint.penalty)
    elif kind == ConstraintKind.DEVIATION:
        ref = reference_effect(ax, bx, constraint.reference_dose)
        value, delta = _squared_deviation(effect, ref, constraint.penalty)
    elif kind == ConstraintKind.MEAN:
        value, delta = _mean(effect, constraint.penalty)
    elif kind == ConstraintKind.EUD:
        value, delta = _eud(effect, constraint.penalty, constraint.exponent)
    else:
        raise ConstraintKindError(kind)

    return PenaltyResult(float(value), delta)


@njit
def _squared_underdosing(effect, ref_effect, penalty):
    underdose = np.minimum(effect - ref_effect, 0.0)
    if effect.size == 0:
        return 0.0, underdose

    scale = penalty / effect.size
    return scale * np.sum(underdose * underdose), scale * underdose


@njit
def _squared_overdosing(effect, ref_effect, penalty):
    overdose = np.maximum(effect - ref_effect, 0.0)
    if effect.size == 0:
        return 0.0, overdose

    scale = penalty / effect.size
    return scale * np.sum(overdose * overdose), scale * overdose


@njit
def _squared_deviation(effect, ref_effect, penalty):
    deviation = effect - ref_effect
    if effect.size == 0:
        return 0.0, deviation

    scale = penalty / effect.size
    return scale * np.sum(deviation * deviation), scale * deviation


@njit
def _mean(effect, penalty):
    n = effect.size
    if n == 0:
        return 0.0, np.zeros(0)

    scale = penalty / n
    return scale * np.sum(effect), scale * np.ones(n)


@njit
def _eud(effect, penalty, exponent):
    n = effect.size
    if n == 0:
        return 0.0, np.zeros(0)

    eud_sum = np.sum(effect**exponent)

    # A non-positive base has no real root of arbitrary order
    if eud_sum <= 0.0:
        return 0.0, np.zeros(n)

    value = penalty * (eud_sum / n) ** (1.0 / exponent)
    delta = (
        penalty
        * (1.0 / n) ** (1.0 / exponent)
        * eud_sum ** ((1.0 - exponent) / exponent)
        * effect ** (exponent - 1.0)
    )
    return value, delta
