"""Assembly of the fluence gradient from accumulated effect sensitivities."""

from typing import NamedTuple

import numpy as np
import scipy.sparse as sp
from numpy.typing import NDArray

from pyRadBio.constraints import ConstraintKind
from pyRadBio.dij import Dij
from pyRadBio.quantities import Effect, EffectResult
from ._aggregator import SensitivityAccumulator


class GradientDiagnostics(NamedTuple):
    """
    Auxiliary gradient quantities for verification.

    Attributes
    ----------
    beamlet : int
        The beamlet of interest.
    single_beamlet_gradient : float
        Gradient component of that beamlet, computed from its influence columns only.
    quadratic_physical : NDArray
        ``physical_dose.T @ (sqrt_beta_dose @ w)``, one entry per beamlet.
    """

    beamlet: int
    single_beamlet_gradient: float
    quadratic_physical: NDArray


def effect_sensitivity(sensitivities: SensitivityAccumulator) -> NDArray:
    """
    Combine the per family buffers into the derivative w.r.t. the effect.

    The squared penalties store half of their derivative and enter twice.
    """
    d_effect = None
    for kind, buffer in sensitivities.items():
        factor = 2.0 if kind.is_squared else 1.0
        d_effect = factor * buffer if d_effect is None else d_effect + factor * buffer

    return d_effect


def assemble_gradient(
    sensitivities: SensitivityAccumulator, effect_model: Effect, forward: EffectResult
) -> NDArray:
    """
    Propagate the accumulated sensitivities to the fluence gradient.

    Parameters
    ----------
    sensitivities : SensitivityAccumulator
        Accumulated effect sensitivities.
    effect_model : Effect
        The effect model the forward result was computed with.
    forward : EffectResult
        Forward result at the current fluence.

    Returns
    -------
    NDArray
        Gradient of the objective w.r.t. the fluence.
    """
    return effect_model.compute_chain_derivative(effect_sensitivity(sensitivities), forward)


def gradient_diagnostics(
    dij: Dij, d_effect: NDArray, forward: EffectResult, beamlet: int = 0
) -> GradientDiagnostics:
    """
    Recompute one gradient component column-wise (single field form).

    Parameters
    ----------
    dij : Dij
        Influence data.
    d_effect : NDArray
        Derivative of the objective w.r.t. the effect.
    forward : EffectResult
        Forward result at the current fluence.
    beamlet : int
        Index of the beamlet of interest.
    """
    alpha_column = _column(dij.alpha_dose, beamlet)
    sqrt_beta_column = _column(dij.sqrt_beta_dose, beamlet)

    single = float(d_effect @ (alpha_column + 2.0 * sqrt_beta_column * forward.quadratic))
    quadratic_physical = np.asarray(dij.physical_dose.T @ forward.quadratic).ravel()

    return GradientDiagnostics(beamlet, single, quadratic_physical)


def _column(matrix, j: int) -> NDArray:
    if sp.issparse(matrix):
        if matrix.format == "csc":
            return matrix[:, [j]].toarray().ravel()
        # Other formats: product with the unit vector
        unit = np.zeros((matrix.shape[1],), dtype=np.float64)
        unit[j] = 1.0
        return np.asarray(matrix @ unit).ravel()
    return np.asarray(matrix[:, j]).ravel()
