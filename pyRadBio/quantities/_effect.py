"""Biological effect in the linear-quadratic model."""

from typing import NamedTuple

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyRadBio.quantities._base import FluenceDependentQuantity


class EffectResult(NamedTuple):
    """Forward result of the effect model, one entry per voxel."""

    linear: NDArray
    quadratic: NDArray
    effect: NDArray


class Effect(FluenceDependentQuantity):
    """
    Biological effect depending on fluence.

    The effect of a voxel is ``alpha_dose @ w + (sqrt_beta_dose @ w) ** 2``.
    """

    identifier = "effect"
    name = "biological effect"

    def _compute_quantity(self, fluence: NDArray) -> EffectResult:
        linear = _as_vector(self._dij.alpha_dose @ fluence)
        quadratic = _as_vector(self._dij.sqrt_beta_dose @ fluence)

        return EffectResult(linear, quadratic, linear + quadratic**2)

    def compute_chain_derivative(self, d_quantity: ArrayLike, forward: EffectResult) -> NDArray:
        """
        Propagate the effect derivative to the fluence.

        With ``e = a @ w + (s @ w) ** 2`` the fluence derivative is
        ``a.T @ de + 2 * s.T @ (de * (s @ w))``.

        Parameters
        ----------
        d_quantity : ArrayLike
            Derivative of the objective w.r.t. the effect of each voxel.
        forward : EffectResult
            Forward result at the fluence the derivative is taken at.

        Returns
        -------
        NDArray
            Derivative of the objective w.r.t. the fluence.
        """
        _d_effect = np.asarray(d_quantity, dtype=np.float64)

        bias = _as_vector(self._dij.alpha_dose.T @ _d_effect)
        quadratic_path = _as_vector(self._dij.sqrt_beta_dose.T @ (_d_effect * forward.quadratic))

        return bias + 2.0 * quadratic_path


def _as_vector(v) -> NDArray:
    return np.asarray(v, dtype=np.float64).ravel()
