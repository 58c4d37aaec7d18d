from abc import ABC, abstractmethod
from typing import ClassVar, Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyRadBio.dij import Dij, validate_dij


class FluenceDependentQuantity(ABC):
    """
    Base class for quantities that depend on fluence distributions.

    Quantities hold a read-only reference to the influence data and keep no
    state depending on the fluence, so one instance can serve concurrent
    evaluations.
    """

    name: ClassVar[str]
    identifier: ClassVar[str]

    def __init__(self, dij: Dij):
        self._dij = validate_dij(dij)

    @property
    def dij(self) -> Dij:
        """The influence data the quantity is computed from."""
        return self._dij

    def __call__(self, fluence: ArrayLike) -> Any:
        """
        Make the quantity callable by calling the compute method.

        Parameters
        ----------
        fluence : ArrayLike
            Fluence vector.
        """

        return self.compute(fluence)

    def compute(self, fluence: ArrayLike) -> Any:
        """
        Forward calculation of the quantity from the fluence.

        Parameters
        ----------
        fluence : ArrayLike
            Fluence vector.
        """
        return self._compute_quantity(np.asarray(fluence, dtype=np.float64))

    @abstractmethod
    def _compute_quantity(self, fluence: NDArray) -> Any:
        """
        Calculate the quantity for a fluence vector.

        Parameters
        ----------
        fluence : NDArray
            Fluence vector.
        """

    @abstractmethod
    def compute_chain_derivative(self, d_quantity: ArrayLike, forward: Any) -> NDArray:
        """
        Fluence derivative from the derivative w.r.t. the quantity.

        Parameters
        ----------
        d_quantity : ArrayLike
            Derivative of the objective w.r.t. the quantity (per voxel).
        forward : Any
            Result of the forward calculation at the current fluence.

        Returns
        -------
        NDArray
            Derivative of the objective w.r.t. the fluence.
        """
