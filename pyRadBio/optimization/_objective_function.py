"""Solver facing wrapper of the biological objective."""

from typing import Any, Callable, Optional, Union
import logging
import time

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyRadBio.cst import StructureSet, validate_cst
from pyRadBio.dij import Dij, validate_dij
from ._evaluator import evaluate
from ._gradient import GradientDiagnostics

logger = logging.getLogger(__name__)


class BioObjectiveFunction:
    """
    Objective function and gradient handles for an external solver.

    The influence data and structure set are validated once on construction
    and then treated as read-only.

    Parameters
    ----------
    dij : Union[Dij, dict]
        Influence data.
    cst : Union[StructureSet, dict, list]
        Structure set (or matRad-like cst).
    diagnostic_hook : Callable, optional
        Passed on to ``evaluate`` for every gradient evaluation.
    beamlet_of_interest : int, optional, default=0
        Beamlet reported to the diagnostic hook.

    Attributes
    ----------
    obj_times : list[float]
        Wall times of the objective evaluations in seconds.
    deriv_times : list[float]
        Wall times of the gradient evaluations in seconds.
    """

    def __init__(
        self,
        dij: Union[Dij, dict[str, Any]],
        cst: Union[StructureSet, dict[str, Any], list],
        diagnostic_hook: Optional[Callable[[GradientDiagnostics], None]] = None,
        beamlet_of_interest: int = 0,
    ):
        self._dij = validate_dij(dij)
        self._cst = validate_cst(cst)

        if self._cst.max_voxel_index() >= self._dij.num_of_voxels:
            raise ValueError(
                f"Structure set references voxel {self._cst.max_voxel_index()}, "
                f"but the influence data only has {self._dij.num_of_voxels} voxels."
            )

        if not 0 <= beamlet_of_interest < self._dij.total_num_of_bixels:
            raise ValueError(f"Beamlet of interest {beamlet_of_interest} out of range.")

        self.diagnostic_hook = diagnostic_hook
        self.beamlet_of_interest = beamlet_of_interest

        self.obj_times = []
        self.deriv_times = []

    @property
    def dij(self) -> Dij:
        """The validated influence data."""
        return self._dij

    @property
    def cst(self) -> StructureSet:
        """The validated structure set."""
        return self._cst

    @property
    def num_of_variables(self) -> int:
        """Number of beamlet weights."""
        return self._dij.total_num_of_bixels

    def objective(self, w: ArrayLike) -> float:
        """Objective function value for the weights ``w``."""
        t = time.time()
        f, _ = evaluate(w, self._dij, self._cst, want_gradient=False)
        self.obj_times.append(time.time() - t)
        return f

    def gradient(self, w: ArrayLike) -> NDArray:
        """Objective gradient for the weights ``w``."""
        t = time.time()
        _, g = evaluate(
            w,
            self._dij,
            self._cst,
            want_gradient=True,
            diagnostic_hook=self.diagnostic_hook,
            beamlet_of_interest=self.beamlet_of_interest,
        )
        self.deriv_times.append(time.time() - t)
        return g

    def __call__(self, w: ArrayLike) -> tuple[float, NDArray]:
        """Objective value and gradient in one evaluation."""
        t = time.time()
        f, g = evaluate(
            w,
            self._dij,
            self._cst,
            want_gradient=True,
            diagnostic_hook=self.diagnostic_hook,
            beamlet_of_interest=self.beamlet_of_interest,
        )
        self.deriv_times.append(time.time() - t)
        return f, g

    def log_timings(self) -> None:
        """Log evaluation counts and average timings."""
        if self.obj_times:
            logger.info(
                "%d Objective function evaluations, avg. time: %g +/- %g s",
                len(self.obj_times),
                np.mean(self.obj_times),
                np.std(self.obj_times),
            )
        if self.deriv_times:
            logger.info(
                "%d Derivative evaluations, avg. time: %g +/- %g s",
                len(self.deriv_times),
                np.mean(self.deriv_times),
                np.std(self.deriv_times),
            )
