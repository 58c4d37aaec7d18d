"""Accumulation of all constraint penalties of a structure set."""

from typing import Iterator
import logging

import numpy as np
from numpy.typing import NDArray

from pyRadBio.constraints import ConstraintKind
from pyRadBio.cst import StructureSet
from pyRadBio.dij import Dij
from ._penalty import evaluate_penalty

logger = logging.getLogger(__name__)


class SensitivityAccumulator:
    """
    Per voxel effect sensitivities, one buffer per penalty family.

    Buffers start at zero and are only ever added to, so voxels shared by
    several structures or constraints collect every contribution.

    Parameters
    ----------
    num_voxels : int
        Length of each buffer.
    """

    def __init__(self, num_voxels: int):
        self._buffers = {
            kind: np.zeros((num_voxels,), dtype=np.float64) for kind in ConstraintKind
        }

    def add(self, kind: ConstraintKind, indices: NDArray, delta: NDArray) -> None:
        """
        Add a sensitivity vector into the buffer of a penalty family.

        Parameters
        ----------
        kind : ConstraintKind
            The penalty family.
        indices : NDArray
            Unique voxel indices the delta refers to.
        delta : NDArray
            Sensitivity per indexed voxel.
        """
        self._buffers[ConstraintKind(kind)][indices] += delta

    def __getitem__(self, kind: ConstraintKind) -> NDArray:
        return self._buffers[ConstraintKind(kind)]

    def __iter__(self) -> Iterator[ConstraintKind]:
        return iter(self._buffers)

    def items(self):
        """Iterate over (kind, buffer) pairs."""
        return self._buffers.items()


def aggregate_objective(
    effect: NDArray, dij: Dij, cst: StructureSet
) -> tuple[float, SensitivityAccumulator]:
    """
    Sum the penalties of all participating structures.

    Parameters
    ----------
    effect : NDArray
        Effect in every voxel.
    dij : Dij
        Influence data providing alpha_x and beta_x.
    cst : StructureSet
        The structures and their constraints. IGNORED structures are skipped.

    Returns
    -------
    tuple[float, SensitivityAccumulator]
        Objective value and the accumulated effect sensitivities.
    """
    f = 0.0
    sensitivities = SensitivityAccumulator(effect.size)

    for structure in cst.structures:
        if not structure.participates:
            continue

        ix = structure.indices
        effect_voi = effect[ix]
        ax_voi = dij.ax[ix]
        bx_voi = dij.bx[ix]

        f_voi = 0.0
        for constraint in structure.constraints:
            result = evaluate_penalty(constraint, effect_voi, ax_voi, bx_voi)
            f_voi += result.value
            sensitivities.add(constraint.kind, ix, result.delta)

        f += f_voi
        logger.debug("Structure '%s' contributes %g", structure.name, f_voi)

    return f, sensitivities
