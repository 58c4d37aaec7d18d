"""Evaluation of the biological objective function and its gradient."""

from typing import Callable, Optional

from numpy.typing import ArrayLike, NDArray

from pyRadBio.cst import StructureSet
from pyRadBio.dij import Dij
from pyRadBio.quantities import Effect
from ._aggregator import aggregate_objective
from ._gradient import (
    GradientDiagnostics,
    assemble_gradient,
    effect_sensitivity,
    gradient_diagnostics,
)


def evaluate(
    w: ArrayLike,
    dij: Dij,
    cst: StructureSet,
    want_gradient: bool = True,
    diagnostic_hook: Optional[Callable[[GradientDiagnostics], None]] = None,
    beamlet_of_interest: int = 0,
) -> tuple[float, Optional[NDArray]]:
    """
    Evaluate the effect based objective function.

    The inputs are used as given. Dimensions of the weights, the influence data
    and the structure indices are expected to be consistent (see
    ``validate_dij`` and ``validate_cst``).

    Parameters
    ----------
    w : ArrayLike
        Beamlet weights.
    dij : Dij
        Influence data.
    cst : StructureSet
        Structures with their constraints.
    want_gradient : bool, optional, default=True
        Whether to compute the gradient. If False, only the objective is computed.
    diagnostic_hook : Callable, optional
        Receives ``GradientDiagnostics`` for ``beamlet_of_interest`` after the
        gradient was computed. Does not alter the returned values.
    beamlet_of_interest : int, optional, default=0
        Beamlet reported to the diagnostic hook.

    Returns
    -------
    tuple[float, Optional[NDArray]]
        Objective value and gradient (None if not requested).

    Raises
    ------
    ConstraintKindError
        If a constraint of unknown kind is encountered.
    """
    effect_model = Effect(dij)
    forward = effect_model.compute(w)

    f, sensitivities = aggregate_objective(forward.effect, dij, cst)

    if not want_gradient:
        return f, None

    g = assemble_gradient(sensitivities, effect_model, forward)

    if diagnostic_hook is not None:
        diagnostic_hook(
            gradient_diagnostics(
                dij, effect_sensitivity(sensitivities), forward, beamlet=beamlet_of_interest
            )
        )

    return f, g
