"""Biological objective function and its gradient."""

from ._penalty import PenaltyResult, evaluate_penalty, reference_effect
from ._aggregator import SensitivityAccumulator, aggregate_objective
from ._gradient import (
    GradientDiagnostics,
    assemble_gradient,
    effect_sensitivity,
    gradient_diagnostics,
)
from ._evaluator import evaluate
from ._objective_function import BioObjectiveFunction

__all__ = [
    "PenaltyResult",
    "evaluate_penalty",
    "reference_effect",
    "SensitivityAccumulator",
    "aggregate_objective",
    "GradientDiagnostics",
    "assemble_gradient",
    "effect_sensitivity",
    "gradient_diagnostics",
    "evaluate",
    "BioObjectiveFunction",
]
