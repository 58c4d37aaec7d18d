"""Fluence dependent quantities the objective is evaluated on."""

from ._base import FluenceDependentQuantity
from ._effect import Effect, EffectResult

__all__ = [
    "FluenceDependentQuantity",
    "Effect",
    "EffectResult",
]
