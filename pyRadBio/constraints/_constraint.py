"""Constraint specifications evaluated on the biological effect."""

from enum import Enum
from typing import Any, Optional
import logging

import numpy as np
from pydantic import Field, model_validator
from typing_extensions import Self

from pyRadBio.core import PyRadBioBaseModel

logger = logging.getLogger(__name__)


class ConstraintKind(str, Enum):
    """
    Penalty shapes available for a structure.

    The values are the type strings used in matRad constraint definitions.
    Lookup by member name works as well and ignores case.
    """

    UNDERDOSE = "square underdosing"
    OVERDOSE = "square overdosing"
    DEVIATION = "square deviation"
    MEAN = "mean"
    EUD = "EUD"

    @classmethod
    def _missing_(cls, value: Any):
        if isinstance(value, str):
            key = value.strip()
            for member in cls:
                if key.upper() == member.name or key.lower() == member.value.lower():
                    return member
        return None

    @property
    def is_squared(self) -> bool:
        """Whether this is one of the piece-wise least-squares penalties."""
        return self in REFERENCE_DOSE_KINDS


REFERENCE_DOSE_KINDS = (
    ConstraintKind.UNDERDOSE,
    ConstraintKind.OVERDOSE,
    ConstraintKind.DEVIATION,
)


class ConstraintSpec(PyRadBioBaseModel):
    """
    A single penalty term attached to a structure.

    Attributes
    ----------
    kind : ConstraintKind
        Shape of the penalty.
    penalty : float
        Non-negative penalty weight ("rho").
    reference_dose : float, optional
        Reference physical dose level, converted to an effect with the voxel's
        alpha_x / beta_x. Required for the squared penalties, unused for MEAN.
    exponent : float, optional
        Exponent of the generalized mean. Required for EUD and must not be 0.

    Notes
    -----
    matRad-like definitions (``{"type": ..., "parameter": [rho, dose], "exponent": k}``)
    are converted on validation.
    """

    kind: ConstraintKind
    penalty: float = Field(default=1.0, ge=0.0, alias="rho")
    reference_dose: Optional[float] = Field(default=None)
    exponent: Optional[float] = Field(default=None)

    @model_validator(mode="before")
    @classmethod
    def _validate_model(cls, data: Any) -> Any:
        """Pre-validate the input and perform conversions if necessary."""

        # Check if this is a matRad-like constraint
        if isinstance(data, dict) and "type" in data:
            data = data.copy()
            data["kind"] = data.pop("type")

            params = data.pop("parameter", data.pop("parameters", []))

            # A single parameter will usually not be in a list so we put it into one
            if isinstance(params, np.ndarray):
                params = params.ravel().tolist()
            elif not isinstance(params, (list, tuple)):
                params = [params]
            params = list(params)

            if len(params) not in (1, 2):
                logger.warning(
                    "Constraint '%s' expects penalty and reference dose, but %d parameters "
                    "were provided.",
                    data["kind"],
                    len(params),
                )

            if len(params) > 0:
                data["penalty"] = params[0]
            if len(params) > 1:
                data["reference_dose"] = params[1]

        return data

    @model_validator(mode="after")
    def _check_parameters(self) -> Self:
        """Check the parameters required by the penalty shape."""
        if self.kind in REFERENCE_DOSE_KINDS and self.reference_dose is None:
            raise ValueError(f"Constraint '{self.kind.value}' requires a reference dose.")

        if self.kind == ConstraintKind.EUD:
            if self.exponent is None:
                raise ValueError("EUD constraint requires an exponent.")
            if self.exponent == 0.0:
                raise ValueError("EUD exponent must not be 0.")

        return self
