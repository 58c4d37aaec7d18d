"""Contains the dij class as a collection of biological influence matrices."""

from typing import Any, Union, Annotated
import logging

from pydantic import (
    Field,
    field_validator,
    model_validator,
    ValidationInfo,
    computed_field,
)
from typing_extensions import Self

import numpy as np
from numpydantic import NDArray
import scipy.sparse as sp

from pyRadBio.core import PyRadBioBaseModel

logger = logging.getLogger(__name__)

InfluenceMatrix = Union[np.ndarray, sp.spmatrix, sp.sparray]


class Dij(PyRadBioBaseModel):
    """
    Collection of Dose and Effect Influence Matrices.

    All matrices map a beamlet weight vector onto voxels and share the same
    voxel indexing.

    Attributes
    ----------
    physical_dose : np.ndarray or scipy.sparse matrix
        Physical dose influence matrix (voxels x beamlets).
    alpha_dose : np.ndarray or scipy.sparse matrix
        Linear (alpha weighted) component of the effect influence.
    sqrt_beta_dose : np.ndarray or scipy.sparse matrix
        Square root of the quadratic (beta weighted) component of the effect influence.
    ax : np.ndarray
        Per voxel alpha_x of the reference radiation.
    bx : np.ndarray
        Per voxel beta_x of the reference radiation.
    total_num_of_bixels : int
        Total number of bixels in the matrices.
    num_of_voxels : int
        Total number of voxels in the matrices.
    """

    physical_dose: Any
    alpha_dose: Annotated[Any, Field(alias="mAlphaDose")]
    sqrt_beta_dose: Annotated[Any, Field(alias="mSqrtBetaDose")]

    ax: NDArray
    bx: NDArray

    @computed_field
    @property
    def total_num_of_bixels(self) -> int:
        """Number of bixels / beamlets in the influence matrices."""
        return int(self.alpha_dose.shape[1])

    @computed_field
    @property
    def num_of_voxels(self) -> int:
        """Number of voxels in the influence matrices."""
        return int(self.alpha_dose.shape[0])

    @field_validator("physical_dose", "alpha_dose", "sqrt_beta_dose", mode="before")
    @classmethod
    def validate_matrices(cls, v: Any, info: ValidationInfo) -> InfluenceMatrix:
        """
        Validate an influence matrix.

        matRad stores the matrices in a cell per scenario. Such a container is
        unwrapped to the nominal scenario matrix.

        Raises
        ------
            ValueError: if the matrix is missing, not numeric or not 2D.
        """

        if isinstance(v, list) or (isinstance(v, np.ndarray) and v.dtype == np.dtype(object)):
            cells = np.asarray(v, dtype=object)
            if cells.size > 1:
                logger.warning(
                    "%s holds %d scenarios, only the nominal scenario is used.",
                    info.field_name,
                    cells.size,
                )
            v = cells.flat[0] if cells.size > 0 else None

        if v is None:
            raise ValueError(f"{info.field_name} is required.")

        if not isinstance(v, (sp.spmatrix, sp.sparray, np.ndarray)) or not np.issubdtype(
            v.dtype, np.number
        ):
            raise ValueError(f"{info.field_name} must be a numeric array.")
        if not v.ndim == 2:
            raise ValueError(f"{info.field_name} must be a 2D array.")

        if isinstance(v, np.ndarray):
            return np.asarray(v, dtype=np.float64)

        return v

    @field_validator("ax", "bx", mode="before")
    @classmethod
    def validate_tissue_parameters(cls, v: Any, info: ValidationInfo) -> np.ndarray:
        """
        Validate per voxel tissue parameters.

        matRad ships them as column vectors, which are flattened here.

        Raises
        ------
            ValueError: if the parameters are missing or not numeric.
        """
        if v is None:
            raise ValueError(f"{info.field_name} is required.")

        v = np.asarray(v)
        if not np.issubdtype(v.dtype, np.number):
            raise ValueError(f"{info.field_name} must be numeric.")

        return v.astype(np.float64).ravel()

    @model_validator(mode="after")
    def check_consistent_dimensions(self) -> Self:
        """
        Check that all matrices and tissue vectors share the voxel indexing.

        Raises
        ------
            ValueError: on inconsistent shapes.
        """
        shape = self.alpha_dose.shape
        for name in ("physical_dose", "sqrt_beta_dose"):
            if getattr(self, name).shape != shape:
                raise ValueError(
                    f"{name} has shape {getattr(self, name).shape}, "
                    f"but alpha_dose has shape {shape}"
                )

        for name in ("ax", "bx"):
            if getattr(self, name).size != shape[0]:
                raise ValueError(f"{name} must have one entry per voxel ({shape[0]})")

        return self

    def compute_result_arrays(self, intensity: np.ndarray) -> dict[str, np.ndarray]:
        """
        Compute result arrays from an intensity vector.

        Parameters
        ----------
        intensity : np.ndarray
            The intensity to apply to the influence matrices.

        Returns
        -------
        dict[str, np.ndarray]
            Physical dose and biological effect per voxel.
        """
        intensity = np.asarray(intensity, dtype=np.float64)

        return {
            "physical_dose": np.asarray(self.physical_dose @ intensity).ravel(),
            "effect": np.asarray(
                self.alpha_dose @ intensity + (self.sqrt_beta_dose @ intensity) ** 2
            ).ravel(),
        }


def create_dij(data: Union[dict[str, Any], Dij, None] = None, **kwargs) -> Dij:
    """
    Create a Dij object from raw data or keyword arguments.

    Parameters
    ----------
    data : Union[dict[str, Any], Dij, None]
        Dictionary containing the data to create the Dij object.
    **kwargs
        Arbitrary keyword arguments.

    Returns
    -------
    Dij
        A Dij object.
    """

    if data:
        # If data is already a Dij object, return it directly
        if isinstance(data, Dij):
            return data

        return Dij.model_validate(data)

    return Dij(**kwargs)


def validate_dij(dij: Union[dict[str, Any], Dij, None] = None, **kwargs) -> Dij:
    """
    Validate and creates a Dij object.

    Synonym to create_dij but should be used in validation context.

    Parameters
    ----------
    dij : Union[dict[str, Any], Dij, None], optional
        Dictionary containing the data to create the Dij object, by default None.
    **kwargs
        Arbitrary keyword arguments.

    Returns
    -------
    Dij
        A validated Dij object.
    """
    return create_dij(dij, **kwargs)
