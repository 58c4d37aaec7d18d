"""Structure (VOI) data model."""

from typing import Any, Literal, Union
from pydantic import (
    Field,
    field_validator,
)

import numpy as np
from numpydantic import NDArray

from pyRadBio.core import PyRadBioBaseModel
from pyRadBio.constraints import ConstraintSpec, get_constraint

VoiType = Literal["TARGET", "OAR", "IGNORED"]

PARTICIPATING_TYPES = ("TARGET", "OAR")


class Structure(PyRadBioBaseModel):
    """
    Represents a Volume of Interest (VOI) with its optimization constraints.

    Parameters
    ----------
    name : str
        The name of the structure.
    voi_type : str
        Classification of the structure ('TARGET', 'OAR' or 'IGNORED').
    indices : np.ndarray
        Linear (0-based) voxel indices belonging to the structure. Duplicates are
        removed and the indices are sorted.
    constraints : list[ConstraintSpec]
        Ordered list of the constraints evaluated on this structure.
    """

    name: str
    voi_type: VoiType
    indices: NDArray
    constraints: list[ConstraintSpec] = Field(
        default=[], description="List of constraint definitions"
    )

    @field_validator("voi_type", mode="before")
    @classmethod
    def normalize_voi_type(cls, v: Any) -> Any:
        """Strip and upper-case the classification before matching it."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("indices", mode="before")
    @classmethod
    def validate_indices(cls, v: Any) -> np.ndarray:
        """
        Validates the voxel indices.

        Raises
        ------
        ValueError
            If the indices are not non-negative integers.
        """
        v = np.asarray(v).ravel()

        if v.size == 0:
            return np.zeros((0,), dtype=np.int64)

        if not np.issubdtype(v.dtype, np.number):
            raise ValueError("Voxel indices must be numeric.")

        if not np.all(np.mod(v, 1) == 0):
            raise ValueError("Voxel indices must be integers.")

        v = v.astype(np.int64)
        if np.any(v < 0):
            raise ValueError("Voxel indices must be non-negative.")

        return np.unique(v)

    @field_validator("constraints", mode="before")
    @classmethod
    def validate_constraints(cls, v: Any) -> list[ConstraintSpec]:
        """Bring the constraint descriptions into ConstraintSpec form."""
        if v is None:
            return []

        if isinstance(v, (dict, ConstraintSpec, str)):
            v = [v]

        return [get_constraint(c) for c in v]

    @property
    def participates(self) -> bool:
        """Whether the structure enters the objective function."""
        return self.voi_type in PARTICIPATING_TYPES

    @property
    def num_of_voxels(self) -> int:
        """Number of voxels in the structure."""
        return int(self.indices.size)


def create_structure(data: Union[dict[str, Any], Structure, None] = None, **kwargs) -> Structure:
    """
    Create a Structure from raw data or keyword arguments.

    Parameters
    ----------
    data : Union[dict[str, Any], Structure, None]
        Dictionary containing the structure data.
    **kwargs
        Arbitrary keyword arguments.

    Returns
    -------
    Structure
        A Structure object.
    """
    if data:
        if isinstance(data, Structure):
            return data
        return Structure.model_validate(data)

    return Structure(**kwargs)


def validate_structure(
    structure: Union[dict[str, Any], Structure, None] = None, **kwargs
) -> Structure:
    """
    Validate and create a Structure.

    Synonym to create_structure but should be used in validation context.
    """
    return create_structure(structure, **kwargs)
