"""Structure Set Implementation."""

from typing import Any, Union
import logging

from typing_extensions import Self
from pydantic import (
    Field,
    model_validator,
)

import numpy as np

from pyRadBio.core import PyRadBioBaseModel
from pyRadBio.util import struct_array_to_list
from ._structure import Structure, validate_structure

logger = logging.getLogger(__name__)


class StructureSet(PyRadBioBaseModel):
    """
    Represents the ordered set of structures entering the objective function.

    Attributes
    ----------
    structures : list[Structure]
        The structures. Voxels may be shared between structures.
    """

    structures: list[Structure] = Field(description="List of structures in the Structure Set")

    @classmethod
    def _process_matrad_data(cls, cst_data: list) -> list[Structure]:
        """
        Handle a cst cell array coming from matRad.

        Rows are ``[index, name, type, indices, properties, constraints]`` with
        1-based voxel indices.
        """
        structure_list = []

        for vdata in cst_data:
            vdata = list(vdata)
            if len(vdata) < 4:
                raise ValueError(f"matRad cst row has only {len(vdata)} columns")

            # Multi-scenario index lists are wrapped, we use the nominal one
            idx = vdata[3]
            if isinstance(idx, np.ndarray) and idx.dtype == np.dtype(object):
                idx = idx.ravel()[0]
            elif isinstance(idx, (list, tuple)) and idx and not np.isscalar(idx[0]):
                idx = idx[0]
            idx = np.asarray(idx, dtype=np.int64).ravel() - 1

            constraints = struct_array_to_list(vdata[5] if len(vdata) > 5 else None, "type")

            structure = validate_structure(
                name=str(vdata[1]),
                voi_type=str(vdata[2]),
                indices=idx,
                constraints=constraints,
            )
            structure_list.append(structure)

        return structure_list

    @model_validator(mode="before")
    @classmethod
    def _validate_structures(cls, data: Any) -> Any:
        # A bare list is taken as the list of structures
        if isinstance(data, (list, np.ndarray)):
            data = {"structures": data}

        if not isinstance(data, dict):
            return data

        structures = data.get("structures", data.get("vois"))
        if structures is None:
            raise ValueError("No cst provided. Please provide a cst.")

        # Convert ndarray to list if needed.
        # needed for matRad cell array
        if isinstance(structures, np.ndarray):
            structures = structures.tolist()

        # If the entries are neither dicts nor Structures, assume matRad data
        if (
            isinstance(structures, list)
            and structures
            and not isinstance(structures[0], (dict, Structure))
        ):
            structures = cls._process_matrad_data(structures)

        data = {k: v for k, v in data.items() if k != "vois"}
        data["structures"] = structures
        return data

    @model_validator(mode="after")
    def check_cst(self) -> Self:
        """Warn about structures that are constrained but hold no voxels."""

        for structure in self.structures:
            if structure.participates and structure.constraints and structure.num_of_voxels == 0:
                logger.warning(
                    "Structure '%s' has constraints but no voxels, it will not contribute.",
                    structure.name,
                )

        return self

    # Additional Properties
    @property
    def voi_types(self) -> list:
        """Return the unique VOI types in the Structure Set."""
        return list({structure.voi_type for structure in self.structures})

    def participating_structures(self) -> list[Structure]:
        """Return the structures entering the objective function, in order."""
        return [structure for structure in self.structures if structure.participates]

    def max_voxel_index(self) -> int:
        """Return the largest voxel index referenced by any structure (-1 if none)."""
        max_indices = [int(s.indices.max()) for s in self.structures if s.num_of_voxels > 0]
        return max(max_indices, default=-1)


def create_cst(
    data: Union[dict[str, Any], list, StructureSet, None] = None, **kwargs
) -> StructureSet:
    """
    Create a StructureSet from raw data or keyword arguments.

    Parameters
    ----------
    data : Union[dict[str, Any], list, StructureSet, None]
        Dictionary with the structure set data, a list of structures or a
        matRad cst cell array.
    **kwargs
        Arbitrary keyword arguments.

    Returns
    -------
    StructureSet
        A StructureSet object.
    """
    if data is not None:
        if isinstance(data, StructureSet):
            return data
        return StructureSet.model_validate(data)

    return StructureSet(**kwargs)


def validate_cst(
    cst: Union[dict[str, Any], list, StructureSet, None] = None, **kwargs
) -> StructureSet:
    """
    Validate and create a StructureSet.

    Synonym to create_cst but should be used in validation context.

    Parameters
    ----------
    cst : Union[dict[str, Any], list, StructureSet, None], optional
        Data to create the StructureSet from, by default None.
    **kwargs
        Arbitrary keyword arguments.

    Returns
    -------
    StructureSet
        A validated StructureSet object.
    """
    return create_cst(cst, **kwargs)
