"""Module for the Structure Set datamodel."""

from ._structure import Structure, create_structure, validate_structure
from ._cst import StructureSet, create_cst, validate_cst

__all__ = [
    "StructureSet",
    "create_cst",
    "validate_cst",
    "Structure",
    "create_structure",
    "validate_structure",
]
