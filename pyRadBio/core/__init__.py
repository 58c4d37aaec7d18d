"""Core module with fundamental classes and functions for pyRadBio."""

from ._exceptions import PyRadBioError, ConstraintKindError
from .datamodel import PyRadBioBaseModel

__all__ = [
    "PyRadBioError",
    "ConstraintKindError",
    "PyRadBioBaseModel",
]
