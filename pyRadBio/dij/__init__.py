"""Module for Dij Datamodel and related functions."""

from pyRadBio.dij._dij import Dij, create_dij, validate_dij

__all__ = ["Dij", "create_dij", "validate_dij"]
