"""Utility functions for pyRadBio."""

from .helpers import dl2ld, struct_array_to_list

__all__ = ["dl2ld", "struct_array_to_list"]
