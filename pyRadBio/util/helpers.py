"""Helper functions for handling matRad-like data in pyRadBio."""

from typing import Any

import numpy as np


def dl2ld(dict_of_lists: dict[str, list]) -> list[dict]:
    """Converts a dictionary of equally long lists to a list of dictionaries.

    Parameters
    ----------
    dict_of_lists : dict
        The dictionary of lists to convert.

    Returns
    -------
    list[dict]
        A list of dictionaries.

    Raises
    ------
    TypeError
        If the lists differ in length.
    """
    if not dict_of_lists:
        return []

    if len(set(map(len, dict_of_lists.values()))) > 1:
        raise TypeError("All lists in the dictionary must have the same length.")

    return [dict(zip(dict_of_lists, t)) for t in zip(*dict_of_lists.values())]


def struct_array_to_list(data: Any, key: str) -> list:
    """Normalize a matRad struct (array) to a list of elements.

    A struct array read from a mat-file arrives either as a list of
    dictionaries, as a single dictionary (one element) or as a dictionary of
    lists (one list per field). ``key`` is a field every element carries and
    is used to tell the latter two apart.

    Parameters
    ----------
    data : Any
        The struct data.
    key : str
        Name of a field present in every struct element.

    Returns
    -------
    list
        One entry per struct element.
    """
    if data is None:
        return []

    if isinstance(data, np.ndarray):
        data = data.ravel().tolist()

    if isinstance(data, dict):
        if isinstance(data.get(key), list):
            return dl2ld(data)
        return [data]

    if isinstance(data, (list, tuple)):
        return list(data)

    return [data]
