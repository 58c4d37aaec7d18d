"""Basic Model for all pyRadBio Datastructures."""

from typing import Any
import numpy as np
import scipy.sparse as sp
from pydantic import (
    AliasGenerator,
    BaseModel,
    ConfigDict,
)
from pydantic.alias_generators import to_camel


class PyRadBioBaseModel(BaseModel):
    """
    Base class for all pyRadBio data structures.

    Extends Pydantic's BaseModel to use pydantic validation and allows
    matRad-style camelCase keys next to the pythonic snake_case names.

    Attributes
    ----------
    model_config : ConfigDict
        Configuration for the model, including alias generation, population by
        name, arbitrary types allowed, assignment validation, and attribute
        creation from dictionary.
    """

    model_config = ConfigDict(
        alias_generator=AliasGenerator(alias=to_camel),
        populate_by_name=True,  # Allows both snake_case and camelCase attributes
        arbitrary_types_allowed=True,  # Allows arbitrary types in the model (will be casted)
        validate_assignment=True,  # Validate assignment of values to fields
        # (not only during construction)
        from_attributes=True,  # Allows to create a model from a dictionary
    )

    def __eq__(self, other: Any) -> bool:
        """
        Specialized __eq__ method to compare two PyRadBioBaseModel instances.

        It first tries to compare the instances using the super().__eq__ method.
        If this fails, it compares the dictionaries. This is due to some issues
        comparing numpy arrays and sparse matrices within the models.
        """
        try:
            return super().__eq__(other)
        except ValueError:
            if not isinstance(other, BaseModel):
                return False
            if self.__dict__.keys() != other.__dict__.keys():
                return False
            stack = [(self.__dict__, other.__dict__)]
            while stack:
                dict_a, dict_b = stack.pop()
                if dict_a.keys() != dict_b.keys():
                    return False
                for key in dict_a:
                    val_a, val_b = dict_a[key], dict_b[key]
                    if isinstance(val_a, dict) and isinstance(val_b, dict):
                        stack.append((val_a, val_b))
                    elif sp.issparse(val_a) or sp.issparse(val_b):
                        if not (sp.issparse(val_a) and sp.issparse(val_b)):
                            return False
                        if val_a.shape != val_b.shape or (val_a != val_b).nnz > 0:
                            return False
                    elif isinstance(val_a, np.ndarray) and isinstance(val_b, np.ndarray):
                        if not np.array_equal(val_a, val_b):
                            return False
                    elif val_a != val_b:
                        return False
            return True

    def __ne__(self, other: Any) -> bool:
        """
        Specialized __ne__ method to compare two PyRadBioBaseModel instances.

        This method returns the negation of the __eq__ method.
        """
        if isinstance(other, self.__class__):
            return not self.__eq__(other)
        else:
            return True
