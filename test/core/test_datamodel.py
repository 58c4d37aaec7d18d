import pytest
import numpy as np
import scipy.sparse as sp

from pyRadBio.core import PyRadBioBaseModel, PyRadBioError, ConstraintKindError


class DummyModel(PyRadBioBaseModel):
    value: int
    array: np.ndarray
    nested: dict


def make_dummy_data():
    return {
        "value": 10,
        "array": np.array([1, 2, 3]),
        "nested": {"a": {"a_1": np.array([1, 2, 3])}, "b": 2},
    }


@pytest.fixture
def dummy_instance():
    return DummyModel.model_validate(make_dummy_data())


@pytest.fixture
def another_dummy_instance():
    return DummyModel.model_validate(make_dummy_data())


def test_equality(dummy_instance, another_dummy_instance):
    assert dummy_instance == another_dummy_instance
    assert not dummy_instance != another_dummy_instance


def test_inequality_nested(dummy_instance, another_dummy_instance):
    another_dummy_instance.nested["a"]["a_1"] = np.array([1, 2, 4])
    assert dummy_instance != another_dummy_instance


def test_inequality_array(dummy_instance, another_dummy_instance):
    another_dummy_instance.array = np.array([3, 2, 1])
    assert dummy_instance != another_dummy_instance


def test_inequality_other_type(dummy_instance):
    assert dummy_instance != 10
    assert dummy_instance != {"value": 10}


def test_camel_case_alias():
    class CamelModel(PyRadBioBaseModel):
        some_value: int

    assert CamelModel.model_validate({"someValue": 1}).some_value == 1
    assert CamelModel.model_validate({"some_value": 2}).some_value == 2


def test_sparse_equality():
    class SparseModel(PyRadBioBaseModel):
        matrix: sp.csc_matrix

    mat = np.array([[1.0, 0.0], [0.0, 2.0]])
    model_a = SparseModel(matrix=sp.csc_matrix(mat))
    model_b = SparseModel(matrix=sp.csc_matrix(mat))
    model_c = SparseModel(matrix=sp.csc_matrix(2 * mat))

    assert model_a == model_b
    assert model_a != model_c


def test_constraint_kind_error():
    err = ConstraintKindError("max DVH")
    assert err.kind == "max DVH"
    assert "max DVH" in str(err)
    assert isinstance(err, PyRadBioError)
    assert isinstance(err, ValueError)
