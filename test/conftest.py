import pytest
import numpy as np
import scipy.sparse as sp

from pyRadBio.dij import Dij, create_dij
from pyRadBio.cst import StructureSet, create_cst

NUM_VOXELS = 8
NUM_BIXELS = 5


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def sample_dij_dict(rng):
    return {
        "physical_dose": rng.uniform(0.0, 1.0, (NUM_VOXELS, NUM_BIXELS)),
        "alpha_dose": rng.uniform(0.0, 0.5, (NUM_VOXELS, NUM_BIXELS)),
        "sqrt_beta_dose": rng.uniform(0.0, 0.3, (NUM_VOXELS, NUM_BIXELS)),
        "ax": rng.uniform(0.1, 0.3, NUM_VOXELS),
        "bx": rng.uniform(0.02, 0.1, NUM_VOXELS),
    }


@pytest.fixture
def dense_dij(sample_dij_dict) -> Dij:
    return create_dij(sample_dij_dict)


@pytest.fixture
def sparse_dij(sample_dij_dict) -> Dij:
    sparse_dict = sample_dij_dict.copy()
    for key in ("physical_dose", "alpha_dose", "sqrt_beta_dose"):
        sparse_dict[key] = sp.csc_matrix(sample_dij_dict[key])
    return create_dij(sparse_dict)


@pytest.fixture
def sample_cst_dict():
    return {
        "structures": [
            {
                "name": "PTV",
                "voi_type": "TARGET",
                "indices": [0, 1, 2, 3],
                "constraints": [
                    {"kind": "square deviation", "penalty": 100.0, "reference_dose": 4.0},
                    {"kind": "square underdosing", "penalty": 50.0, "reference_dose": 6.0},
                    {"kind": "EUD", "penalty": 2.0, "exponent": -4.0},
                ],
            },
            {
                "name": "Rectum",
                "voi_type": "OAR",
                "indices": [3, 4, 5, 6],
                "constraints": [
                    {"kind": "square overdosing", "penalty": 30.0, "reference_dose": 1.0},
                    {"kind": "mean", "penalty": 5.0},
                    {"kind": "EUD", "penalty": 3.0, "exponent": 3.5},
                ],
            },
            {
                "name": "Body",
                "voi_type": "OAR",
                "indices": list(range(NUM_VOXELS)),
                "constraints": [
                    {"kind": "EUD", "penalty": 1.0, "exponent": 0.5},
                    {"kind": "square overdosing", "penalty": 10.0, "reference_dose": 2.0},
                ],
            },
        ]
    }


@pytest.fixture
def sample_cst(sample_cst_dict) -> StructureSet:
    return create_cst(sample_cst_dict)


@pytest.fixture
def sample_weights(rng):
    return rng.uniform(0.5, 1.5, NUM_BIXELS)


@pytest.fixture
def matrad_cst_raw():
    """cst cell array as read from a matRad mat-file (1-based indices)."""
    return [
        [
            0,
            "PTV",
            "TARGET",
            np.array([[1.0], [2.0], [3.0]]),
            {"Priority": 1},
            {"type": "square deviation", "parameter": np.array([800.0, 60.0])},
        ],
        [
            1,
            "OAR",
            "OAR",
            [np.array([4, 5])],
            {"Priority": 2},
            {
                "type": ["square overdosing", "EUD"],
                "parameter": [[300.0, 30.0], [5.0, 0.0]],
                "exponent": [1.0, 3.5],
            },
        ],
        [2, "Couch", "IGNORED", np.array([6, 7]), {"Priority": 3}, []],
    ]


@pytest.fixture
def fd_gradient():
    """Central finite difference estimate of a scalar function's gradient."""

    def finite_difference_gradient(fun, w, step=1e-6):
        grad = np.zeros_like(w)
        for i in range(w.size):
            e_i = np.zeros_like(w)
            e_i[i] = step
            grad[i] = (fun(w + e_i) - fun(w - e_i)) / (2.0 * step)
        return grad

    return finite_difference_gradient
