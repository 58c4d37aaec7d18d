import logging

import numpy as np
import scipy.sparse as sp
from scipy.optimize import minimize, Bounds

from pyRadBio import validate_dij, validate_cst, evaluate, BioObjectiveFunction

logging.basicConfig(level=logging.INFO)

num_voxels, num_bixels = 200, 40

# Synthetic influence data ("dij") with a sparse band structure
physical_dose = sp.random(num_voxels, num_bixels, density=0.2, random_state=0, format="csc")
dij = validate_dij(
    physical_dose=physical_dose,
    mAlphaDose=0.1 * physical_dose,
    mSqrtBetaDose=np.sqrt(0.05) * physical_dose,
    ax=np.full(num_voxels, 0.1),
    bx=np.full(num_voxels, 0.05),
)

# Structure set in the matRad cst layout (1-based voxel indices)
cst = validate_cst(
    [
        [
            0,
            "PTV",
            "TARGET",
            np.arange(1, 81),
            {},
            {"type": "square deviation", "parameter": [100.0, 2.0]},
        ],
        [
            1,
            "OAR",
            "OAR",
            np.arange(81, 151),
            {},
            {"type": ["square overdosing", "mean"], "parameter": [[10.0, 0.5], [1.0]]},
        ],
        [2, "BODY", "IGNORED", np.arange(1, num_voxels + 1), {}, []],
    ]
)

f0, _ = evaluate(np.ones(num_bixels), dij, cst, want_gradient=False)

# Optimization, one effect evaluation per iterate for value and gradient
obj = BioObjectiveFunction(dij, cst)
opt_result = minimize(
    fun=obj,
    x0=np.ones(num_bixels),
    jac=True,
    method="L-BFGS-B",
    bounds=Bounds(lb=0.0, ub=np.inf),
    options={"maxiter": 500},
)
obj.log_timings()
fluence = opt_result.x

# Result
f, g = evaluate(fluence, dij, cst)
result = dij.compute_result_arrays(fluence)

print(f"Objective: {f0:.4g} -> {f:.4g}, |g| = {np.linalg.norm(g):.3g}")
print(f"Mean target effect: {result['effect'][:80].mean():.4g}")
