import pytest
import numpy as np
import scipy.sparse as sp

from pyRadBio.constraints import ConstraintKind
from pyRadBio.optimization import (
    GradientDiagnostics,
    SensitivityAccumulator,
    aggregate_objective,
    assemble_gradient,
    effect_sensitivity,
    evaluate,
    gradient_diagnostics,
)
from pyRadBio.dij import create_dij
from pyRadBio.quantities import Effect


def test_effect_sensitivity_family_factors():
    acc = SensitivityAccumulator(3)
    acc.add(ConstraintKind.UNDERDOSE, np.array([0]), np.array([1.0]))
    acc.add(ConstraintKind.OVERDOSE, np.array([1]), np.array([1.0]))
    acc.add(ConstraintKind.DEVIATION, np.array([2]), np.array([1.0]))
    acc.add(ConstraintKind.MEAN, np.array([0, 1, 2]), np.array([0.5, 0.5, 0.5]))
    acc.add(ConstraintKind.EUD, np.array([2]), np.array([0.25]))

    assert np.allclose(effect_sensitivity(acc), [2.5, 2.5, 2.75])


def test_assemble_gradient_linear_only(dense_dij, sample_weights):
    dense_dij.sqrt_beta_dose = np.zeros_like(dense_dij.sqrt_beta_dose)
    effect_model = Effect(dense_dij)
    forward = effect_model.compute(sample_weights)

    n = dense_dij.num_of_voxels
    acc = SensitivityAccumulator(n)
    acc.add(ConstraintKind.MEAN, np.arange(n), np.ones(n))

    g = assemble_gradient(acc, effect_model, forward)
    assert np.allclose(g, dense_dij.alpha_dose.sum(axis=0))


def test_assemble_gradient_matches_evaluate(dense_dij, sample_cst, sample_weights):
    effect_model = Effect(dense_dij)
    forward = effect_model.compute(sample_weights)
    _, acc = aggregate_objective(forward.effect, dense_dij, sample_cst)

    _, g = evaluate(sample_weights, dense_dij, sample_cst)
    assert np.array_equal(assemble_gradient(acc, effect_model, forward), g)


def test_diagnostics_single_beamlet(dense_dij, sparse_dij, sample_cst, sample_weights):
    for dij in (dense_dij, sparse_dij):
        effect_model = Effect(dij)
        forward = effect_model.compute(sample_weights)
        _, acc = aggregate_objective(forward.effect, dij, sample_cst)
        d_effect = effect_sensitivity(acc)
        g = effect_model.compute_chain_derivative(d_effect, forward)

        for beamlet in range(dij.total_num_of_bixels):
            diagnostics = gradient_diagnostics(dij, d_effect, forward, beamlet=beamlet)
            assert isinstance(diagnostics, GradientDiagnostics)
            assert diagnostics.beamlet == beamlet
            assert np.isclose(diagnostics.single_beamlet_gradient, g[beamlet])

        assert np.allclose(
            diagnostics.quadratic_physical, dense_dij.physical_dose.T @ forward.quadratic
        )


def test_diagnostic_hook_opt_in(dense_dij, sample_cst, sample_weights):
    received = []

    f_plain, g_plain = evaluate(sample_weights, dense_dij, sample_cst)
    f_hook, g_hook = evaluate(
        sample_weights,
        dense_dij,
        sample_cst,
        diagnostic_hook=received.append,
        beamlet_of_interest=2,
    )

    assert len(received) == 1
    assert received[0].beamlet == 2
    assert np.isclose(received[0].single_beamlet_gradient, g_hook[2])
    assert f_hook == f_plain
    assert np.array_equal(g_hook, g_plain)


def test_diagnostic_hook_not_called_without_gradient(dense_dij, sample_cst, sample_weights):
    received = []
    evaluate(
        sample_weights, dense_dij, sample_cst, want_gradient=False, diagnostic_hook=received.append
    )
    assert received == []


@pytest.mark.parametrize("matrix_format", ["csc", "csr", "coo"])
def test_diagnostics_sparse_formats(
    sample_dij_dict, dense_dij, sample_cst, sample_weights, matrix_format
):
    sparse_dict = sample_dij_dict.copy()
    for key in ("physical_dose", "alpha_dose", "sqrt_beta_dose"):
        sparse_dict[key] = sp.coo_matrix(sample_dij_dict[key]).asformat(matrix_format)
    dij = create_dij(sparse_dict)
    assert dij.alpha_dose.format == matrix_format

    effect_model = Effect(dij)
    forward = effect_model.compute(sample_weights)
    _, acc = aggregate_objective(forward.effect, dij, sample_cst)
    d_effect = effect_sensitivity(acc)

    _, g_dense = evaluate(sample_weights, dense_dij, sample_cst)
    for beamlet in range(dij.total_num_of_bixels):
        diagnostics = gradient_diagnostics(dij, d_effect, forward, beamlet=beamlet)
        assert np.isclose(diagnostics.single_beamlet_gradient, g_dense[beamlet])

    # The influence data is left in its format
    assert dij.alpha_dose.format == matrix_format
