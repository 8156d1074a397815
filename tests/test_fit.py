import numpy as np
import pytest

import auto_gps
from auto_gps import (
    GP,
    SVA,
    SVGP,
    FitData,
    FitOptions,
    KernelProduct,
    KernelSum,
    LatentGP,
    Matern32Kernel,
    Matern52Kernel,
    NoisyGP,
    NumericalError,
    PoissonLikelihood,
    Positive,
    SEKernel,
    ZeroMean,
    costfunction,
    isequal,
    parameterize,
    variational_gaussian,
    with_gaussian_noise,
    with_lengthscale,
)


def _kernel():
    return 2.0 * with_lengthscale(SEKernel(), 1.0) + 3.0 * Matern32Kernel() * Matern52Kernel()


def _grid():
    return np.arange(1, 101) / 100.0


def test_gp_without_noise():
    gp = GP(3.0, _kernel())
    x = _grid()
    y = gp(x, 0.1).sample(np.random.default_rng(0))

    fitted = auto_gps.fit(gp, x, y, iterations=1)

    assert isinstance(fitted, GP)
    assert isinstance(fitted.kernel, KernelSum)
    assert len(fitted.kernel.kernels) == 2
    assert isinstance(fitted.kernel.kernels[1], KernelProduct)
    assert not isequal(fitted, gp)


def test_gp_with_gaussian_noise():
    gp = with_gaussian_noise(GP(3.0, _kernel()), 0.1)
    x = _grid()
    y = gp.gp(x, 0.1).sample(np.random.default_rng(1))

    fitted = auto_gps.fit(gp, x, y, iterations=1)

    assert isinstance(fitted, NoisyGP)
    assert not isequal(fitted, gp)
    assert float(fitted.obs_noise) > 0.0


def _svgp_problem(fixed: bool):
    rng = np.random.default_rng(2)
    x = rng.random((100, 2))
    y = np.round(10 * np.sum(x**2, axis=1)).astype(int)
    z = x[::5]
    lgp = LatentGP(GP(0.0, 1.0 * SEKernel()), PoissonLikelihood(), 1e-6)
    sva = SVA(lgp(z).fx, variational_gaussian(len(z)))
    return SVGP(lgp, sva, fixed_inducing_points=fixed), x, y, z


def test_sparse_variational_2d_gp_with_poisson_likelihood():
    svgp, x, y, z = _svgp_problem(fixed=True)

    fitted = auto_gps.fit(svgp, x, y, iterations=1)

    assert isinstance(fitted, SVGP)
    assert not isequal(fitted, svgp)
    assert fitted.sva.fz.x is z
    assert not isequal(fitted.sva.q, svgp.sva.q)
    assert fitted.fixed_inducing_points


def test_free_inducing_points_are_optimized():
    svgp, x, y, z = _svgp_problem(fixed=False)

    fitted = auto_gps.fit(svgp, FitData(x, y), iterations=2)

    assert fitted.sva.fz.x is not z
    assert np.shape(fitted.sva.fz.x) == z.shape


def test_fit_does_not_mutate_input():
    gp = with_gaussian_noise(GP(3.0, _kernel()), 0.1)
    x = _grid()
    y = gp.gp(x, 0.1).sample(np.random.default_rng(3))
    snapshot = parameterize(gp)[1]

    auto_gps.fit(gp, x, y, iterations=1)

    assert gp.obs_noise == 0.1
    assert gp.gp.mean.c == 3.0
    assert isequal(parameterize(gp)[0](snapshot), gp)


def test_more_iterations_lower_the_cost():
    gp = with_gaussian_noise(GP(0.0, 1.0 * with_lengthscale(SEKernel(), 0.3)), 0.5)
    x = _grid()
    rng = np.random.default_rng(4)
    y = np.sin(6.0 * x) + rng.normal(0.0, 0.1, size=x.size)
    data = FitData(x, y)

    fitted = auto_gps.fit(gp, data, FitOptions(iterations=30))

    assert float(costfunction(fitted, data)) < float(costfunction(gp, data))
    assert float(fitted.obs_noise) < 0.5


def test_accepts_mapping_data_and_options_mapping():
    gp = with_gaussian_noise(GP(0.0, 1.0 * SEKernel()), 0.2)
    x = _grid()
    y = np.cos(3.0 * x)

    fitted = auto_gps.fit(gp, {"x": x, "y": y}, options={"iterations": 1})

    assert isinstance(fitted, NoisyGP)


def test_node_without_free_parameters_is_returned_unchanged():
    gp = GP(ZeroMean(), SEKernel())
    x = _grid()
    y = np.sin(x)

    fitted = auto_gps.fit(gp, x, y, iterations=5)

    assert isinstance(fitted, GP)
    assert fitted.kernel is gp.kernel
    assert isequal(fitted, gp)


def test_optimize_returns_parameters_not_a_node():
    gp = with_gaussian_noise(GP(1.0, 1.0 * SEKernel()), 0.3)
    x = _grid()
    y = np.sin(4.0 * x)
    model, theta0 = parameterize(gp)

    theta = auto_gps.optimize(model, theta0, FitData(x, y), iterations=3)

    assert isinstance(theta, tuple) and len(theta) == 2
    assert isinstance(theta[1], Positive)
    assert float(theta[1].value) > 0.0
    assert isinstance(model(theta), NoisyGP)


def test_non_finite_cost_raises_numerical_error():
    gp = with_gaussian_noise(GP(0.0, 1.0 * SEKernel()), 0.1)
    x = _grid()
    y = np.sin(x)
    y[10] = np.nan

    with pytest.raises(NumericalError):
        auto_gps.fit(gp, x, y, iterations=1)


def test_fit_rejects_bad_call_forms():
    gp = with_gaussian_noise(GP(0.0, SEKernel()), 0.1)
    x = _grid()
    with pytest.raises(TypeError):
        auto_gps.fit(gp)
    with pytest.raises(TypeError):
        auto_gps.fit(gp, x, x, x)
    with pytest.raises(ValueError):
        auto_gps.fit(gp, x, x, iterations=0)


def test_default_options_run_past_non_finite_trial_points():
    gp = with_gaussian_noise(GP(1.0, 1.0 * SEKernel()), 0.3)
    x = _grid()
    data = FitData(x, np.sin(4.0 * x))

    fitted = auto_gps.fit(gp, data, FitOptions())

    initial = float(costfunction(gp, data))
    final = float(costfunction(fitted, data))
    assert isinstance(fitted, NoisyGP)
    assert np.isfinite(initial) and np.isfinite(final)
    assert final < initial


def test_options_accepted_positionally_with_x_and_y():
    gp = with_gaussian_noise(GP(0.0, 1.0 * SEKernel()), 0.2)
    x = _grid()
    y = np.cos(3.0 * x)

    assert isinstance(auto_gps.fit(gp, x, y, FitOptions(iterations=1)), NoisyGP)
    assert isinstance(auto_gps.fit(gp, x, y, {"iterations": 1}), NoisyGP)
    assert isinstance(auto_gps.fit(gp, FitData(x, y), {"iterations": 1}), NoisyGP)
    with pytest.raises(TypeError):
        auto_gps.fit(gp, x, y, FitOptions(iterations=1), options={"iterations": 1})


def test_options_mapping_may_carry_scipy_settings():
    gp = with_gaussian_noise(GP(0.0, 1.0 * SEKernel()), 0.2)
    x = _grid()
    y = np.cos(3.0 * x)

    fitted = auto_gps.fit(gp, x, y, options={"iterations": 1, "gtol": 1e-3})

    assert isinstance(fitted, NoisyGP)
