import numpy as np
import pytest

from auto_gps import (
    GP,
    ConstMean,
    KernelProduct,
    KernelSum,
    Matern32Kernel,
    Matern52Kernel,
    ScaleTransform,
    SEKernel,
    ZeroMean,
    isequal,
    variational_gaussian,
    with_gaussian_noise,
)


@pytest.mark.parametrize("cls", [SEKernel, Matern32Kernel, Matern52Kernel])
def test_metric_is_compared_exactly(cls):
    o1 = cls()
    o2 = cls("sqeuclidean")
    assert isequal(o1, o1)
    assert isequal(o2, o2)
    assert not isequal(o1, o2)


def test_unknown_metric_is_rejected():
    with pytest.raises(ValueError):
        SEKernel("cityblock")


def test_different_variants_are_unequal():
    assert not isequal(SEKernel(), Matern32Kernel())
    assert not isequal(ZeroMean(), ConstMean(0.0))
    assert not isequal(
        KernelSum((SEKernel(), SEKernel())), KernelProduct((SEKernel(), SEKernel()))
    )


def test_continuous_fields_use_tolerance():
    assert isequal(ConstMean(1.0), ConstMean(1.0 + 1e-12))
    assert not isequal(ConstMean(1.0), ConstMean(1.1))
    assert isequal(ScaleTransform(np.array([1.0, 2.0])), ScaleTransform(np.array([1.0, 2.0])))
    assert not isequal(ScaleTransform(np.array([1.0, 2.0])), ScaleTransform(1.0))


def test_composites_compare_pairwise_in_order():
    a = SEKernel() + Matern32Kernel()
    b = Matern32Kernel() + SEKernel()
    c = SEKernel() + Matern32Kernel() + Matern52Kernel()
    assert isequal(a, SEKernel() + Matern32Kernel())
    assert not isequal(a, b)
    assert not isequal(a, c)


def test_wrappers_compare_inner_and_local_fields():
    f = with_gaussian_noise(GP(3.0, 2.0 * SEKernel()), 0.1)
    assert isequal(f, with_gaussian_noise(GP(3.0, 2.0 * SEKernel()), 0.1))
    assert not isequal(f, with_gaussian_noise(GP(3.0, 2.0 * SEKernel()), 0.2))
    assert not isequal(f, with_gaussian_noise(GP(3.0, 2.5 * SEKernel()), 0.1))


def test_variational_gaussian_compares_lower_triangle():
    q = variational_gaussian(3)
    assert isequal(q, variational_gaussian(3))
    assert not isequal(q, variational_gaussian(4))


def test_never_raises():
    assert not isequal(object(), object())
    assert not isequal(None, None)
    assert not isequal(ConstMean(1.0), ConstMean("a"))
    assert not isequal(ConstMean(np.ones(2)), ConstMean(np.ones(3)))
