"""Model nodes understood by the fitting machinery."""
from .approximations import (
    SVA,
    SparseVariationalApproximation,
    VariationalGaussian,
    elbo,
    variational_gaussian,
)
from .gps import DEFAULT_JITTER, GP, FiniteGP, LatentFiniteGP, LatentGP
from .kernels import (
    Kernel,
    KernelProduct,
    KernelSum,
    Matern32Kernel,
    Matern52Kernel,
    ScaledKernel,
    ScaleTransform,
    SEKernel,
    TransformedKernel,
    with_lengthscale,
)
from .likelihoods import BernoulliLikelihood, Likelihood, PoissonLikelihood
from .means import ConstMean, MeanFunction, ZeroMean
from .wrappers import SVGP, NoisyGP, with_gaussian_noise

__all__ = [
    "DEFAULT_JITTER",
    "ZeroMean",
    "ConstMean",
    "MeanFunction",
    "Kernel",
    "SEKernel",
    "Matern32Kernel",
    "Matern52Kernel",
    "KernelSum",
    "KernelProduct",
    "TransformedKernel",
    "ScaledKernel",
    "ScaleTransform",
    "with_lengthscale",
    "Likelihood",
    "BernoulliLikelihood",
    "PoissonLikelihood",
    "GP",
    "FiniteGP",
    "LatentGP",
    "LatentFiniteGP",
    "VariationalGaussian",
    "variational_gaussian",
    "SparseVariationalApproximation",
    "SVA",
    "elbo",
    "NoisyGP",
    "with_gaussian_noise",
    "SVGP",
]
