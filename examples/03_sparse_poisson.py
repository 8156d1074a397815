import numpy as np

import auto_gps
from auto_gps import (
    GP,
    SVA,
    SVGP,
    LatentGP,
    PoissonLikelihood,
    SEKernel,
    variational_gaussian,
)

rng = np.random.default_rng(2)
x = rng.random((100, 2))
y = np.round(10 * np.sum(x**2, axis=1)).astype(int)

# Every 5th input serves as an inducing point and stays fixed.
z = x[::5]
lgp = LatentGP(GP(0.0, 1.0 * SEKernel()), PoissonLikelihood(), 1e-6)
sva = SVA(lgp(z).fx, variational_gaussian(len(z)))
svgp = SVGP(lgp, sva, fixed_inducing_points=True)

fitted = auto_gps.fit(svgp, x, y, iterations=30)

data = auto_gps.FitData(x, y)
print("negative ELBO before:", float(auto_gps.costfunction(svgp, data)))
print("negative ELBO after :", float(auto_gps.costfunction(fitted, data)))
print("inducing points shared:", fitted.sva.fz.x is z)

mean, var = fitted.sva.marginals(x[:5])
print("predicted rates:", np.round(np.exp(np.asarray(mean) + 0.5 * np.asarray(var)), 2))
print("observed counts:", y[:5])
