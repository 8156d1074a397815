import numpy as np

import auto_gps
from auto_gps import (
    GP,
    SVA,
    SVGP,
    BernoulliLikelihood,
    LatentGP,
    Matern52Kernel,
    with_lengthscale,
    variational_gaussian,
)

rng = np.random.default_rng(3)
x = np.sort(rng.uniform(-3.0, 3.0, size=80))
y = (rng.random(x.size) < 1.0 / (1.0 + np.exp(-2.0 * np.sin(x)))).astype(float)

z = np.linspace(-3.0, 3.0, 10)
lgp = LatentGP(GP(0.0, 1.0 * with_lengthscale(Matern52Kernel(), 1.0)), BernoulliLikelihood())
sva = SVA(lgp(z).fx, variational_gaussian(len(z)))

# Inducing locations are optimized together with everything else.
fitted = auto_gps.fit(SVGP(lgp, sva), x, y, iterations=20)

mean, _ = fitted.sva.marginals(x)
accuracy = np.mean((np.asarray(mean) > 0.0) == (y > 0.5))
print("training accuracy:", round(float(accuracy), 3))
print("inducing points moved:", not np.allclose(np.asarray(fitted.sva.fz.x), z))
