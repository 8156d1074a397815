import numpy as np
import matplotlib.pyplot as plt

import auto_gps
from auto_gps import GP, SEKernel, with_gaussian_noise, with_lengthscale

rng = np.random.default_rng(0)
x = np.linspace(0.0, 1.0, 60)
y = np.sin(8.0 * x) + rng.normal(0.0, 0.2, size=x.size)

# Start from a deliberately poor guess: long lengthscale, large noise.
gp = with_gaussian_noise(GP(0.0, 1.0 * with_lengthscale(SEKernel(), 1.0)), 1.0)
fitted = auto_gps.fit(gp, x, y, iterations=100)

kernel = fitted.gp.kernel
print("signal variance:", float(kernel.sigma2))
print("lengthscale    :", 1.0 / float(kernel.kernel.transform.s))
print("noise variance :", float(fitted.obs_noise))
print("mean           :", float(fitted.gp.mean.c))

# Posterior mean on a grid, for a quick visual check.
xg = np.linspace(0.0, 1.0, 200)
K = np.asarray(fitted.gp(x, fitted.obs_noise).cov())
Ks = np.asarray(kernel.kernelmatrix(xg, x))
r = y - np.asarray(fitted.gp.mean(x))
mu = np.asarray(fitted.gp.mean(xg)) + Ks @ np.linalg.solve(K, r)

fig, ax = plt.subplots()
ax.plot(x, y, ".", label="data")
ax.plot(xg, mu, "-", label="posterior mean")
ax.plot(xg, np.sin(8.0 * xg), "k:", lw=1, label="true")
ax.legend()
plt.show()
