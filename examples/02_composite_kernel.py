import numpy as np

import auto_gps
from auto_gps import GP, Matern32Kernel, Matern52Kernel, SEKernel, with_lengthscale

kernel = 2.0 * with_lengthscale(SEKernel(), 1.0) + 3.0 * Matern32Kernel() * Matern52Kernel()
gp = auto_gps.with_gaussian_noise(GP(3.0, kernel), 0.1)

x = np.arange(1, 101) / 100.0
y = gp.gp(x, 0.1).sample(np.random.default_rng(1))

model, theta = auto_gps.parameterize(gp)
vec, _ = auto_gps.flatten(theta)
print("free parameters:", vec.size)

fitted = auto_gps.fit(gp, x, y, iterations=20)
data = auto_gps.FitData(x, y)
print("cost before:", float(auto_gps.costfunction(gp, data)))
print("cost after :", float(auto_gps.costfunction(fitted, data)))
print("changed    :", not auto_gps.isequal(fitted, gp))
