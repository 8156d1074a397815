from __future__ import annotations

from typing import Any

import numpy as np

# Default relative tolerance of approximate comparisons, sqrt(machine epsilon).
RTOL = float(np.sqrt(np.finfo(float).eps))


def isapprox(a: Any, b: Any, rtol: float = RTOL, atol: float = 0.0) -> bool:
    """Norm-based approximate equality of scalars or arrays of equal shape.

    ``|a - b| <= max(atol, rtol * max(|a|, |b|))`` with ``|.|`` the 2-norm, so
    arrays compare as whole vectors rather than elementwise.
    """
    try:
        a = np.asarray(a, dtype=float)
        b = np.asarray(b, dtype=float)
    except (TypeError, ValueError):
        return False
    if a.shape != b.shape:
        return False
    if not (np.all(np.isfinite(a)) and np.all(np.isfinite(b))):
        return bool(np.array_equal(a, b))
    na = float(np.linalg.norm(a.ravel()))
    nb = float(np.linalg.norm(b.ravel()))
    diff = float(np.linalg.norm((a - b).ravel()))
    return diff <= max(atol, rtol * max(na, nb))


def _jittered_cholesky(cov: np.ndarray, max_tries: int = 6) -> np.ndarray:
    cov = np.asarray(cov, dtype=float)
    cov = 0.5 * (cov + cov.T)
    diag = np.diag(cov)
    scale = float(np.max(diag)) if diag.size else 1.0
    scale = 1.0 if not np.isfinite(scale) or scale <= 0 else scale

    jitter = 0.0
    for i in range(max_tries):
        try:
            return np.linalg.cholesky(cov + jitter * np.eye(cov.shape[0]))
        except np.linalg.LinAlgError:
            jitter = (10.0 ** (-(max_tries - i))) * 1e-6 * scale + (
                jitter * 10.0 if jitter else 0.0
            )

    w, v = np.linalg.eigh(cov)
    w = np.clip(w, 0.0, None)
    return v @ np.diag(np.sqrt(w))


def sample_mvn(
    mean: np.ndarray, cov: np.ndarray, nsamples: int, rng: np.random.Generator
) -> np.ndarray:
    """Sample from MVN(mean, cov) robustly. Returns shape (nsamples, N)."""
    mean = np.asarray(mean, dtype=float)
    cov = np.asarray(cov, dtype=float)
    L = _jittered_cholesky(cov)
    z = rng.normal(size=(nsamples, mean.shape[0]))
    return mean[None, :] + z @ L.T
