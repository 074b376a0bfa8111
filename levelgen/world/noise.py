from __future__ import annotations

import numpy as np

from levelgen.util.math import floorfrac, lerp, smoothstep
from levelgen.world.hashing import khash2i, rand, wrapping_mul
from levelgen.world.salts import OCTAVE_SALTS


def noise2d(x: np.ndarray, y: np.ndarray, seed: int) -> np.ndarray:
    """2D value noise, fully vectorized, float32.

    Hashes the four lattice corners around each point, maps them to [0,1] and
    blends them bilinearly with smoothstep easing (x first, then y).
    Nominally in [0,1), not clamped. At integer (x, y) the result is exactly
    the corner value rand(khash2i(x, y, seed)).
    """
    xfloor, xfrac = floorfrac(x)
    yfloor, yfrac = floorfrac(y)

    x0 = xfloor.astype(np.int32)
    x1 = x0 + np.int32(1)
    y0 = yfloor.astype(np.int32)
    y1 = y0 + np.int32(1)

    h00 = rand(khash2i(x0, y0, seed))
    h10 = rand(khash2i(x1, y0, seed))
    h01 = rand(khash2i(x0, y1, seed))
    h11 = rand(khash2i(x1, y1, seed))

    u = smoothstep(np.atleast_1d(xfrac))
    v = smoothstep(np.atleast_1d(yfrac))
    ptop = lerp(h00, h10, u)
    pbot = lerp(h01, h11, u)
    return lerp(ptop, pbot, v)


def frac_noise(x: np.ndarray, y: np.ndarray, seed: int) -> np.ndarray:
    """Four octaves of noise2d (x1, x2, x4, x8; amplitudes 1, 1/2, 1/4, 1/8).

    Only the last octave is divided by 1.875. Generated levels depend on this
    exact sum, so it is not normalized as a whole.
    """
    x = np.asarray(x, dtype=np.float32)
    y = np.asarray(y, dtype=np.float32)
    s1, s2, s3 = (wrapping_mul(seed, k) for k in OCTAVE_SALTS)
    n0 = noise2d(x, y, seed)
    n1 = noise2d(x * np.float32(2.0), y * np.float32(2.0), s1)
    n2 = noise2d(x * np.float32(4.0), y * np.float32(4.0), s2)
    n3 = noise2d(x * np.float32(8.0), y * np.float32(8.0), s3)
    total = np.float32(1.0) * n0 + np.float32(0.5) * n1 + np.float32(0.25) * n2
    return total + np.float32(0.125) * n3 / np.float32(1.875)


def ridge_noise(x: np.ndarray, y: np.ndarray, seed: int) -> np.ndarray:
    """frac_noise folded around 0.5: sharp bands wherever it crosses the midpoint."""
    return np.abs(frac_noise(x, y, seed) - np.float32(0.5)) * np.float32(2.0)


def noise2d_value(x: float, y: float, seed: int) -> float:
    xv = np.array([x], dtype=np.float32)
    yv = np.array([y], dtype=np.float32)
    return float(noise2d(xv, yv, seed)[0])
