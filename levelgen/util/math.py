from __future__ import annotations

import numpy as np


def lerp(a: np.ndarray, b: np.ndarray, t: np.ndarray) -> np.ndarray:
    return a * (np.float32(1.0) - t) + b * t


def smoothstep(t: np.ndarray) -> np.ndarray:
    """Cubic easing t^2 (3 - 2t) on [0,1]. Unclamped, unlike GLSL smoothstep."""
    return t * t * (np.float32(3.0) - np.float32(2.0) * t)


def floorfrac(x: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Split x into (floor, fractional part), both float32.

    The fractional part is in [0,1] for negative x too
    (floorfrac(-0.3) == (-1.0, 0.7)); for tiny negative x the top edge can
    round to 1.0 in float32.
    """
    x = np.asarray(x, dtype=np.float32)
    floor = np.floor(x)
    frac = np.where(x < np.float32(0.0), np.abs(floor - x), x - floor)
    return floor, frac.astype(np.float32)
