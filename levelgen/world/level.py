from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from levelgen.world.hashing import wrapping_mul
from levelgen.world.noise import noise2d, ridge_noise
from levelgen.world.salts import (
    BOULDER_COARSE_SALT,
    BOULDER_FINE_SALT,
    RIDGE_SALT,
    WARP1_X_SALT,
    WARP1_Y_SALT,
    WARP2_X_SALT,
    WARP2_Y_SALT,
)
from levelgen.world.sites import pair_hits, site_field

# Palette
RED = (1.0, 0.0, 0.0)
WHITE = (1.0, 1.0, 1.0)
BLACK = (0.0, 0.0, 0.0)

# Rules, in the order they are tried
RULE_PORTAL = 0  # red: standing on an open site
RULE_RIDGE = 1  # white: ridge wall
RULE_BOULDER = 2  # black: obstacle inside an open cell
RULE_OPEN = 3  # white: open cell floor
RULE_SEAM = 4  # white: wall seam between cells
RULE_SOLID = 5  # black
RULE_COLORS = np.array([RED, WHITE, BLACK, WHITE, WHITE, BLACK], dtype=np.float32)
RULE_NAMES = ("portal", "ridge", "boulder", "open", "seam", "solid")

# Tunables of the level look
WARP1_FREQ = np.float32(8.0)
WARP1_AMP = np.float32(1.0)
WARP2_FREQ = np.float32(32.0)
WARP2_AMP = np.float32(0.2)
CELL_FREQ = np.float32(8.0)
THICKNESS_AMP = np.float32(0.2)
THICKNESS_BASE = np.float32(0.05)
SEAM_STEP = np.float32(0.1)
PORTAL_RADIUS = np.float32(0.05)
RIDGE_THRESHOLD = np.float32(0.2)
BOULDER_FINE_FREQ = np.float32(96.0)
BOULDER_FINE_MIN = np.float32(0.8)
BOULDER_COARSE_FREQ = np.float32(16.0)
BOULDER_COARSE_MIN = np.float32(0.6)


@dataclass
class LevelSample:
    """Classifier output plus the intermediate signals that produced it."""

    rgb: np.ndarray  # (..., 3) float32
    rule: np.ndarray  # int8, RULE_*
    x: np.ndarray  # warped cell-space coordinates
    y: np.ndarray
    thickness: np.ndarray
    nearest: np.ndarray  # index into NEIGHBOUR_OFFSETS
    nearest_dist: np.ndarray
    nearest_open: np.ndarray
    ridge: np.ndarray
    seam: np.ndarray  # seam accumulator, > 0 near a cell edge


def classify_detail(x: np.ndarray, y: np.ndarray, seed: int) -> LevelSample:
    """Classify normalized coordinates x, y in [0,1) into level colors.

    Pipeline:
      - large warp: noise at 8x offsets the 32x coordinates
      - fine warp: noise at the warped 32x coordinates, amplitude 0.2,
        applied to the 8x cell coordinates
      - cellular site field on the warped 8x coordinates
      - rules: portal, ridge, boulder, open floor, seam, solid (first wins)
    """
    x_orig = np.atleast_1d(np.asarray(x, dtype=np.float32))
    y_orig = np.atleast_1d(np.asarray(y, dtype=np.float32))
    seed = int(seed)

    dwx = noise2d(WARP1_FREQ * x_orig, WARP1_FREQ * y_orig, wrapping_mul(seed, WARP1_X_SALT))
    dwy = noise2d(WARP1_FREQ * x_orig, WARP1_FREQ * y_orig, wrapping_mul(seed, WARP1_Y_SALT))
    wx = WARP2_FREQ * x_orig + dwx * WARP1_AMP
    wy = WARP2_FREQ * y_orig + dwy * WARP1_AMP
    dx = noise2d(wx, wy, wrapping_mul(seed, WARP2_X_SALT))
    dy = noise2d(wx, wy, wrapping_mul(seed, WARP2_Y_SALT))

    cx = x_orig * CELL_FREQ
    cy = y_orig * CELL_FREQ
    thickness = noise2d(cx, cy, seed) * THICKNESS_AMP + THICKNESS_BASE
    cx = cx + dx * WARP2_AMP
    cy = cy + dy * WARP2_AMP

    sites = site_field(cx, cy, seed)
    nearest = sites.nearest
    nearest_dist = sites.take(sites.dist, nearest)
    nearest_open = sites.take(sites.open, nearest)
    seam = pair_hits(sites.dist, nearest, thickness).astype(np.float32) * SEAM_STEP

    ridge = ridge_noise(cx, cy, wrapping_mul(seed, RIDGE_SALT))
    boulder = (
        (noise2d(x_orig * BOULDER_FINE_FREQ, y_orig * BOULDER_FINE_FREQ, wrapping_mul(seed, BOULDER_FINE_SALT)) > BOULDER_FINE_MIN)
        & (noise2d(x_orig * BOULDER_COARSE_FREQ, y_orig * BOULDER_COARSE_FREQ, wrapping_mul(seed, BOULDER_COARSE_SALT)) > BOULDER_COARSE_MIN)
    )

    rule = np.select(
        [
            (nearest_dist < PORTAL_RADIUS) & nearest_open,
            ridge < RIDGE_THRESHOLD,
            nearest_open & boulder,
            nearest_open,
            seam > 0,
        ],
        [RULE_PORTAL, RULE_RIDGE, RULE_BOULDER, RULE_OPEN, RULE_SEAM],
        default=RULE_SOLID,
    ).astype(np.int8)

    return LevelSample(
        rgb=RULE_COLORS[rule],
        rule=rule,
        x=cx,
        y=cy,
        thickness=thickness,
        nearest=nearest,
        nearest_dist=nearest_dist,
        nearest_open=nearest_open,
        ridge=ridge,
        seam=seam,
    )


def classify(x: np.ndarray, y: np.ndarray, seed: int) -> np.ndarray:
    """RGB (float32, shape (..., 3)) for normalized coordinates."""
    return classify_detail(x, y, seed).rgb


def level(x: float, y: float, seed: int) -> tuple[float, float, float]:
    """Single-pixel convenience wrapper around classify()."""
    xv = np.array([x], dtype=np.float32)
    yv = np.array([y], dtype=np.float32)
    r, g, b = classify(xv, yv, seed)[0]
    return float(r), float(g), float(b)
