from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from levelgen.util.math import floorfrac
from levelgen.world.hashing import khash, khash2i, rand
from levelgen.world.salts import SITE_JITTER_Y_SALT

# 3x3 lattice neighbourhood, enumerated by dx then dy. Ties in the distance
# ranking keep this order.
NEIGHBOUR_OFFSETS = np.array(
    [
        (-1, -1), (-1, 0), (-1, 1),
        (0, -1), (0, 0), (0, 1),
        (1, -1), (1, 0), (1, 1),
    ],
    dtype=np.float32,
)
N_SITES = len(NEIGHBOUR_OFFSETS)

OPEN_MODULUS = 6


@dataclass
class SiteField:
    """The 9 jittered sites around each query point.

    Every array has shape (9, *query_shape); axis 0 is the site index in
    NEIGHBOUR_OFFSETS order.
    """

    lattice_x: np.ndarray  # int32
    lattice_y: np.ndarray  # int32
    px: np.ndarray  # float32
    py: np.ndarray  # float32
    open: np.ndarray  # bool
    dist: np.ndarray  # float32, Euclidean

    def ranked(self) -> np.ndarray:
        """Site indices sorted by ascending distance (stable)."""
        return np.argsort(self.dist, axis=0, kind="stable")

    @property
    def nearest(self) -> np.ndarray:
        return self.ranked()[0]

    def take(self, values: np.ndarray, index: np.ndarray) -> np.ndarray:
        """Pick values[index[p], p] for every query point p."""
        return np.take_along_axis(values, index[None, ...], axis=0)[0]


def _lattice(x: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    xfloor, _ = floorfrac(x)
    yfloor, _ = floorfrac(y)
    shape = (N_SITES,) + (1,) * xfloor.ndim
    lx = xfloor[None, ...] + NEIGHBOUR_OFFSETS[:, 0].reshape(shape)
    ly = yfloor[None, ...] + NEIGHBOUR_OFFSETS[:, 1].reshape(shape)
    return lx, ly


def _jittered_sites(x: np.ndarray, y: np.ndarray, seed: int):
    lx, ly = _lattice(x, y)
    ix = lx.astype(np.int32)
    iy = ly.astype(np.int32)
    h = khash2i(ix, iy, seed)
    px = lx + rand(h)
    py = ly + rand(h * np.uint32(SITE_JITTER_Y_SALT))
    return ix, iy, h, px, py


def site_field(x: np.ndarray, y: np.ndarray, seed: int) -> SiteField:
    """Generate the 3x3 site neighbourhood of every query point and its distances."""
    x = np.atleast_1d(np.asarray(x, dtype=np.float32))
    y = np.atleast_1d(np.asarray(y, dtype=np.float32))
    ix, iy, h, px, py = _jittered_sites(x, y, seed)
    is_open = (khash(h) % np.uint32(OPEN_MODULUS)) == 0
    dx = px - x[None, ...]
    dy = py - y[None, ...]
    dist = np.sqrt(dx * dx + dy * dy)
    return SiteField(lattice_x=ix, lattice_y=iy, px=px, py=py, open=is_open, dist=dist)


def pair_hits(d: np.ndarray, nearest: np.ndarray, threshold) -> np.ndarray:
    """Count ordered pairs (i, j), i != j, touching the nearest site with |d_i - d_j| < threshold."""
    dn = np.take_along_axis(d, nearest[None, ...], axis=0)
    idx = np.arange(d.shape[0]).reshape((d.shape[0],) + (1,) * (d.ndim - 1))
    close = (np.abs(d - dn) < threshold) & (idx != nearest[None, ...])
    # each close site k pairs with the nearest as (n, k) and (k, n)
    return 2 * np.count_nonzero(close, axis=0)


def worley3(x: np.ndarray, y: np.ndarray, seed: int) -> np.ndarray:
    """Three smallest squared site distances, ascending. Shape (3, *query_shape)."""
    x = np.atleast_1d(np.asarray(x, dtype=np.float32))
    y = np.atleast_1d(np.asarray(y, dtype=np.float32))
    _ix, _iy, _h, px, py = _jittered_sites(x, y, seed)
    dx = px - x[None, ...]
    dy = py - y[None, ...]
    d2 = dx * dx + dy * dy
    return np.sort(d2, axis=0, kind="stable")[:3]


def seam_field(x: np.ndarray, y: np.ndarray, seed: int, threshold: float = 0.05) -> np.ndarray:
    """Fixed-threshold seam accumulation on squared distances.

    Adds 0.1 per ordered site pair that includes the nearest site and whose
    squared distances differ by less than threshold. Zero away from cell edges.
    """
    x = np.atleast_1d(np.asarray(x, dtype=np.float32))
    y = np.atleast_1d(np.asarray(y, dtype=np.float32))
    _ix, _iy, _h, px, py = _jittered_sites(x, y, seed)
    dx = px - x[None, ...]
    dy = py - y[None, ...]
    d2 = dx * dx + dy * dy
    nearest = np.argmin(d2, axis=0)
    hits = pair_hits(d2, nearest, np.float32(threshold))
    return hits.astype(np.float32) * np.float32(0.1)
