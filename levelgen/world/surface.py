from __future__ import annotations

import logging
import time
from typing import Callable, Optional

import numpy as np

from levelgen.config import (
    DEFAULT_BAND_ROWS,
    DEFAULT_HEIGHT,
    DEFAULT_SEED,
    DEFAULT_VIEW,
    DEFAULT_WIDTH,
    DEFAULT_WORKERS,
    TEXTURE_SLOT,
    VIEWS,
)
from levelgen.frame import FrameInputs, FrameOutputs
from levelgen.world.band_manager import BandManager
from levelgen.world.hashing import wrapping_mul
from levelgen.world.level import CELL_FREQ, classify
from levelgen.world.noise import ridge_noise
from levelgen.world.salts import RIDGE_SALT
from levelgen.world.sites import seam_field, worley3

logger = logging.getLogger(__name__)

U32_MAX = 0xFFFFFFFF

TextureSink = Callable[[np.ndarray, int], None]


def _gray(v: np.ndarray) -> np.ndarray:
    g = np.clip(v, 0.0, 1.0).astype(np.float32)
    return np.stack([g, g, g], axis=-1)


def render_view(view: str, x: np.ndarray, y: np.ndarray, seed: int) -> np.ndarray:
    """RGB for normalized coordinates under one of VIEWS."""
    if view == "level":
        return classify(x, y, seed)
    cx = x * CELL_FREQ
    cy = y * CELL_FREQ
    if view == "worley":
        return _gray(worley3(cx, cy, seed)[0])
    if view == "seams":
        return _gray(seam_field(cx, cy, seed))
    if view == "ridge":
        return _gray(ridge_noise(cx, cy, wrapping_mul(seed, RIDGE_SALT)))
    raise ValueError(f"unknown view {view!r}")


class TerrainSurface:
    """Owns the level pixel buffer and the seed it was generated from.

    Dirty until the buffer reflects the current seed. regenerate() brings it
    back to Clean in one synchronous pass and publishes the finished buffer;
    request_regenerate() bumps the seed and marks it Dirty again.
    """

    def __init__(
        self,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        seed: int = DEFAULT_SEED,
        *,
        workers: int = DEFAULT_WORKERS,
        band_rows: int = DEFAULT_BAND_ROWS,
        view: str = DEFAULT_VIEW,
        slot: int = TEXTURE_SLOT,
    ) -> None:
        if int(width) <= 0 or int(height) <= 0:
            raise ValueError(f"surface size must be positive, got {width}x{height}")
        if not 0 <= int(seed) <= U32_MAX:
            raise ValueError(f"seed must fit in 32 bits, got {seed}")
        if view not in VIEWS:
            raise ValueError(f"unknown view {view!r} (expected one of {', '.join(VIEWS)})")
        if int(workers) < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")

        self.width = int(width)
        self.height = int(height)
        self.seed = int(seed)
        self.view = view
        self.slot = int(slot)
        self.dirty = True
        self._buffer: Optional[np.ndarray] = None

        self._xs = np.arange(self.width, dtype=np.float32) / np.float32(self.width)
        self._ys = np.arange(self.height, dtype=np.float32) / np.float32(self.height)

        self.bands: Optional[BandManager] = None
        if int(workers) > 1:
            self.bands = BandManager(workers=int(workers), band_rows=int(band_rows), band_fn=self._compute_rows)

    @property
    def buffer(self) -> Optional[np.ndarray]:
        """Last published (height, width, 4) RGBA buffer, None before the first pass."""
        return self._buffer

    def shutdown(self) -> None:
        if self.bands is not None:
            self.bands.shutdown()
            self.bands = None

    def request_regenerate(self) -> None:
        self.seed = (self.seed + 1) & U32_MAX
        self.dirty = True
        logger.info("regenerate requested, seed=%d", self.seed)

    def _compute_rows(self, seed: int, row0: int, row1: int) -> np.ndarray:
        x, y = np.meshgrid(self._xs, self._ys[row0:row1])
        return render_view(self.view, x, y, seed)

    def regenerate(self, sink: Optional[TextureSink] = None) -> bool:
        """Rebuild the whole buffer if Dirty and hand it to sink once.

        Returns False (and publishes nothing) when already Clean.
        """
        if not self.dirty:
            return False

        t0 = time.perf_counter()
        if self.bands is not None:
            rgb = self.bands.compute(self.seed, self.height, self.width)
        else:
            rgb = self._compute_rows(self.seed, 0, self.height)

        buf = np.ones((self.height, self.width, 4), dtype=np.float32)
        buf[..., :3] = rgb
        if sink is not None:
            sink(buf, self.slot)
        # only a published buffer becomes current
        self._buffer = buf
        self.dirty = False
        logger.info(
            "generated %dx%d view=%s seed=%d in %.3fs",
            self.width, self.height, self.view, self.seed, time.perf_counter() - t0,
        )
        return True

    def frame(self, inputs: FrameInputs, outputs: FrameOutputs) -> None:
        if inputs.regenerate_pressed:
            self.request_regenerate()

        self.regenerate(lambda buf, slot: outputs.set_texture.append((buf, slot)))

        outputs.draw_texture.append((inputs.screen_rect, self.slot))
