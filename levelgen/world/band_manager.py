from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np

logger = logging.getLogger(__name__)

# band_fn(seed, row0, row1) -> (row1 - row0, width, 3) float32
BandFn = Callable[[int, int, int], np.ndarray]


@dataclass
class BandCPU:
    row0: int
    row1: int
    rgb: Optional[np.ndarray]
    error: Optional[BaseException] = None


class BandWorker(threading.Thread):
    def __init__(self, task_q: "queue.Queue[tuple[int,int,int]]", out_q: "queue.Queue[BandCPU]", *, band_fn: BandFn) -> None:
        super().__init__(daemon=True)
        self.task_q = task_q
        self.out_q = out_q
        self.band_fn = band_fn
        self._stop_event = threading.Event()

    def stop(self) -> None:
        self._stop_event.set()

    def run(self) -> None:
        while not self._stop_event.is_set():
            try:
                seed, row0, row1 = self.task_q.get(timeout=0.1)
            except queue.Empty:
                continue
            try:
                rgb = self.band_fn(seed, row0, row1)
                self.out_q.put(BandCPU(row0=row0, row1=row1, rgb=rgb))
            except Exception as e:
                self.out_q.put(BandCPU(row0=row0, row1=row1, rgb=None, error=e))
            finally:
                self.task_q.task_done()


class BandManager:
    """Pool of worker threads computing horizontal bands of a pixel buffer.

    Pixels are independent, so bands can finish in any order; compute() only
    returns once every band of the pass is back.
    """

    def __init__(self, *, workers: int, band_rows: int, band_fn: BandFn) -> None:
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        if band_rows < 1:
            raise ValueError(f"band_rows must be >= 1, got {band_rows}")
        self.band_rows = int(band_rows)
        self.band_fn = band_fn

        self.task_q: "queue.Queue[tuple[int,int,int]]" = queue.Queue()
        self.out_q: "queue.Queue[BandCPU]" = queue.Queue()

        self.workers: List[BandWorker] = [
            BandWorker(self.task_q, self.out_q, band_fn=band_fn) for _ in range(int(workers))
        ]
        for w in self.workers:
            w.start()

    def shutdown(self) -> None:
        for w in self.workers:
            w.stop()
        for w in self.workers:
            w.join(timeout=1.0)

    def bands(self, height: int) -> list[tuple[int, int]]:
        return [(r, min(r + self.band_rows, height)) for r in range(0, height, self.band_rows)]

    def compute(self, seed: int, height: int, width: int) -> np.ndarray:
        """Run one full pass and return the (height, width, 3) RGB block."""
        bands = self.bands(height)
        for row0, row1 in bands:
            self.task_q.put((seed, row0, row1))
        self.task_q.join()

        rgb = np.empty((height, width, 3), dtype=np.float32)
        errors: list[BaseException] = []
        for _ in range(len(bands)):
            band = self.out_q.get_nowait()
            if band.error is not None:
                errors.append(band.error)
                continue
            rgb[band.row0:band.row1] = band.rgb
        if errors:
            logger.error("%d of %d bands failed (seed=%d)", len(errors), len(bands), seed)
            raise errors[0]
        return rgb
