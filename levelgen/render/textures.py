from __future__ import annotations

from pathlib import Path

import numpy as np
import pygame


def to_rgba8(buf: np.ndarray) -> np.ndarray:
    """(h, w, 4) float buffer in [0,1] -> (h, w, 4) uint8."""
    return np.clip(buf * 255.0 + 0.5, 0, 255).astype(np.uint8)


def to_rgba_bytes(buf: np.ndarray) -> bytes:
    return np.ascontiguousarray(to_rgba8(buf)).tobytes(order="C")


def buffer_to_surface(buf: np.ndarray) -> pygame.Surface:
    """Wrap a float RGBA buffer as a pygame Surface (row 0 at the top)."""
    h, w = buf.shape[:2]
    return pygame.image.frombuffer(to_rgba_bytes(buf), (w, h), "RGBA").copy()


def save_png(buf: np.ndarray, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    pygame.image.save(buffer_to_surface(buf), str(path))
    return path
