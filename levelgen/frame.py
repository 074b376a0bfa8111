from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

Rect = Tuple[int, int, int, int]  # x, y, w, h in window pixels


@dataclass
class FrameInputs:
    screen_rect: Rect
    regenerate_pressed: bool = False  # true only on the tick the key went down


@dataclass
class FrameOutputs:
    """What a surface asks the renderer to do this tick."""

    set_texture: List[Tuple[np.ndarray, int]] = field(default_factory=list)
    draw_texture: List[Tuple[Rect, int]] = field(default_factory=list)
