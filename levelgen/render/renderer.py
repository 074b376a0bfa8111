from __future__ import annotations

import logging
from typing import Dict

import moderngl
import numpy as np

from levelgen.config import CLEAR_COLOR
from levelgen.frame import Rect
from levelgen.render.shaders import shader_sources
from levelgen.render.textures import to_rgba_bytes

logger = logging.getLogger(__name__)


class Renderer:
    """Texture sink + draw sink: numbered texture slots drawn as screen quads."""

    def __init__(self, ctx: moderngl.Context, width: int, height: int) -> None:
        self.ctx = ctx
        self.width = width
        self.height = height

        vert, frag = shader_sources(ctx.version_code)
        self.prog = self.ctx.program(vertex_shader=vert, fragment_shader=frag)

        # Full-viewport quad; buffer row 0 is the top of the screen, so v is flipped.
        quad = np.array([
            -1.0,  1.0, 0.0, 0.0,
             1.0,  1.0, 1.0, 0.0,
            -1.0, -1.0, 0.0, 1.0,

             1.0,  1.0, 1.0, 0.0,
             1.0, -1.0, 1.0, 1.0,
            -1.0, -1.0, 0.0, 1.0,
        ], dtype=np.float32)
        self._vbo = self.ctx.buffer(quad.tobytes())
        self._vao = self.ctx.vertex_array(self.prog, [(self._vbo, "2f 2f", "in_pos", "in_uv")])

        self._textures: Dict[int, moderngl.Texture] = {}
        self._sizes: Dict[int, tuple[int, int]] = {}

    def release(self) -> None:
        for tex in self._textures.values():
            try:
                tex.release()
            except Exception:
                pass
        self._textures.clear()
        for obj in [self._vao, self._vbo, self.prog]:
            try:
                obj.release()
            except Exception:
                pass

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.ctx.viewport = (0, 0, width, height)

    def begin_frame(self) -> None:
        self.ctx.clear(*CLEAR_COLOR)

    def set_texture(self, buf: np.ndarray, slot: int) -> None:
        """Upload a full (h, w, 4) float RGBA buffer into a slot."""
        h, w = buf.shape[:2]
        data = to_rgba_bytes(buf)
        tex = self._textures.get(slot)
        if tex is None or self._sizes.get(slot) != (w, h):
            if tex is not None:
                tex.release()
            tex = self.ctx.texture((w, h), 4, data=data)
            tex.filter = (moderngl.NEAREST, moderngl.NEAREST)
            tex.repeat_x = False
            tex.repeat_y = False
            self._textures[slot] = tex
            self._sizes[slot] = (w, h)
        else:
            tex.write(data)
        logger.debug("texture slot %d <- %dx%d", slot, w, h)

    def draw_texture(self, rect: Rect, slot: int) -> None:
        tex = self._textures.get(slot)
        if tex is None:
            return
        x, y, w, h = rect
        # rect is top-left based (pygame); GL viewports start bottom-left
        self.ctx.viewport = (int(x), int(self.height - y - h), int(w), int(h))
        self.ctx.disable(moderngl.DEPTH_TEST)
        tex.use(location=0)
        self.prog["u_tex"].value = 0
        self._vao.render(mode=moderngl.TRIANGLES)
        self.ctx.viewport = (0, 0, self.width, self.height)
