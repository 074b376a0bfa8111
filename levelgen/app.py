from __future__ import annotations

import logging

import pygame
import moderngl

from levelgen.config import APP_VERSION, FPS_CAP, WINDOW_HEIGHT, WINDOW_WIDTH
from levelgen.frame import FrameInputs, FrameOutputs
from levelgen.render.renderer import Renderer
from levelgen.render.textures import save_png
from levelgen.world.surface import TerrainSurface

logger = logging.getLogger(__name__)


def _init_pygame_gl() -> None:
    pygame.init()
    pygame.display.gl_set_attribute(pygame.GL_CONTEXT_MAJOR_VERSION, 3)
    pygame.display.gl_set_attribute(pygame.GL_CONTEXT_MINOR_VERSION, 3)
    pygame.display.gl_set_attribute(pygame.GL_CONTEXT_PROFILE_MASK, pygame.GL_CONTEXT_PROFILE_CORE)
    pygame.display.gl_set_attribute(pygame.GL_DOUBLEBUFFER, 1)


def export_png(
    path: str,
    *,
    seed: int,
    width: int,
    height: int,
    workers: int,
    view: str,
) -> None:
    """Generate one level without opening a window and save it as PNG."""
    surface = TerrainSurface(width, height, seed, workers=workers, view=view)
    try:
        surface.regenerate(lambda buf, _slot: save_png(buf, path))
    finally:
        surface.shutdown()
    logger.info("saved %s (seed=%d)", path, seed)


def run_app(
    *,
    seed: int,
    width: int,
    height: int,
    workers: int,
    view: str,
) -> None:
    _init_pygame_gl()

    flags = pygame.OPENGL | pygame.DOUBLEBUF | pygame.RESIZABLE
    pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT), flags)
    pygame.display.set_caption(f"levelgen v{APP_VERSION} (seed={seed})")

    try:
        ctx = moderngl.create_context()
    except Exception as e:
        pygame.quit()
        raise RuntimeError("Failed to create ModernGL context (need OpenGL 3.2+)") from e

    logger.debug(
        "moderngl ctx version_code=%s vendor=%s renderer=%s",
        ctx.version_code, ctx.info.get("GL_VENDOR"), ctx.info.get("GL_RENDERER"),
    )

    win_w, win_h = WINDOW_WIDTH, WINDOW_HEIGHT
    ctx.viewport = (0, 0, win_w, win_h)
    renderer = Renderer(ctx, win_w, win_h)
    surface = TerrainSurface(width, height, seed, workers=workers, view=view)

    clock = pygame.time.Clock()
    running = True
    try:
        while running:
            regenerate = False
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_r:
                    regenerate = True
                elif event.type == pygame.VIDEORESIZE:
                    win_w, win_h = max(64, event.w), max(64, event.h)
                    pygame.display.set_mode((win_w, win_h), flags)
                    renderer.resize(win_w, win_h)

            inputs = FrameInputs(screen_rect=(0, 0, win_w, win_h), regenerate_pressed=regenerate)
            outputs = FrameOutputs()
            surface.frame(inputs, outputs)

            for buf, slot in outputs.set_texture:
                renderer.set_texture(buf, slot)
                pygame.display.set_caption(f"levelgen v{APP_VERSION} (seed={surface.seed})")

            renderer.begin_frame()
            for rect, slot in outputs.draw_texture:
                renderer.draw_texture(rect, slot)

            pygame.display.flip()

            if FPS_CAP and FPS_CAP > 0:
                clock.tick(FPS_CAP)
            else:
                clock.tick()
    finally:
        surface.shutdown()
        renderer.release()
        pygame.quit()
