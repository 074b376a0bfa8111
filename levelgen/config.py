from __future__ import annotations

# Window
WINDOW_WIDTH = 800
WINDOW_HEIGHT = 800
FPS_CAP = 60  # 0 = uncapped

# App
APP_VERSION = "0.1.0"

# Level
DEFAULT_SEED = 69
DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 800

# "level" is the classifier; the others are grayscale diagnostics of its inputs
VIEWS = ("level", "worley", "seams", "ridge")
DEFAULT_VIEW = "level"

# Generation
DEFAULT_WORKERS = 1  # 1 = generate on the calling thread
DEFAULT_BAND_ROWS = 64  # rows per worker task

# Rendering
TEXTURE_SLOT = 0
CLEAR_COLOR = (0.0, 0.0, 0.0, 1.0)
