from __future__ import annotations

import argparse
import logging
import random
import sys

from levelgen.app import export_png, run_app
from levelgen.config import (
    APP_VERSION,
    DEFAULT_HEIGHT,
    DEFAULT_SEED,
    DEFAULT_VIEW,
    DEFAULT_WIDTH,
    DEFAULT_WORKERS,
    VIEWS,
)

def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="levelgen", description=f"Procedural wizard level texture (ModernGL + pygame) v{APP_VERSION}")
    p.add_argument("--seed", default=str(DEFAULT_SEED), help="u32 seed or 'random' (default: 69)")
    p.add_argument("--width", type=int, default=DEFAULT_WIDTH, help="texture width in pixels (default: 800)")
    p.add_argument("--height", type=int, default=DEFAULT_HEIGHT, help="texture height in pixels (default: 800)")
    p.add_argument("--workers", type=int, default=DEFAULT_WORKERS, help="generation threads (default: 1)")
    p.add_argument("--view", choices=list(VIEWS), default=DEFAULT_VIEW, help="what to draw: the level or one of its input fields")
    p.add_argument("--export", metavar="PATH", default=None, help="write one PNG and exit instead of opening a window")
    p.add_argument("--debug", action="store_true", help="verbose logs")
    return p.parse_args(argv)

def _setup_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="[levelgen] %(message)s",
        stream=sys.stdout,
        force=True,
    )

def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    _setup_logging(bool(args.debug))

    if isinstance(args.seed, str) and args.seed.lower() == "random":
        seed = random.randint(0, 2**32 - 1)
    else:
        seed = int(args.seed)

    if args.export:
        export_png(
            str(args.export),
            seed=seed,
            width=int(args.width),
            height=int(args.height),
            workers=int(args.workers),
            view=str(args.view),
        )
        return

    run_app(
        seed=seed,
        width=int(args.width),
        height=int(args.height),
        workers=int(args.workers),
        view=str(args.view),
    )

