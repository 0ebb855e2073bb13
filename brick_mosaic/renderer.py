"""Draw a packed panel back to an image."""

from __future__ import annotations

import numpy as np
from PIL import Image

from brick_mosaic.panel import Panel

BACKGROUND = (255, 255, 255)
OUTLINE_OUTER = (0, 0, 0)
OUTLINE_INNER = (255, 255, 255)


def _fill(
    out: np.ndarray,
    rect: tuple[int, int, int, int],
    rgb: tuple[int, int, int],
) -> None:
    x0, y0, x1, y1 = rect
    # Insets can collapse small pieces to nothing; never wrap around.
    if x1 > x0 and y1 > y0:
        out[y0:y1, x0:x1] = rgb


def _inset(rect: tuple[int, int, int, int]) -> tuple[int, int, int, int]:
    x0, y0, x1, y1 = rect
    return (x0 + 1, y0 + 1, x1 - 1, y1 - 1)


def render_array(panel: Panel, scale: int = 1, outline: bool = False) -> np.ndarray:
    """Render *panel* to an (H*scale, W*scale, 3) uint8 array.

    With *outline*, every piece gets a 1 px black ring and a 1 px white
    ring inside it before the piece colour is filled in.
    """
    if scale < 1:
        msg = f"Scale must be a positive integer, got {scale}"
        raise ValueError(msg)

    w, h = panel.size()
    out = np.empty((h * scale, w * scale, 3), dtype=np.uint8)
    out[:] = BACKGROUND

    for p in panel.placements.values():
        rect = tuple(v * scale for v in p.bounds)
        if outline:
            _fill(out, rect, OUTLINE_OUTER)
            rect = _inset(rect)
            _fill(out, rect, OUTLINE_INNER)
            rect = _inset(rect)
        _fill(out, rect, p.piece.color.rgb)
    return out


def render(panel: Panel, scale: int = 1, outline: bool = False) -> Image.Image:
    """Render *panel* as an RGB image of size ``panel.size() * scale``."""
    return Image.fromarray(render_array(panel, scale, outline))
