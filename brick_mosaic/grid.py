"""Palette quantisation: turn an RGB image into a grid of catalog colours.

Every pixel is mapped to its nearest catalog colour, optionally with
Floyd-Steinberg error diffusion so that smooth gradients survive the
reduction to a handful of brick colours. The result is a
:class:`QuantizedGrid`, the read-only input of the packer.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np
from scipy.spatial import cKDTree
from skimage.color import rgb2lab

from brick_mosaic.catalog import Catalog, Color

logger = logging.getLogger(__name__)

COLOR_SPACES = ("rgb", "lab")


def rgb_to_lab(rgb: np.ndarray) -> np.ndarray:
    """Convert flat (N, 3) RGB in 0-255 -> (N, 3) float64 CIELAB."""
    rgb = np.clip(np.asarray(rgb, dtype=np.float64), 0, 255)
    return rgb2lab(rgb.reshape(1, -1, 3) / 255.0).reshape(-1, 3)


class QuantizedGrid:
    """A 2D grid whose every cell is a catalog colour.

    Args:
        indices: (H, W) integer array of positions in ``catalog.colors``.
            Copied; the caller's array is never touched.
        catalog: The catalog the indices refer to.
    """

    def __init__(self, indices: np.ndarray, catalog: Catalog) -> None:
        arr = np.array(indices, dtype=np.intp, copy=True)
        if arr.ndim != 2 or arr.size == 0:
            msg = f"Grid must be a non-empty 2D array, got shape {arr.shape}"
            raise ValueError(msg)
        if arr.min() < 0 or arr.max() >= len(catalog):
            msg = f"Grid indices must lie in [0, {len(catalog)})"
            raise ValueError(msg)
        arr.setflags(write=False)
        self.indices = arr
        self.catalog = catalog
        self._colors = catalog.colors

    @property
    def width(self) -> int:
        return self.indices.shape[1]

    @property
    def height(self) -> int:
        return self.indices.shape[0]

    def color_at(self, x: int, y: int) -> Color:
        return self._colors[self.indices[y, x]]

    def to_rgb(self) -> np.ndarray:
        """(H, W, 3) uint8 image of the grid colours."""
        return self.catalog.palette_array()[self.indices]

    def __repr__(self) -> str:
        return f"QuantizedGrid({self.width}x{self.height}, catalog={self.catalog.name!r})"


def grid_from_colors(rows: Sequence[Sequence[Color]], catalog: Catalog) -> QuantizedGrid:
    """Build a grid from rows of :class:`Color` (row-major, top row first).

    Raises:
        UnknownColorError: a colour is missing from *catalog*.
    """
    if not rows or any(len(r) != len(rows[0]) for r in rows):
        msg = "Rows must be non-empty and of equal length"
        raise ValueError(msg)
    indices = np.array(
        [[catalog.index_of(c) for c in row] for row in rows], dtype=np.intp,
    )
    return QuantizedGrid(indices, catalog)


def quantize(
    image: np.ndarray,
    catalog: Catalog,
    dither: bool = False,
    color_space: str = "rgb",
) -> QuantizedGrid:
    """Map every pixel of *image* to the nearest catalog colour.

    Args:
        image: (H, W, 3) uint8 RGB.
        catalog: Colours to quantise to.
        dither: Diffuse quantisation error (Floyd-Steinberg).
        color_space: ``"rgb"`` or ``"lab"`` distance.

    Returns:
        The quantised grid.
    """
    if color_space not in COLOR_SPACES:
        msg = f"Unknown colour space '{color_space}'. Available: {', '.join(COLOR_SPACES)}"
        raise ValueError(msg)
    if image.ndim != 3 or image.shape[2] != 3:
        msg = f"Expected an (H, W, 3) image, got shape {image.shape}"
        raise ValueError(msg)

    palette = catalog.palette_array().astype(np.float64)

    def _space(rgb: np.ndarray) -> np.ndarray:
        return rgb_to_lab(rgb) if color_space == "lab" else rgb

    tree = cKDTree(_space(palette))
    h, w = image.shape[:2]

    if not dither:
        _, idx = tree.query(_space(image.reshape(-1, 3).astype(np.float64)))
        logger.debug("Quantised %dx%d image to %d colours", w, h, len(palette))
        return QuantizedGrid(idx.reshape(h, w), catalog)

    work = image.astype(np.float64)
    indices = np.empty((h, w), dtype=np.intp)
    for y in range(h):
        for x in range(w):
            pixel = np.clip(work[y, x], 0, 255)
            _, i = tree.query(_space(pixel.reshape(1, 3))[0])
            indices[y, x] = i
            err = pixel - palette[i]

            # Floyd-Steinberg weights
            if x + 1 < w:
                work[y, x + 1] += err * 7 / 16
            if y + 1 < h:
                if x - 1 >= 0:
                    work[y + 1, x - 1] += err * 3 / 16
                work[y + 1, x] += err * 5 / 16
                if x + 1 < w:
                    work[y + 1, x + 1] += err * 1 / 16

    logger.debug("Quantised %dx%d image to %d colours (dithered)", w, h, len(palette))
    return QuantizedGrid(indices, catalog)
