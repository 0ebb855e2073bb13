"""Image -> quantised grid -> packed panel."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from brick_mosaic.catalog import Catalog, get_catalog
from brick_mosaic.config import MosaicConfig
from brick_mosaic.grid import QuantizedGrid, quantize
from brick_mosaic.image_io import load_and_resize
from brick_mosaic.packer import pack
from brick_mosaic.panel import Panel

logger = logging.getLogger(__name__)


def build_panel(
    image: np.ndarray,
    catalog: Catalog,
    dither: bool = False,
    color_space: str = "rgb",
) -> tuple[QuantizedGrid, Panel]:
    """Quantise an (H, W, 3) image to *catalog* and pack it."""
    missing = catalog.colors_without_unit_piece()
    if missing:
        logger.warning(
            "Catalog %r has no 1x1 piece for: %s",
            catalog.name, ", ".join(c.name for c in missing),
        )
    grid = quantize(image, catalog, dither=dither, color_space=color_space)
    return grid, pack(grid, catalog)


def convert(path: str | Path, config: MosaicConfig) -> tuple[np.ndarray, QuantizedGrid, Panel]:
    """Load *path*, resize to ``config.width`` and build its panel.

    Returns:
        The resized target image, its quantised grid and the panel.
    """
    catalog = get_catalog(config.catalog)
    target = load_and_resize(path, config.width)
    h, w = target.shape[:2]
    logger.info("Target: %dx%d = %d cells, catalog %r", w, h, w * h, catalog.name)
    grid, panel = build_panel(
        target, catalog, dither=config.dither, color_space=config.color_space,
    )
    return target, grid, panel
