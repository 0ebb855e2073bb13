"""
Brick Mosaic Generator
======================

Rebuild any image out of rectangular bricks from a fixed catalog of
shapes and colours, and count the bricks needed to build it:

- **quantize** the image to the catalog's colours (optionally dithered)
- **pack** the grid greedily, largest brick first
- **render** the resulting panel and list its bill of materials
"""

__version__ = "1.0.0"

from brick_mosaic.catalog import (
    CATALOGS,
    Catalog,
    Color,
    Piece,
    PieceShape,
    get_catalog,
)
from brick_mosaic.config import MosaicConfig
from brick_mosaic.errors import BrickMosaicError, NoFittingPieceError, UnknownColorError
from brick_mosaic.grid import QuantizedGrid, grid_from_colors, quantize
from brick_mosaic.packer import pack
from brick_mosaic.panel import Panel, Placement
from brick_mosaic.pipeline import build_panel, convert
from brick_mosaic.renderer import render
from brick_mosaic.report import BomLine, bill_of_materials, format_bom

__all__ = [
    "CATALOGS",
    "BomLine",
    "BrickMosaicError",
    "Catalog",
    "Color",
    "MosaicConfig",
    "NoFittingPieceError",
    "Panel",
    "Piece",
    "PieceShape",
    "Placement",
    "QuantizedGrid",
    "UnknownColorError",
    "bill_of_materials",
    "build_panel",
    "convert",
    "format_bom",
    "get_catalog",
    "grid_from_colors",
    "pack",
    "quantize",
    "render",
]
