"""Centralised configuration via a frozen dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from brick_mosaic.grid import COLOR_SPACES
from brick_mosaic.report import REPORT_FORMATS


@dataclass(frozen=True)
class MosaicConfig:
    """All tuneable parameters for a mosaic run.

    Attributes:
        width:          Mosaic width in bricks; height follows the aspect ratio.
        catalog:        Built-in catalog name (see catalog.CATALOGS).
        dither:         Apply Floyd-Steinberg error diffusion when quantising.
        color_space:    Distance metric for quantisation - "rgb" or "lab".
        scale:          Output pixels per brick cell.
        outline:        Draw a black/white ring around every brick.
        output_format:  Image format for saved files.
        report_format:  Bill of materials format - "text", "csv" or "json".
        save_target:    Persist the quantised grid for comparison.
        save_comparison: Generate a side-by-side comparison grid.
        save_report:    Write the bill of materials next to the mosaic.
        input_dir:      Folder to scan for source images.
        output_dir:     Folder for results.
    """

    # Grid
    width: int = 32

    # Catalog & quantisation
    catalog: str = "all"
    dither: bool = False
    color_space: str = "rgb"

    # Output
    scale: int = 10
    outline: bool = True
    output_format: str = "png"
    report_format: str = "text"
    save_target: bool = True
    save_comparison: bool = True
    save_report: bool = True

    # Paths
    input_dir: Path = field(default_factory=lambda: Path("images"))
    output_dir: Path = field(default_factory=lambda: Path("output"))

    SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
        {".jpg", ".jpeg", ".png", ".bmp", ".tiff", ".tif", ".webp", ".gif"}
    )

    def __post_init__(self) -> None:
        if self.width < 1:
            msg = f"width must be positive, got {self.width}"
            raise ValueError(msg)
        if self.scale < 1:
            msg = f"scale must be positive, got {self.scale}"
            raise ValueError(msg)
        if self.color_space not in COLOR_SPACES:
            msg = (
                f"Unknown colour space '{self.color_space}'. "
                f"Available: {', '.join(COLOR_SPACES)}"
            )
            raise ValueError(msg)
        if self.report_format not in REPORT_FORMATS:
            msg = (
                f"Unknown report format '{self.report_format}'. "
                f"Available: {', '.join(REPORT_FORMATS)}"
            )
            raise ValueError(msg)
