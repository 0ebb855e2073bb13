"""Image loading, saving, and comparison-grid generation."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont


def compute_target_size(
    original_width: int,
    original_height: int,
    target_width: int,
) -> tuple[int, int]:
    """Compute (w, h) for a grid *target_width* cells wide.

    The height keeps the aspect ratio, truncated, minimum 1.
    """
    if target_width < 1:
        msg = f"Target width must be positive, got {target_width}"
        raise ValueError(msg)
    scale = target_width / original_width
    return target_width, max(1, int(scale * original_height))


def load_and_resize(path: str | Path, width: int = 32) -> np.ndarray:
    """Load an image and resize it to *width* columns.

    Returns:
        (H, W, 3) uint8 array.
    """
    img = Image.open(path).convert("RGB")
    w, h = compute_target_size(img.width, img.height, width)
    img = img.resize((w, h), Image.LANCZOS)
    return np.array(img, dtype=np.uint8)


def save_upscaled(
    array: np.ndarray,
    path: str | Path,
    pixel_upscale: int = 10,
) -> None:
    """Save a small array as a nearest-neighbour-upscaled image."""
    img = Image.fromarray(array.astype(np.uint8))
    h, w = array.shape[:2]
    img = img.resize((w * pixel_upscale, h * pixel_upscale), Image.NEAREST)
    img.save(path)


def make_comparison_grid(
    original_path: str | Path,
    quantized: np.ndarray,
    mosaic: Image.Image,
    output_path: str | Path,
) -> None:
    """Create a 3-panel comparison: Original | Quantized | Mosaic.

    Panels take the size of the rendered *mosaic*.
    """
    panel_w, panel_h = mosaic.size
    th, tw = quantized.shape[:2]
    label_height = 36

    original = (
        Image.open(original_path)
        .convert("RGB")
        .resize((panel_w, panel_h), Image.LANCZOS)
    )
    quantized_img = Image.fromarray(quantized).resize((panel_w, panel_h), Image.NEAREST)

    panels = [original, quantized_img, mosaic.convert("RGB")]
    labels = [
        "Original",
        f"Quantized {tw}x{th}",
        "Mosaic",
    ]

    gap = 8
    total_w = len(panels) * panel_w + (len(panels) - 1) * gap
    total_h = panel_h + label_height

    canvas = Image.new("RGB", (total_w, total_h), (30, 30, 30))
    draw = ImageDraw.Draw(canvas)

    try:
        font = ImageFont.truetype(
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", 18,
        )
    except OSError:
        font = ImageFont.load_default()

    for i, (panel, label) in enumerate(zip(panels, labels, strict=False)):
        x = i * (panel_w + gap)
        canvas.paste(panel, (x, label_height))

        bbox = draw.textbbox((0, 0), label, font=font)
        text_w = bbox[2] - bbox[0]
        tx = x + (panel_w - text_w) // 2
        draw.text((tx, 6), label, fill=(220, 220, 220), font=font)

    canvas.save(output_path)
