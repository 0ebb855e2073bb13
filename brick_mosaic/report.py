"""Bill of materials: how many of each brick a panel needs."""

from __future__ import annotations

import csv
import io
import json
from dataclasses import dataclass

from brick_mosaic.catalog import Catalog, Piece
from brick_mosaic.panel import Panel

REPORT_FORMATS = ("text", "csv", "json")


@dataclass(frozen=True)
class BomLine:
    """One row of the bill of materials (canonical piece + count)."""

    piece: Piece
    count: int

    @property
    def area(self) -> int:
        """Grid cells covered by all pieces on this line."""
        return self.piece.shape.area * self.count


def bill_of_materials(panel: Panel, catalog: Catalog | None = None) -> list[BomLine]:
    """Count pieces of *panel*, grouped by colour.

    Colours follow *catalog* order when given (colour value otherwise);
    within a colour larger pieces come first.
    """
    counts = panel.count_pieces()

    def _key(piece: Piece) -> tuple:
        color_key = catalog.index_of(piece.color) if catalog is not None else piece.color.rgb
        return (color_key, -piece.shape.area, piece.shape)

    return [BomLine(piece, counts[piece]) for piece in sorted(counts, key=_key)]


def format_bom(lines: list[BomLine], fmt: str = "text") -> str:
    """Serialise bill-of-materials lines as ``text``, ``csv`` or ``json``."""
    if fmt == "text":
        rows = [f"{line.count} x {line.piece}" for line in lines]
        rows.append(f"Total: {sum(line.count for line in lines)} pieces")
        return "\n".join(rows) + "\n"

    if fmt == "csv":
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        writer.writerow(["width", "height", "color", "hex", "count"])
        for line in lines:
            shape, color = line.piece.shape, line.piece.color
            writer.writerow([shape.width, shape.height, color.name, color.hex, line.count])
        return buf.getvalue()

    if fmt == "json":
        data = {
            "total": sum(line.count for line in lines),
            "pieces": [
                {
                    "shape": str(line.piece.shape),
                    "width": line.piece.shape.width,
                    "height": line.piece.shape.height,
                    "color": line.piece.color.name,
                    "hex": line.piece.color.hex,
                    "count": line.count,
                }
                for line in lines
            ],
        }
        return json.dumps(data, indent=2) + "\n"

    msg = f"Unknown report format '{fmt}'. Available: {', '.join(REPORT_FORMATS)}"
    raise ValueError(msg)
