"""Greedy brick packing over a quantised grid.

Cells are visited in row-major order (y outer, x inner). Each uncovered
cell receives the largest catalog piece of its colour that fits: inside
the grid, over uncovered cells only, and over cells of that same colour.
Shapes are tried largest area first (ties in declaration order), each in
its stored orientation and then transposed. Placements are never undone,
so the result is deterministic but not minimal.
"""

from __future__ import annotations

import logging
import time
from typing import Protocol

import numpy as np

from brick_mosaic.catalog import Catalog, Color, Piece, PieceShape
from brick_mosaic.errors import NoFittingPieceError
from brick_mosaic.panel import Panel, Placement

logger = logging.getLogger(__name__)


class Grid(Protocol):
    """What the packer needs from a colour grid."""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def color_at(self, x: int, y: int) -> Color: ...


def _orientations(shape: PieceShape) -> tuple[PieceShape, ...]:
    if shape.is_square:
        return (shape,)
    return (shape, shape.transposed())


def _resolve(grid: Grid, catalog: Catalog) -> np.ndarray:
    """(H, W) array of catalog colour indices; fails before any placement."""
    w, h = grid.width, grid.height
    ids = np.empty((h, w), dtype=np.intp)
    for y in range(h):
        for x in range(w):
            ids[y, x] = catalog.index_of(grid.color_at(x, y))
    return ids


def pack(grid: Grid, catalog: Catalog) -> Panel:
    """Cover *grid* with catalog pieces.

    Args:
        grid: Source of cell colours. Only read.
        catalog: Allowed shapes per colour.

    Returns:
        A :class:`Panel` whose placements tile the grid exactly.

    Raises:
        UnknownColorError: the grid holds a colour not in *catalog*.
        NoFittingPieceError: a colour has no 1x1 piece and a cell of it
            cannot be covered otherwise.
    """
    t0 = time.perf_counter()
    ids = _resolve(grid, catalog)
    h, w = ids.shape
    colors = catalog.colors
    candidates = [
        [o for s in catalog.shapes_for(c) for o in _orientations(s)]
        for c in colors
    ]

    covered = np.zeros((h, w), dtype=bool)
    placements: dict[tuple[int, int], Placement] = {}

    for y in range(h):
        for x in range(w):
            if covered[y, x]:
                continue
            cid = ids[y, x]
            for shape in candidates[cid]:
                x1, y1 = x + shape.width, y + shape.height
                if x1 > w or y1 > h:
                    continue
                if covered[y:y1, x:x1].any():
                    continue
                if not (ids[y:y1, x:x1] == cid).all():
                    continue
                covered[y:y1, x:x1] = True
                placements[(x, y)] = Placement(x, y, Piece(shape, colors[cid]))
                break
            else:
                raise NoFittingPieceError(x, y, colors[cid])

    logger.info(
        "Packed %dx%d grid into %d pieces  (%.2f s)",
        w, h, len(placements), time.perf_counter() - t0,
    )
    return Panel(w, h, placements)
