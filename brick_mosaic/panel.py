"""The packed mosaic: placements anchored on a grid."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

import numpy as np

from brick_mosaic.catalog import Piece


@dataclass(frozen=True)
class Placement:
    """A piece anchored at its top-left cell."""

    x: int
    y: int
    piece: Piece

    @property
    def anchor(self) -> tuple[int, int]:
        return (self.x, self.y)

    @property
    def width(self) -> int:
        return self.piece.shape.width

    @property
    def height(self) -> int:
        return self.piece.shape.height

    @property
    def bounds(self) -> tuple[int, int, int, int]:
        """(x0, y0, x1, y1), exclusive on the far edges."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def cells(self) -> Iterator[tuple[int, int]]:
        for dy in range(self.height):
            for dx in range(self.width):
                yield (self.x + dx, self.y + dy)


class Panel:
    """A complete tiling of a ``width`` x ``height`` grid.

    Placements are keyed by anchor ``(x, y)`` and exposed read-only.
    """

    def __init__(
        self,
        width: int,
        height: int,
        placements: Mapping[tuple[int, int], Placement],
    ) -> None:
        self._width = width
        self._height = height
        self._placements = MappingProxyType(dict(placements))

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def placements(self) -> Mapping[tuple[int, int], Placement]:
        return self._placements

    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    def __len__(self) -> int:
        return len(self._placements)

    def __iter__(self) -> Iterator[Placement]:
        """Placements in scan order (row-major by anchor)."""
        for key in sorted(self._placements, key=lambda p: (p[1], p[0])):
            yield self._placements[key]

    def __repr__(self) -> str:
        return f"Panel({self.width}x{self.height}, {len(self)} pieces)"

    def count_pieces(self) -> Counter[Piece]:
        """Number of placed pieces per canonical piece.

        A 1x2 and a 2x1 of the same colour count as the same piece.
        """
        return Counter(p.piece.canonical() for p in self._placements.values())

    def coverage(self) -> np.ndarray:
        """(H, W) array of how many placements cover each cell."""
        counts = np.zeros((self.height, self.width), dtype=np.int32)
        for p in self._placements.values():
            x0, y0, x1, y1 = p.bounds
            counts[max(y0, 0):y1, max(x0, 0):x1] += 1
        return counts

    def placement_at(self, x: int, y: int) -> Placement | None:
        """The placement covering cell ``(x, y)``, if any."""
        for p in self._placements.values():
            x0, y0, x1, y1 = p.bounds
            if x0 <= x < x1 and y0 <= y < y1:
                return p
        return None

    def validate(self) -> None:
        """Check the placements tile the grid exactly once per cell.

        Raises:
            ValueError: a piece leaves the grid, overlaps another, or a
                cell is left uncovered.
        """
        for p in self._placements.values():
            x0, y0, x1, y1 = p.bounds
            if x0 < 0 or y0 < 0 or x1 > self.width or y1 > self.height:
                msg = f"{p.piece} at ({p.x}, {p.y}) extends outside {self.width}x{self.height}"
                raise ValueError(msg)
        counts = self.coverage()
        if (counts > 1).any():
            y, x = np.argwhere(counts > 1)[0]
            msg = f"Cell ({x}, {y}) is covered by {counts[y, x]} pieces"
            raise ValueError(msg)
        if (counts == 0).any():
            y, x = np.argwhere(counts == 0)[0]
            msg = f"Cell ({x}, {y}) is not covered"
            raise ValueError(msg)
