"""Exceptions raised by the packing core."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from brick_mosaic.catalog import Color


class BrickMosaicError(Exception):
    """Base class for brick mosaic errors."""


class UnknownColorError(BrickMosaicError, LookupError):
    """A grid cell holds a colour the catalog does not know about."""

    def __init__(self, color: object) -> None:
        self.color = color
        super().__init__(f"Colour {color!r} is not in the catalog")


class NoFittingPieceError(BrickMosaicError, RuntimeError):
    """No catalog piece fits an uncovered cell.

    Only reachable when the catalog lacks a 1x1 piece for *color*.
    """

    def __init__(self, x: int, y: int, color: Color) -> None:
        self.x = x
        self.y = y
        self.color = color
        super().__init__(
            f"No piece fits cell ({x}, {y}) of colour {color.name}; "
            "the catalog needs a 1x1 piece for every colour"
        )
