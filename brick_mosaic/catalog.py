"""Brick colours, shapes and the catalogs that combine them."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

import numpy as np

from brick_mosaic.errors import UnknownColorError


@dataclass(frozen=True, order=True)
class Color:
    """A named brick colour.

    Equality, hashing and ordering use ``rgb`` only; two colours with the
    same value but different names are the same colour.
    """

    name: str = field(compare=False)
    rgb: tuple[int, int, int]

    def __post_init__(self) -> None:
        rgb = tuple(int(c) for c in self.rgb)
        if len(rgb) != 3 or any(c < 0 or c > 255 for c in rgb):
            msg = f"Colour {self.name!r} needs three channels in 0-255, got {self.rgb!r}"
            raise ValueError(msg)
        object.__setattr__(self, "rgb", rgb)

    @property
    def hex(self) -> str:
        return "#{:02X}{:02X}{:02X}".format(*self.rgb)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, order=True)
class PieceShape:
    """Width x height of a piece, in grid cells."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            msg = f"Piece dimensions must be positive, got {self.width}x{self.height}"
            raise ValueError(msg)

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def is_square(self) -> bool:
        return self.width == self.height

    def transposed(self) -> PieceShape:
        return PieceShape(self.height, self.width)

    def canonical(self) -> PieceShape:
        """Smaller dimension first; only used for reporting."""
        if self.width <= self.height:
            return self
        return self.transposed()

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True, order=True)
class Piece:
    """One purchasable brick: a shape in a colour."""

    shape: PieceShape
    color: Color

    def canonical(self) -> Piece:
        shape = self.shape.canonical()
        if shape is self.shape:
            return self
        return Piece(shape, self.color)

    def __str__(self) -> str:
        return f"{self.shape} {self.color.name}"


def _as_shape(shape: PieceShape | tuple[int, int]) -> PieceShape:
    if isinstance(shape, PieceShape):
        return shape
    w, h = shape
    return PieceShape(int(w), int(h))


class Catalog:
    """Immutable mapping of colour -> allowed piece shapes.

    Shapes are kept in declaration order; :meth:`shapes_for` returns them
    in packing priority order (largest area first, ties by declaration
    order).

    Args:
        name: Display name of the catalog.
        entries: Ordered mapping of colour to shapes. Shapes may be given
            as :class:`PieceShape` or ``(width, height)`` tuples.
    """

    def __init__(
        self,
        name: str,
        entries: Mapping[Color, Iterable[PieceShape | tuple[int, int]]],
    ) -> None:
        declared: dict[Color, tuple[PieceShape, ...]] = {}
        for color, shapes in entries.items():
            unique = tuple(dict.fromkeys(_as_shape(s) for s in shapes))
            if not unique:
                msg = f"Catalog {name!r}: colour {color.name!r} has no shapes"
                raise ValueError(msg)
            declared[color] = unique
        if not declared:
            msg = f"Catalog {name!r} has no colours"
            raise ValueError(msg)

        self.name = name
        self._entries = MappingProxyType(declared)
        self._index = {color: i for i, color in enumerate(declared)}
        self._priority = MappingProxyType({
            color: tuple(sorted(shapes, key=lambda s: s.area, reverse=True))
            for color, shapes in declared.items()
        })

    @classmethod
    def from_pieces(cls, name: str, pieces: Iterable[Piece]) -> Catalog:
        """Group a flat piece list by colour, keeping first-seen order."""
        grouped: dict[Color, list[PieceShape]] = {}
        for piece in pieces:
            grouped.setdefault(piece.color, []).append(piece.shape)
        return cls(name, grouped)

    @property
    def entries(self) -> Mapping[Color, tuple[PieceShape, ...]]:
        """Shapes per colour in declaration order."""
        return self._entries

    @property
    def colors(self) -> tuple[Color, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Color]:
        return iter(self._entries)

    def __contains__(self, color: object) -> bool:
        return color in self._entries

    def __repr__(self) -> str:
        return f"Catalog({self.name!r}, {len(self)} colours, {len(self.pieces())} pieces)"

    def index_of(self, color: Color) -> int:
        try:
            return self._index[color]
        except KeyError:
            raise UnknownColorError(color) from None

    def shapes_for(self, color: Color) -> tuple[PieceShape, ...]:
        """Shapes allowed for *color*, largest area first."""
        try:
            return self._priority[color]
        except KeyError:
            raise UnknownColorError(color) from None

    def pieces(self) -> list[Piece]:
        return [
            Piece(shape, color)
            for color, shapes in self._entries.items()
            for shape in shapes
        ]

    def colors_without_unit_piece(self) -> list[Color]:
        """Colours the packer could fail on (no 1x1 piece)."""
        unit = PieceShape(1, 1)
        return [c for c, shapes in self._entries.items() if unit not in shapes]

    def palette_array(self) -> np.ndarray:
        """(K, 3) uint8 RGB values in catalog order."""
        return np.array([c.rgb for c in self._entries], dtype=np.uint8)


# -- Named colours -----------------------------------------------------
# Names and values from the peeron colour guide; every one of them is
# sold as a 1x1 brick.

WHITE = Color("White (#1)", (242, 243, 242))
BRIGHT_RED = Color("Bright red (#21)", (196, 40, 27))
BRIGHT_BLUE = Color("Bright blue (#23)", (13, 105, 171))
BLACK = Color("Black (#26)", (27, 42, 52))
DARK_GREEN = Color("Dark green (#28)", (40, 127, 70))
BRIGHT_YELLOW = Color("Bright yellow (#24)", (245, 205, 47))
BRICK_YELLOW = Color("Brick yellow (#5)", (215, 197, 153))
BRIGHT_ORANGE = Color("Bright orange (#106)", (218, 133, 64))
MEDIUM_BLUE = Color("Medium blue (#102)", (110, 153, 201))
DARK_STONE_GREY = Color("Dark stone grey (#199)", (99, 95, 97))
REDDISH_BROWN = Color("Reddish brown (#192)", (105, 64, 39))
MEDIUM_STONE_GREY = Color("Medium stone grey (#194)", (163, 162, 164))
BRIGHT_YELLOWISH_GREEN = Color("Bright yellowish green (#119)", (164, 189, 70))
LIGHT_PURPLE = Color("Light purple (#222)", (228, 173, 200))
BRIGHT_REDDISH_VIOLET = Color("Bright reddish violet (#124)", (146, 57, 120))

BASIC_COLORS = [
    WHITE, BRIGHT_RED, BRIGHT_BLUE, BLACK,
    DARK_GREEN, BRIGHT_YELLOW, BRICK_YELLOW, BRIGHT_ORANGE,
]

BASIC_SHAPES = [
    PieceShape(1, 1),
    PieceShape(1, 2),
    PieceShape(1, 4),
    PieceShape(2, 2),
    PieceShape(2, 4),
]


def _pieces(shapes: Iterable[PieceShape], *colors: Color) -> list[Piece]:
    shapes = list(shapes)
    return [Piece(shape, color) for color in colors for shape in shapes]


BASIC_PIECES = _pieces(BASIC_SHAPES, *BASIC_COLORS)
ADVANCED_PIECES = (
    _pieces(
        BASIC_SHAPES,
        DARK_STONE_GREY, REDDISH_BROWN, MEDIUM_STONE_GREY,
        BRIGHT_YELLOWISH_GREEN, LIGHT_PURPLE,
    )
    + _pieces(BASIC_SHAPES[:3], MEDIUM_BLUE)
    + _pieces(BASIC_SHAPES[:2], BRIGHT_REDDISH_VIOLET)
)

CATALOGS: dict[str, Catalog] = {
    "basic": Catalog.from_pieces("basic", BASIC_PIECES),
    "advanced": Catalog.from_pieces("advanced", ADVANCED_PIECES),
    "all": Catalog.from_pieces("all", BASIC_PIECES + ADVANCED_PIECES),
}


def get_catalog(name: str) -> Catalog:
    """Look up a built-in catalog by name."""
    catalog = CATALOGS.get(name)
    if catalog is None:
        available = ", ".join(sorted(CATALOGS))
        msg = f"Unknown catalog '{name}'. Available: {available}"
        raise ValueError(msg)
    return catalog
