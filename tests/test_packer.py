"""Tests for the catalog, the packer and the panel."""

from __future__ import annotations

import numpy as np
import pytest

from brick_mosaic.catalog import (
    BASIC_SHAPES,
    BRIGHT_REDDISH_VIOLET,
    CATALOGS,
    MEDIUM_BLUE,
    WHITE,
    Catalog,
    Color,
    Piece,
    PieceShape,
    get_catalog,
)
from brick_mosaic.errors import NoFittingPieceError, UnknownColorError
from brick_mosaic.grid import QuantizedGrid, grid_from_colors
from brick_mosaic.packer import pack
from brick_mosaic.panel import Panel, Placement

# -- Fixtures ----------------------------------------------------------

A = Color("A", (255, 0, 0))
B = Color("B", (0, 0, 255))
C = Color("C", (0, 255, 0))

W, H = 13, 9  # odd sizes so large bricks cannot tile everything


class ListGrid:
    """Minimal grid backed by rows of colours; no catalog validation."""

    def __init__(self, rows: list[list[Color]]) -> None:
        self.rows = rows

    @property
    def width(self) -> int:
        return len(self.rows[0])

    @property
    def height(self) -> int:
        return len(self.rows)

    def color_at(self, x: int, y: int) -> Color:
        return self.rows[y][x]


@pytest.fixture
def catalog() -> Catalog:
    shapes = [(1, 1), (1, 2), (1, 4), (2, 2), (2, 4)]
    return Catalog("test", {A: shapes, B: shapes, C: [(1, 1), (1, 3)]})


@pytest.fixture
def random_grid(catalog: Catalog) -> QuantizedGrid:
    """Blotchy random grid: coarse blocks so larger bricks get used."""
    rng = np.random.default_rng(7)
    coarse = rng.integers(0, len(catalog), size=(H // 2 + 1, W // 2 + 1))
    indices = np.kron(coarse, np.ones((2, 2), dtype=int))[:H, :W]
    noise = rng.random((H, W)) < 0.1
    indices[noise] = rng.integers(0, len(catalog), size=noise.sum())
    return QuantizedGrid(indices, catalog)


# -- Colours and shapes ------------------------------------------------

class TestColor:
    def test_equality_ignores_name(self) -> None:
        assert Color("red", (1, 2, 3)) == Color("rouge", (1, 2, 3))
        assert hash(Color("red", (1, 2, 3))) == hash(Color("rouge", (1, 2, 3)))

    def test_different_values_differ(self) -> None:
        assert Color("x", (1, 2, 3)) != Color("x", (1, 2, 4))

    def test_rgb_normalised_to_tuple(self) -> None:
        assert Color("x", [10, 20, 30]).rgb == (10, 20, 30)

    def test_invalid_channel(self) -> None:
        with pytest.raises(ValueError):
            Color("bad", (0, 0, 256))

    def test_hex(self) -> None:
        assert WHITE.hex == "#F2F3F2"


class TestPieceShape:
    def test_area_and_square(self) -> None:
        assert PieceShape(2, 4).area == 8
        assert PieceShape(2, 2).is_square
        assert not PieceShape(1, 2).is_square

    def test_canonical(self) -> None:
        assert PieceShape(4, 2).canonical() == PieceShape(2, 4)
        assert PieceShape(2, 4).canonical() == PieceShape(2, 4)

    def test_non_positive_rejected(self) -> None:
        with pytest.raises(ValueError):
            PieceShape(0, 1)

    def test_piece_canonical_keeps_colour(self) -> None:
        piece = Piece(PieceShape(2, 1), A).canonical()
        assert piece == Piece(PieceShape(1, 2), A)

    def test_piece_str(self) -> None:
        assert str(Piece(PieceShape(1, 2), WHITE)) == "1x2 White (#1)"


# -- Catalog -----------------------------------------------------------

class TestCatalog:
    def test_priority_largest_area_first(self, catalog: Catalog) -> None:
        areas = [s.area for s in catalog.shapes_for(A)]
        assert areas == sorted(areas, reverse=True)

    def test_ties_keep_declaration_order(self) -> None:
        cat = Catalog("t", {A: [(1, 1), (1, 4), (2, 2)]})
        assert cat.shapes_for(A) == (PieceShape(1, 4), PieceShape(2, 2), PieceShape(1, 1))
        cat = Catalog("t", {A: [(2, 2), (1, 1), (1, 4)]})
        assert cat.shapes_for(A) == (PieceShape(2, 2), PieceShape(1, 4), PieceShape(1, 1))

    def test_entries_keep_declaration_order(self, catalog: Catalog) -> None:
        assert catalog.entries[C] == (PieceShape(1, 1), PieceShape(1, 3))
        assert catalog.colors == (A, B, C)

    def test_unknown_colour(self, catalog: Catalog) -> None:
        stranger = Color("stranger", (9, 9, 9))
        with pytest.raises(UnknownColorError):
            catalog.shapes_for(stranger)
        with pytest.raises(LookupError):
            catalog.index_of(stranger)

    def test_lookup_by_value(self, catalog: Catalog) -> None:
        assert catalog.shapes_for(Color("other name", (255, 0, 0))) == catalog.shapes_for(A)

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValueError):
            Catalog("empty", {})
        with pytest.raises(ValueError):
            Catalog("no shapes", {A: []})

    def test_colors_without_unit_piece(self) -> None:
        cat = Catalog("t", {A: [(1, 1)], B: [(2, 2)]})
        assert cat.colors_without_unit_piece() == [B]

    def test_palette_array(self, catalog: Catalog) -> None:
        arr = catalog.palette_array()
        assert arr.shape == (3, 3)
        assert arr.dtype == np.uint8
        assert tuple(arr[1]) == B.rgb

    def test_builtin_catalogs(self) -> None:
        assert len(get_catalog("basic")) == 8
        assert len(get_catalog("advanced")) == 7
        assert len(get_catalog("all")) == 15
        for cat in CATALOGS.values():
            assert cat.colors_without_unit_piece() == []

    def test_builtin_restricted_shapes(self) -> None:
        cat = get_catalog("all")
        assert cat.entries[MEDIUM_BLUE] == tuple(BASIC_SHAPES[:3])
        assert cat.shapes_for(BRIGHT_REDDISH_VIOLET) == (PieceShape(1, 2), PieceShape(1, 1))

    def test_from_pieces_groups_by_colour(self) -> None:
        cat = Catalog.from_pieces("t", [
            Piece(PieceShape(1, 1), A),
            Piece(PieceShape(1, 1), B),
            Piece(PieceShape(1, 2), A),
        ])
        assert cat.colors == (A, B)
        assert cat.entries[A] == (PieceShape(1, 1), PieceShape(1, 2))

    def test_invalid_name(self) -> None:
        with pytest.raises(ValueError):
            get_catalog("deluxe")


# -- Packer scenarios --------------------------------------------------

class TestPackScenarios:
    def test_two_cells_use_one_brick(self) -> None:
        cat = Catalog("t", {A: [(1, 2), (1, 1)]})
        panel = pack(ListGrid([[A, A]]), cat)
        assert len(panel) == 1
        placement = panel.placements[(0, 0)]
        assert placement.piece.shape == PieceShape(2, 1)
        assert placement.piece.color == A

    def test_single_cell(self) -> None:
        cat = Catalog("t", {A: [(1, 1)]})
        panel = pack(ListGrid([[A]]), cat)
        assert dict(panel.placements) == {
            (0, 0): Placement(0, 0, Piece(PieceShape(1, 1), A)),
        }

    def test_unknown_colour_fails_before_placing(self) -> None:
        cat = Catalog("t", {A: [(1, 1)]})
        rows = [[A, A], [A, B]]
        with pytest.raises(UnknownColorError) as exc_info:
            pack(ListGrid(rows), cat)
        assert exc_info.value.color == B
        assert rows == [[A, A], [A, B]]

    def test_missing_unit_piece(self) -> None:
        cat = Catalog("t", {A: [(2, 2)]})
        with pytest.raises(NoFittingPieceError) as exc_info:
            pack(ListGrid([[A]]), cat)
        assert (exc_info.value.x, exc_info.value.y) == (0, 0)
        assert exc_info.value.color == A

    def test_missing_unit_piece_on_odd_cell(self) -> None:
        cat = Catalog("t", {A: [(1, 2)]})
        with pytest.raises(NoFittingPieceError) as exc_info:
            pack(ListGrid([[A, A, A]]), cat)
        assert exc_info.value.x == 2

    def test_bricks_do_not_cross_colours(self) -> None:
        shapes = [(2, 2), (1, 2), (1, 1)]
        cat = Catalog("t", {A: shapes, B: shapes})
        panel = pack(ListGrid([[A, B], [A, B]]), cat)
        assert len(panel) == 2
        assert panel.placements[(0, 0)].piece == Piece(PieceShape(1, 2), A)
        assert panel.placements[(1, 0)].piece == Piece(PieceShape(1, 2), B)

    def test_uniform_block_uses_largest(self) -> None:
        cat = Catalog("t", {A: [(1, 1), (2, 2), (2, 4)]})
        panel = pack(ListGrid([[A] * 4 for _ in range(2)]), cat)
        assert len(panel) == 1
        assert panel.placements[(0, 0)].piece.shape == PieceShape(2, 4).transposed()

    def test_stored_orientation_before_transposed(self) -> None:
        cat = Catalog("t", {A: [(1, 1), (1, 2)]})
        panel = pack(ListGrid([[A, A], [A, A]]), cat)
        assert panel.placements[(0, 0)].piece.shape == PieceShape(1, 2)
        assert panel.placements[(1, 0)].piece.shape == PieceShape(1, 2)

    def test_area_tie_follows_declaration(self) -> None:
        block = ListGrid([[A] * 4 for _ in range(4)])
        first = pack(block, Catalog("t", {A: [(1, 1), (1, 4), (2, 2)]}))
        assert first.placements[(0, 0)].piece.shape == PieceShape(1, 4)
        second = pack(block, Catalog("t", {A: [(1, 1), (2, 2), (1, 4)]}))
        assert second.placements[(0, 0)].piece.shape == PieceShape(2, 2)

    def test_greedy_scan_order(self) -> None:
        # 1x3 row: the 1x2 goes first at x=0, leaving a 1x1 at x=2.
        cat = Catalog("t", {A: [(1, 1), (1, 2)]})
        panel = pack(ListGrid([[A, A, A]]), cat)
        assert sorted(panel.placements) == [(0, 0), (2, 0)]
        assert panel.placements[(2, 0)].piece.shape == PieceShape(1, 1)


# -- Packer properties -------------------------------------------------

class TestPackProperties:
    def test_full_coverage_no_overlap(self, random_grid: QuantizedGrid, catalog: Catalog) -> None:
        panel = pack(random_grid, catalog)
        np.testing.assert_array_equal(panel.coverage(), np.ones((H, W), dtype=np.int32))
        panel.validate()

    def test_colour_fidelity(self, random_grid: QuantizedGrid, catalog: Catalog) -> None:
        panel = pack(random_grid, catalog)
        for placement in panel:
            for x, y in placement.cells():
                assert random_grid.color_at(x, y) == placement.piece.color

    def test_uses_bricks_larger_than_one(self, random_grid: QuantizedGrid, catalog: Catalog) -> None:
        panel = pack(random_grid, catalog)
        assert len(panel) < W * H

    def test_deterministic(self, random_grid: QuantizedGrid, catalog: Catalog) -> None:
        assert dict(pack(random_grid, catalog).placements) == dict(
            pack(random_grid, catalog).placements
        )

    def test_grid_not_mutated(self, random_grid: QuantizedGrid, catalog: Catalog) -> None:
        before = random_grid.indices.copy()
        pack(random_grid, catalog)
        np.testing.assert_array_equal(random_grid.indices, before)

    def test_only_allowed_shapes(self, random_grid: QuantizedGrid, catalog: Catalog) -> None:
        panel = pack(random_grid, catalog)
        for placement in panel:
            allowed = catalog.entries[placement.piece.color]
            shape = placement.piece.shape
            assert shape in allowed or shape.transposed() in allowed

    def test_unit_only_counts_sum_to_cells(self) -> None:
        cat = Catalog("units", {A: [(1, 1)], B: [(1, 1)]})
        rng = np.random.default_rng(3)
        grid = QuantizedGrid(rng.integers(0, 2, size=(H, W)), cat)
        counts = pack(grid, cat).count_pieces()
        assert sum(counts.values()) == W * H
        assert set(counts) <= {Piece(PieceShape(1, 1), A), Piece(PieceShape(1, 1), B)}


# -- Panel -------------------------------------------------------------

class TestPanel:
    def test_size(self, random_grid: QuantizedGrid, catalog: Catalog) -> None:
        assert pack(random_grid, catalog).size() == (W, H)

    def test_count_merges_orientations(self) -> None:
        panel = Panel(3, 2, {
            (0, 0): Placement(0, 0, Piece(PieceShape(1, 2), A)),
            (1, 0): Placement(1, 0, Piece(PieceShape(2, 1), A)),
            (1, 1): Placement(1, 1, Piece(PieceShape(2, 1), B)),
        })
        counts = panel.count_pieces()
        assert counts[Piece(PieceShape(1, 2), A)] == 2
        assert counts[Piece(PieceShape(1, 2), B)] == 1
        assert Piece(PieceShape(2, 1), A) not in counts

    def test_iter_scan_order(self) -> None:
        panel = Panel(2, 2, {
            (1, 1): Placement(1, 1, Piece(PieceShape(1, 1), A)),
            (0, 1): Placement(0, 1, Piece(PieceShape(1, 1), A)),
            (0, 0): Placement(0, 0, Piece(PieceShape(2, 1), A)),
        })
        assert [p.anchor for p in panel] == [(0, 0), (0, 1), (1, 1)]

    def test_placement_at(self) -> None:
        wide = Placement(0, 0, Piece(PieceShape(2, 1), A))
        panel = Panel(2, 2, {(0, 0): wide})
        assert panel.placement_at(1, 0) == wide
        assert panel.placement_at(1, 1) is None

    def test_placements_read_only(self) -> None:
        panel = Panel(1, 1, {(0, 0): Placement(0, 0, Piece(PieceShape(1, 1), A))})
        with pytest.raises(TypeError):
            panel.placements[(0, 0)] = None  # type: ignore[index]

    def test_size_read_only(self) -> None:
        panel = Panel(1, 1, {(0, 0): Placement(0, 0, Piece(PieceShape(1, 1), A))})
        with pytest.raises(AttributeError):
            panel.width = 5  # type: ignore[misc]
        with pytest.raises(AttributeError):
            panel.height = 5  # type: ignore[misc]
        assert panel.size() == (1, 1)

    def test_validate_detects_gap(self) -> None:
        panel = Panel(2, 1, {(0, 0): Placement(0, 0, Piece(PieceShape(1, 1), A))})
        with pytest.raises(ValueError, match="not covered"):
            panel.validate()

    def test_validate_detects_overlap(self) -> None:
        panel = Panel(2, 1, {
            (0, 0): Placement(0, 0, Piece(PieceShape(2, 1), A)),
            (1, 0): Placement(1, 0, Piece(PieceShape(1, 1), A)),
        })
        with pytest.raises(ValueError, match="covered by 2"):
            panel.validate()

    def test_validate_detects_out_of_bounds(self) -> None:
        panel = Panel(1, 1, {(0, 0): Placement(0, 0, Piece(PieceShape(1, 2), A))})
        with pytest.raises(ValueError, match="outside"):
            panel.validate()

    def test_grid_from_colors_rejects_unknown(self, catalog: Catalog) -> None:
        with pytest.raises(UnknownColorError):
            grid_from_colors([[A, Color("x", (1, 1, 1))]], catalog)
