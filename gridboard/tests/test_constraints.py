"""Tests for collision, snapping and swap resolution."""

import pytest

from gridboard.constraints.collision import collides, find_violations, in_bounds
from gridboard.constraints.snapping import (
    exceeds_drag_threshold,
    resolve_drag_position,
    snap_steps,
)
from gridboard.constraints.swap import resolve_swap, resolve_swap_by_id
from gridboard.models.schema import CellSize, GridPosition, PixelDelta


# ============================================================================
# Collision Tests
# ============================================================================

class TestBounds:
    """Tests for in_bounds."""

    @pytest.mark.parametrize(
        "column,column_span,expected",
        [
            (1, 1, True),
            (4, 1, True),
            (3, 2, True),
            (4, 2, False),
            (0, 1, False),
            (5, 1, False),
        ],
    )
    def test_column_range(self, column: int, column_span: int, expected: bool) -> None:
        position = GridPosition(column=column, row=1, column_span=column_span)
        assert in_bounds(position, 4) is expected

    def test_rows_are_unbounded(self) -> None:
        assert in_bounds(GridPosition(column=1, row=500), 2)

    @pytest.mark.parametrize("row", [0, -3])
    def test_rows_start_at_one(self, row: int) -> None:
        assert not in_bounds(GridPosition(column=1, row=row), 4)


class TestOverlap:
    """Tests for overlaps and collides."""

    def test_same_cell_overlaps(self) -> None:
        a = GridPosition(column=2, row=2)
        assert a.overlaps(GridPosition(column=2, row=2))

    def test_adjacent_cells_do_not_overlap(self) -> None:
        a = GridPosition(column=1, row=1)
        assert not a.overlaps(GridPosition(column=2, row=1))
        assert not a.overlaps(GridPosition(column=1, row=2))

    def test_spans_are_counted(self) -> None:
        wide = GridPosition(column=1, row=1, column_span=2)
        tall = GridPosition(column=2, row=1, row_span=2)
        assert wide.overlaps(tall)
        assert tall.overlaps(GridPosition(column=2, row=2))

    def test_collides_skips_excluded_item(self, dashboard_items) -> None:
        """Test an item never collides with itself."""
        timer_cell = GridPosition(column=1, row=1)
        assert not collides(timer_cell, "timer", dashboard_items)
        assert collides(timer_cell, "weather", dashboard_items)
        assert collides(timer_cell, None, dashboard_items)

    def test_free_cell_does_not_collide(self, dashboard_items) -> None:
        assert not collides(GridPosition(column=4, row=2), None, dashboard_items)


class TestFindViolations:
    """Tests for find_violations."""

    def test_valid_layout(self, dashboard_items) -> None:
        assert find_violations(dashboard_items, 4) == []

    def test_detects_bounds_and_overlap(self, make_item) -> None:
        items = [
            make_item("a", 1, 1),
            make_item("b", 1, 1),
            make_item("c", 2, 1, column_span=2),
        ]
        violations = find_violations(items, 2)

        assert [v.rule for v in violations] == ["bounds", "overlap"]
        assert violations[0].item_ids == ["c"]
        assert violations[1].item_ids == ["a", "b"]

    def test_detects_row_above_grid(self, make_item) -> None:
        violations = find_violations([make_item("a", 1, 0), make_item("b", 2, 1)], 4)

        assert [v.rule for v in violations] == ["bounds"]
        assert violations[0].item_ids == ["a"]


# ============================================================================
# Snapping Tests
# ============================================================================

class TestSnapSteps:
    """Tests for snap_steps."""

    @pytest.mark.parametrize(
        "distance,expected",
        [
            (0, 0),
            (127, 0),
            (128, 1),
            (-128, 0),
            (-129, -1),
            (384, 2),
            (-384, -1),
            (512, 2),
        ],
    )
    def test_half_cells_round_up(self, distance: float, expected: int) -> None:
        assert snap_steps(distance, 256) == expected

    def test_zero_pitch(self) -> None:
        assert snap_steps(300, 0) == 0


class TestDragThreshold:
    """Tests for exceeds_drag_threshold."""

    def test_threshold_is_exclusive(self) -> None:
        assert not exceeds_drag_threshold(PixelDelta(x=10, y=0), 10)
        assert not exceeds_drag_threshold(PixelDelta(x=-10, y=10), 10)

    def test_either_axis_counts(self) -> None:
        assert exceeds_drag_threshold(PixelDelta(x=10.5, y=0), 10)
        assert exceeds_drag_threshold(PixelDelta(x=0, y=-11), 10)


class TestResolveDragPosition:
    """Tests for resolve_drag_position."""

    cell = CellSize(width=232, height=232)

    def test_moves_by_whole_cells(self) -> None:
        current = GridPosition(column=1, row=1)
        result = resolve_drag_position(current, PixelDelta(x=512, y=256), self.cell, 4, 24)
        assert (result.column, result.row) == (3, 2)

    def test_column_is_clamped_to_fit_span(self) -> None:
        current = GridPosition(column=2, row=1, column_span=2)
        result = resolve_drag_position(current, PixelDelta(x=5000, y=0), self.cell, 4, 24)
        assert result.column == 3
        assert result.column_span == 2

    def test_row_has_floor_only(self) -> None:
        current = GridPosition(column=1, row=2, row_span=2)
        up = resolve_drag_position(current, PixelDelta(x=0, y=-5000), self.cell, 4, 24)
        down = resolve_drag_position(current, PixelDelta(x=0, y=2560), self.cell, 4, 24)

        assert up.row == 1
        assert down.row == 12
        assert up.row_span == down.row_span == 2

    def test_left_edge(self) -> None:
        current = GridPosition(column=1, row=1)
        result = resolve_drag_position(current, PixelDelta(x=-900, y=0), self.cell, 4, 24)
        assert result.column == 1

    def test_right_edge(self) -> None:
        """Test one cell of travel from the last column stays in it."""
        current = GridPosition(column=4, row=1)
        result = resolve_drag_position(
            current, PixelDelta(x=224, y=0), CellSize(width=200, height=200), 4, 24
        )
        assert result.column == 4


# ============================================================================
# Swap Tests
# ============================================================================

class TestResolveSwap:
    """Tests for resolve_swap."""

    def test_equal_sizes_trade_cells(self, make_item) -> None:
        result = resolve_swap(make_item("a", 1, 1), make_item("b", 3, 2), 4)

        assert (result.active_position.column, result.active_position.row) == (3, 2)
        assert (result.over_position.column, result.over_position.row) == (1, 1)

    def test_each_side_keeps_its_spans(self, make_item) -> None:
        active = make_item("wide", 1, 1, column_span=2)
        over = make_item("tall", 3, 1, row_span=2)
        result = resolve_swap(active, over, 4)

        assert result.active_position.column_span == 2
        assert result.active_position.row_span == 1
        assert result.over_position.column_span == 1
        assert result.over_position.row_span == 2

    def test_wide_card_is_clamped_alone(self, make_item) -> None:
        """Test only the side that sticks out is pulled back in."""
        active = make_item("wide", 1, 1, column_span=2)
        over = make_item("small", 4, 3)
        result = resolve_swap(active, over, 4)

        assert (result.active_position.column, result.active_position.row) == (3, 3)
        assert (result.over_position.column, result.over_position.row) == (1, 1)

    def test_missing_item(self, make_item) -> None:
        assert resolve_swap(make_item("a"), None, 4) is None
        assert resolve_swap(None, make_item("a"), 4) is None

    def test_lookup_by_id(self, dashboard_items) -> None:
        result = resolve_swap_by_id(dashboard_items, "timer", "links", 4)
        assert (result.active_position.column, result.active_position.row) == (3, 2)
        assert resolve_swap_by_id(dashboard_items, "timer", "ghost", 4) is None
