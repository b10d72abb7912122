"""Tests for reading order, reflow and initial position assignment."""

import random

import pytest

from gridboard.constraints.collision import find_violations
from gridboard.engine.layout_engine import to_saved_layout
from gridboard.engine.reflow import assign_grid_positions, reading_order, reflow
from gridboard.models.schema import GridPosition, SavedLayout


def _cells(items) -> dict[str, tuple[int, int]]:
    return {item.id: (item.position.column, item.position.row) for item in items}


class TestReadingOrder:
    """Tests for reading_order."""

    def test_sorts_by_row_then_column(self, dashboard_items) -> None:
        shuffled = list(reversed(dashboard_items))
        ordered = reading_order(shuffled)
        assert [item.id for item in ordered] == [
            "timer", "calendar", "weather", "notes", "stats", "links",
        ]

    def test_ties_keep_host_order(self, make_item) -> None:
        items = [make_item("b", 1, 1), make_item("a", 1, 1)]
        assert [item.id for item in reading_order(items)] == ["b", "a"]

    def test_saved_positions_define_order(self, make_item) -> None:
        items = [make_item("a", 1, 1), make_item("b", 2, 1), make_item("c", 3, 1)]
        saved = SavedLayout(positions={
            "a": GridPosition(column=2, row=2),
            "b": GridPosition(column=1, row=1),
        })
        # c has no saved position and keeps (3, 1)
        assert [item.id for item in reading_order(items, saved)] == ["b", "c", "a"]


class TestReflow:
    """Tests for reflow."""

    def test_four_to_two_columns(self, dashboard_items) -> None:
        """Test the dashboard packs first-fit into two columns."""
        result = reflow(reading_order(dashboard_items), 2)

        assert _cells(result) == {
            "timer": (1, 1),
            "calendar": (1, 2),
            "weather": (2, 1),
            "notes": (1, 3),
            "stats": (2, 3),
            "links": (1, 4),
        }
        assert find_violations(result, 2) == []

    def test_valid_layout_is_stable(self, dashboard_items) -> None:
        """Test reflowing an already packed layout changes nothing."""
        result = reflow(reading_order(dashboard_items), 4)
        assert _cells(result) == _cells(dashboard_items)

    def test_spans_and_order_are_preserved(self, dashboard_items) -> None:
        result = reflow(dashboard_items, 2)
        assert [item.id for item in result] == [item.id for item in dashboard_items]
        assert [item.span_signature for item in result] == [
            item.span_signature for item in dashboard_items
        ]

    def test_deterministic(self, dashboard_items) -> None:
        first = to_saved_layout(reflow(dashboard_items, 3), 3).to_json()
        second = to_saved_layout(reflow(list(dashboard_items), 3), 3).to_json()
        assert first == second

    def test_fills_gaps_before_new_rows(self, make_item) -> None:
        """Test a small card backfills the hole left by a wide one."""
        items = [
            make_item("a", 1, 1),
            make_item("wide", 2, 1, column_span=2),
            make_item("b", 1, 2),
        ]
        result = reflow(items, 2)
        assert _cells(result) == {"a": (1, 1), "wide": (1, 2), "b": (2, 1)}

    def test_card_wider_than_grid_is_kept(self, make_item) -> None:
        items = [make_item("a", 1, 1), make_item("wide", 3, 5, column_span=2)]
        result = reflow(items, 1)
        assert _cells(result) == {"a": (1, 1), "wide": (3, 5)}

    def test_empty(self) -> None:
        assert reflow([], 4) == []

    @pytest.mark.parametrize("seed", range(25))
    def test_random_spans_never_overlap(self, make_item, seed: int) -> None:
        """Test arbitrary span mixes always reflow into a valid layout."""
        rng = random.Random(seed)
        columns = rng.choice([2, 3, 4, 6])
        items = [
            make_item(
                f"card-{i}",
                column=rng.randint(1, 8),
                row=rng.randint(1, 8),
                column_span=rng.choice([1, 2]),
                row_span=rng.choice([1, 2]),
            )
            for i in range(rng.randint(1, 20))
        ]

        result = reflow(reading_order(items), columns)

        assert find_violations(result, columns) == []
        assert sorted(item.id for item in result) == sorted(item.id for item in items)


class TestAssignGridPositions:
    """Tests for assign_grid_positions."""

    def test_fills_rows_left_to_right(self, make_item) -> None:
        items = [
            make_item("a"),
            make_item("b", column_span=2),
            make_item("c"),
            make_item("d"),
            make_item("e", column_span=2),
        ]
        result = assign_grid_positions(items, 4)
        assert _cells(result) == {
            "a": (1, 1),
            "b": (2, 1),
            "c": (4, 1),
            "d": (1, 2),
            "e": (2, 2),
        }

    def test_wide_card_wraps(self, make_item) -> None:
        items = [make_item("a"), make_item("b"), make_item("c"), make_item("wide", column_span=2)]
        result = assign_grid_positions(items, 4)
        assert _cells(result)["wide"] == (1, 2)
