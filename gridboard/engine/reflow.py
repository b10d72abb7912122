"""
reflow.py: Greedy re-placement of cards for a column count.

Used when no layout exists yet for the current number of columns: cards are
placed one by one, in reading order, into the first free cell that fits them.

Placement is first-fit, top-to-bottom then left-to-right, so the same input
always yields the same layout.
"""

import logging
from typing import List, Optional

from gridboard.constraints.collision import collides, in_bounds
from gridboard.models.schema import GridItem, GridPosition, SavedLayout

logger = logging.getLogger("gridboard.layout")


# =============================================================================
# READING ORDER
# =============================================================================

def reading_order(
    items: List[GridItem],
    saved: Optional[SavedLayout] = None
) -> List[GridItem]:
    """
    Sort cards row by row, then column by column.

    Args:
        items: Cards in host order
        saved: Layout whose positions define the order. Cards missing from it
            fall back to their own position.

    Returns:
        New list; ties keep host order
    """
    positions = saved.positions if saved is not None else {}

    def sort_key(item: GridItem):
        position = positions.get(item.id, item.position)
        return (position.row, position.column)

    return sorted(items, key=sort_key)


# =============================================================================
# REFLOW
# =============================================================================

def _first_fit(
    item: GridItem,
    placed: List[GridItem],
    columns: int
) -> Optional[GridPosition]:
    """Find the first free cell for an item, scanning rows then columns."""
    column_span = item.position.column_span
    row_span = item.position.row_span

    # Every row below the lowest placed card is empty, so a card that fits the
    # width always fits at column 1 of the first row under them.
    lowest = max((p.position.row_end for p in placed), default=0)
    search_ceiling = lowest + 1

    for row in range(1, search_ceiling + 1):
        for column in range(1, columns - column_span + 2):
            candidate = GridPosition(
                column=column,
                row=row,
                column_span=column_span,
                row_span=row_span,
            )
            if in_bounds(candidate, columns) and not collides(candidate, item.id, placed):
                return candidate
    return None


def reflow(items: List[GridItem], columns: int) -> List[GridItem]:
    """
    Place cards into non-overlapping cells for the given column count.

    Args:
        items: Cards in the order they should be placed (reading order)
        columns: Grid width in columns

    Returns:
        Cards in the same order with new positions. A card wider than the
        grid cannot be placed and is returned unchanged.
    """
    placed: List[GridItem] = []

    for item in items:
        position = _first_fit(item, placed, columns)
        if position is None:
            logger.warning(
                f"Cannot place {item.id} (span {item.position.column_span}) "
                f"in {columns} columns, keeping its position"
            )
            placed.append(item)
            continue
        placed.append(item.with_position(position))

    return placed


# =============================================================================
# INITIAL POSITIONS
# =============================================================================

def assign_grid_positions(items: List[GridItem], columns: int = 4) -> List[GridItem]:
    """
    Give cards consecutive positions, left to right, wrapping at the edge.

    Helper for hosts that build their card list in display order and need a
    starting position for each card. Row spans are not taken into account.

    Args:
        items: Cards in display order
        columns: Grid width in columns

    Returns:
        Cards with explicit positions
    """
    row = 1
    column = 1
    result = []

    for item in items:
        column_span = item.position.column_span

        if column + column_span - 1 > columns:
            row += 1
            column = 1

        result.append(item.with_position(item.position.moved_to(column, row)))

        column += column_span
        if column > columns:
            row += 1
            column = 1

    return result
