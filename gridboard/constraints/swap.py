"""Position exchange between two cards of possibly different sizes."""

from dataclasses import dataclass
from typing import Optional

from gridboard.models.schema import GridItem, GridPosition


@dataclass
class SwapResult:
    """Target positions for both sides of a swap."""

    active_position: GridPosition
    over_position: GridPosition


def _fit_column(position: GridPosition, columns: int) -> GridPosition:
    """Pull an out-of-bounds position back to the right-most column that fits."""
    if position.column >= 1 and position.column_end <= columns:
        return position
    return position.model_copy(update={"column": columns - position.column_span + 1})


def resolve_swap(
    active: Optional[GridItem],
    over: Optional[GridItem],
    columns: int,
) -> Optional[SwapResult]:
    """Compute where two cards land when they trade places.

    Each card takes the other's (column, row) but keeps its own spans. A side
    that would then stick out of the grid has its column clamped on its own;
    the other side is unaffected. Rows are exchanged as they are.

    Args:
        active: Card being dragged.
        over: Card it was dropped on.
        columns: Grid width in columns.

    Returns:
        SwapResult, or None if either card is missing.
    """
    if active is None or over is None:
        return None

    active_position = _fit_column(
        over.position.with_spans(active.position.column_span, active.position.row_span),
        columns,
    )
    over_position = _fit_column(
        active.position.with_spans(over.position.column_span, over.position.row_span),
        columns,
    )

    return SwapResult(active_position=active_position, over_position=over_position)


def resolve_swap_by_id(
    items: list[GridItem],
    active_id: str,
    over_id: str,
    columns: int,
) -> Optional[SwapResult]:
    """Look both cards up by id and resolve the swap."""
    by_id = {item.id: item for item in items}
    return resolve_swap(by_id.get(active_id), by_id.get(over_id), columns)
