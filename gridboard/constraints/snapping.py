"""Snapping drag deltas to grid cells."""

import math

from gridboard.engine.units import DRAG_THRESHOLD, GRID_GAP, clamp
from gridboard.models.schema import CellSize, GridPosition, PixelDelta


def snap_steps(distance: float, pitch: float) -> int:
    """Number of whole cells a pointer travelled.

    Halves round up (2.5 -> 3, -2.5 -> -2), so anything under half a cell
    snaps back to zero.

    Args:
        distance: Pointer travel in px along one axis.
        pitch: Cell size plus gap in px.

    Returns:
        Signed cell count.
    """
    if pitch <= 0:
        return 0
    return math.floor(distance / pitch + 0.5)


def exceeds_drag_threshold(delta: PixelDelta, threshold: float = DRAG_THRESHOLD) -> bool:
    """Whether a drop travelled far enough to count as a move."""
    return abs(delta.x) > threshold or abs(delta.y) > threshold


def resolve_drag_position(
    current: GridPosition,
    delta: PixelDelta,
    cell: CellSize,
    columns: int,
    gap: float = GRID_GAP,
) -> GridPosition:
    """Map the pixel travel of a drag to a new grid cell.

    The column is clamped so the card stays inside the grid; the row only
    has a floor of 1. Spans are carried through. Collisions are not checked
    here: callers gate the result through the collision detector.

    Args:
        current: Position at drag start.
        delta: Pointer travel in px.
        cell: Current cell size.
        columns: Grid width in columns.
        gap: Spacing between cells in px.

    Returns:
        Candidate position.
    """
    column_delta = snap_steps(delta.x, cell.width + gap)
    row_delta = snap_steps(delta.y, cell.height + gap)

    new_column = clamp(
        current.column + column_delta,
        1,
        columns - current.column_span + 1,
    )
    new_row = max(1, current.row + row_delta)

    return current.moved_to(new_column, new_row)
