"""
grid_layout.py: Pixel geometry for the card grid.

Converts grid positions to absolute pixel rectangles for a container of a
given width. Cells are square: the width is derived from the container and
the height follows it.

All functions are pure. Nothing here knows about collisions or persistence.
"""

from typing import Iterable, Union

from gridboard.models.schema import CellSize, GridItem, GridPosition, PixelRect

from .units import GRID_GAP


# =============================================================================
# CELL SIZE
# =============================================================================

def cell_size(
    grid_width: float,
    columns: int,
    gap: float = GRID_GAP
) -> CellSize:
    """
    Compute the size of one square cell.

    Args:
        grid_width: Width of the grid container in px
        columns: Number of grid columns
        gap: Spacing between cells in px

    Returns:
        CellSize with equal width and height
    """
    width = max(0.0, (grid_width - gap * (columns - 1)) / columns)
    return CellSize(width=width, height=width)


def span_extent(span: int, cell: float, gap: float = GRID_GAP) -> float:
    """Pixel length of ``span`` cells including the gaps between them."""
    return span * cell + (span - 1) * gap


# =============================================================================
# ITEM PLACEMENT
# =============================================================================

def item_pixel_rect(
    position: GridPosition,
    cell: CellSize,
    gap: float = GRID_GAP
) -> PixelRect:
    """
    Compute the absolute rectangle of a card.

    Args:
        position: Grid position of the card
        cell: Cell size
        gap: Spacing between cells in px

    Returns:
        PixelRect relative to the container's top-left corner
    """
    return PixelRect(
        left=(position.column - 1) * (cell.width + gap),
        top=(position.row - 1) * (cell.height + gap),
        width=span_extent(position.column_span, cell.width, gap),
        height=span_extent(position.row_span, cell.height, gap),
    )


def overlay_size(
    column_span: int,
    row_span: int,
    cell_width: float,
    cell_height: float,
    gap: float = GRID_GAP
) -> CellSize:
    """
    Size of the drag preview for a card with the given spans.

    Same formula as item_pixel_rect, without the absolute position.
    """
    return CellSize(
        width=span_extent(column_span, cell_width, gap),
        height=span_extent(row_span, cell_height, gap),
    )


# =============================================================================
# CONTAINER
# =============================================================================

def container_height(
    items: Iterable[GridItem],
    cell_height: float,
    gap: float = GRID_GAP
) -> Union[float, str]:
    """
    Height of the grid container, driven by the lowest occupied row.

    Returns:
        Height in px, or "auto" when there are no items or the cell size is
        not known yet (cell_height == 0)
    """
    items = list(items)
    if not items or cell_height == 0:
        return "auto"

    max_row = max(item.position.row_end for item in items)
    return max_row * cell_height + (max_row - 1) * gap
