# Gridboard Layout Engine

from .units import (
    GRID_GAP,
    DESKTOP_COLUMNS,
    DRAG_THRESHOLD,
    DEFAULT_LAYOUT_KEY,
)

from .grid_layout import (
    cell_size,
    span_extent,
    item_pixel_rect,
    overlay_size,
    container_height,
)

from .reflow import (
    reading_order,
    reflow,
    assign_grid_positions,
)

__all__ = [
    # Units
    'GRID_GAP',
    'DESKTOP_COLUMNS',
    'DRAG_THRESHOLD',
    'DEFAULT_LAYOUT_KEY',
    # Geometry
    'cell_size',
    'span_extent',
    'item_pixel_rect',
    'overlay_size',
    'container_height',
    # Reflow
    'reading_order',
    'reflow',
    'assign_grid_positions',
]
