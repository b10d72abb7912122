"""
units.py: Grid constants.

Pixel sizes and column counts shared by the geometry, the resolvers and the
layout engine. Never hardcode these values anywhere else in the codebase.
"""

# =============================================================================
# GRID DIMENSIONS
# =============================================================================

GRID_GAP = 24            # Spacing between cells (px)
DESKTOP_COLUMNS = 4
MIN_COLUMNS = 2          # Narrowest grid that still fits a 2-wide card

# =============================================================================
# DRAG GESTURES
# =============================================================================

DRAG_THRESHOLD = 10      # Minimum pointer travel (px) before a drop counts as a move

# =============================================================================
# PERSISTENCE
# =============================================================================

DEFAULT_LAYOUT_KEY = "grid-layout-order"
COLUMN_KEY_SUFFIX = "col"

# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def clamp(value: int, min_val: int, max_val: int) -> int:
    """Clamp a value between min and max. ``min_val`` wins if the range is empty."""
    return max(min_val, min(max_val, value))
