"""Grid layout data models."""

from gridboard.models.schema import (
    LAYOUT_SCHEMA_VERSION,
    LEGACY_SCHEMA_VERSION,
    CellSize,
    GridItem,
    GridItemSize,
    GridPosition,
    PixelDelta,
    PixelRect,
    SavedLayout,
)

__all__ = [
    "LAYOUT_SCHEMA_VERSION",
    "LEGACY_SCHEMA_VERSION",
    "CellSize",
    "GridItem",
    "GridItemSize",
    "GridPosition",
    "PixelDelta",
    "PixelRect",
    "SavedLayout",
]
