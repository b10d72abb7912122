"""Pydantic v2 models for grid layouts.

Grid coordinates are 1-based. A position covers the rectangle
[column, column + column_span - 1] x [row, row + row_span - 1] of uniform
square cells. Pixel values are floats measured from the grid container's
top-left corner.

JSON uses camelCase aliases (``columnSpan``, ``rowSpan``, ``schemaVersion``)
so persisted layouts stay readable by older clients.
"""

from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# Version written into column-scoped layout documents. Documents without a
# version are the legacy single-layout format.
LEGACY_SCHEMA_VERSION = 1
LAYOUT_SCHEMA_VERSION = 2


class GridItemSize(str, Enum):
    """Card size presets."""

    SMALL_SQUARE = "small-square"
    SMALL_RECTANGLE = "small-rectangle"
    MEDIUM = "medium"
    LARGE = "large"

    @property
    def default_column_span(self) -> int:
        """Column span implied by the preset when none is given."""
        return 2 if self is GridItemSize.SMALL_RECTANGLE else 1


# ============================================================================
# Grid Models
# ============================================================================


class GridPosition(BaseModel):
    """Placement of a card on the grid."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    column: int = Field(description="1-based left column")
    row: int = Field(description="1-based top row")
    column_span: Literal[1, 2] = Field(default=1, alias="columnSpan")
    row_span: Literal[1, 2] = Field(default=1, alias="rowSpan")

    @property
    def column_end(self) -> int:
        """Right-most occupied column."""
        return self.column + self.column_span - 1

    @property
    def row_end(self) -> int:
        """Bottom-most occupied row."""
        return self.row + self.row_span - 1

    def moved_to(self, column: int, row: int) -> "GridPosition":
        """Same spans at another cell."""
        return self.model_copy(update={"column": column, "row": row})

    def with_spans(self, column_span: int, row_span: int) -> "GridPosition":
        """Same cell with other spans."""
        return self.model_copy(update={"column_span": column_span, "row_span": row_span})

    def overlaps(self, other: "GridPosition") -> bool:
        """True if both rectangles share at least one cell."""
        row_overlap = not (self.row > other.row_end or self.row_end < other.row)
        col_overlap = not (self.column > other.column_end or self.column_end < other.column)
        return row_overlap and col_overlap


class GridItem(BaseModel):
    """A card as supplied by the host.

    Only ``id`` and ``position`` matter to the layout engine; ``payload`` is
    whatever the host needs to render the card and is passed through untouched.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    size: GridItemSize = GridItemSize.SMALL_SQUARE
    position: GridPosition
    payload: Any = Field(default=None, alias="renderPayload")

    @model_validator(mode="before")
    @classmethod
    def apply_size_column_span(cls, data: Any) -> Any:
        """Fill in the preset's column span when the position has none."""
        if not isinstance(data, dict):
            return data
        position = data.get("position")
        if not isinstance(position, dict) or "columnSpan" in position or "column_span" in position:
            return data
        try:
            size = GridItemSize(data.get("size", GridItemSize.SMALL_SQUARE))
        except ValueError:
            # Reported by field validation
            return data
        return {**data, "position": {**position, "columnSpan": size.default_column_span}}

    def with_position(self, position: GridPosition) -> "GridItem":
        return self.model_copy(update={"position": position})

    @property
    def span_signature(self) -> tuple[str, int, int]:
        return (self.id, self.position.column_span, self.position.row_span)


# ============================================================================
# Pixel Models
# ============================================================================


class CellSize(BaseModel):
    """Size of one grid cell in pixels. Derived from the container, never stored."""

    model_config = ConfigDict(frozen=True)

    width: float = Field(ge=0)
    height: float = Field(ge=0)


class PixelDelta(BaseModel):
    """Pointer movement between drag start and drag end."""

    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0


class PixelRect(BaseModel):
    """Absolute placement of a card inside the grid container."""

    model_config = ConfigDict(frozen=True)

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height


# ============================================================================
# Persisted Layout
# ============================================================================


class SavedLayout(BaseModel):
    """Persisted card positions, keyed by item id."""

    model_config = ConfigDict(populate_by_name=True)

    schema_version: int = Field(default=LEGACY_SCHEMA_VERSION, alias="schemaVersion")
    columns: Optional[int] = Field(default=None, ge=1)
    positions: dict[str, GridPosition] = Field(default_factory=dict)

    @property
    def is_legacy(self) -> bool:
        return self.schema_version < LAYOUT_SCHEMA_VERSION

    def to_json(self) -> str:
        """Versioned, column-scoped document."""
        return self.model_dump_json(by_alias=True)

    def to_legacy_json(self) -> str:
        """Positions-only document understood by pre-versioning clients."""
        return self.model_dump_json(by_alias=True, include={"positions"})
