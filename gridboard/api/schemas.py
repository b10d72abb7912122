"""
schemas.py: Pydantic request/response models for the API.

Field names are camelCase on the wire, snake_case in Python.
"""

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from gridboard.engine.units import MIN_COLUMNS
from gridboard.models.schema import GridItem, GridPosition, PixelDelta, PixelRect


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# =============================================================================
# REQUEST MODELS
# =============================================================================

class LoadRequest(_CamelModel):
    """Start a layout session for a board."""
    columns: Optional[int] = Field(None, ge=MIN_COLUMNS, description="Column count, server default if omitted")
    items: List[GridItem] = Field(default_factory=list)

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "columns": 4,
                "items": [
                    {"id": "timer", "size": "small-square", "position": {"column": 1, "row": 1}},
                    {
                        "id": "calendar",
                        "size": "small-rectangle",
                        "position": {"column": 2, "row": 1, "columnSpan": 2},
                    },
                ],
            }
        },
    )


class ColumnsRequest(_CamelModel):
    """Switch the column count of a loaded board."""
    columns: int = Field(..., ge=MIN_COLUMNS)


class MoveRequest(_CamelModel):
    """Move a card to a cell."""
    item_id: str = Field(..., alias="itemId", min_length=1)
    column: int = Field(..., ge=1)
    row: int = Field(..., ge=1)


class DragRequest(_CamelModel):
    """End of a drag gesture."""
    item_id: str = Field(..., alias="itemId", min_length=1)
    delta: PixelDelta = Field(default_factory=PixelDelta)
    grid_width: float = Field(..., alias="gridWidth", gt=0)
    over_id: Optional[str] = Field(None, alias="overId")


class SwapRequest(_CamelModel):
    """Exchange the cells of two cards."""
    active_id: str = Field(..., alias="activeId", min_length=1)
    over_id: str = Field(..., alias="overId", min_length=1)


class SyncRequest(_CamelModel):
    """New card definitions from the host."""
    items: List[GridItem]


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class ItemSnapshot(_CamelModel):
    """A card with its committed position and, if requested, its pixel rect."""
    id: str
    position: GridPosition
    rect: Optional[PixelRect] = None
    payload: Any = Field(None, alias="renderPayload")


class LayoutResponse(_CamelModel):
    """Committed layout of a board."""
    board_id: str = Field(..., alias="boardId")
    state: str
    columns: int
    source: Optional[str] = None
    items: List[ItemSnapshot] = Field(default_factory=list)
    container_height: Optional[Union[float, str]] = Field(None, alias="containerHeight")


class MutationResponse(LayoutResponse):
    """Layout after a mutation request."""
    applied: bool


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    app: str
    version: str
    store: str
    boards: int
