"""Board layout routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Query

from gridboard.api.dependencies import Engine, ReadyEngine, Registry
from gridboard.api.schemas import (
    ColumnsRequest,
    DragRequest,
    ItemSnapshot,
    LayoutResponse,
    LoadRequest,
    MoveRequest,
    MutationResponse,
    SwapRequest,
    SyncRequest,
)
from gridboard.engine.grid_layout import cell_size
from gridboard.engine.layout_engine import LayoutEngine
from gridboard.models.schema import GridPosition

logger = logging.getLogger("gridboard.api")

router = APIRouter()


def build_snapshot(
    board_id: str,
    engine: LayoutEngine,
    grid_width: Optional[float] = None,
) -> dict:
    """Serializable view of a board, with pixel geometry when the width is known."""
    rects = {}
    height = None
    if grid_width:
        cell = cell_size(grid_width, engine.columns, engine.gap)
        rects = engine.pixel_rects(cell)
        height = engine.container_height(cell)

    items = [
        ItemSnapshot(
            id=item.id,
            position=item.position,
            rect=rects.get(item.id),
            payload=item.payload,
        )
        for item in engine.items
    ]
    return {
        "board_id": board_id,
        "state": engine.state.value,
        "columns": engine.columns,
        "source": engine.load_source.value if engine.load_source else None,
        "items": items,
        "container_height": height,
    }


@router.post("/{board_id}/load", response_model=LayoutResponse)
async def load_board(board_id: str, request: LoadRequest, registry: Registry):
    """Load a board's layout for a column count.

    Restores the layout saved for that column count, or reflows the cards
    when there is none.
    """
    engine = registry.get_or_create(board_id)
    if request.columns is not None:
        engine.columns = request.columns
    await engine.load(request.items)
    return build_snapshot(board_id, engine)


@router.post("/{board_id}/columns", response_model=LayoutResponse)
async def change_columns(board_id: str, request: ColumnsRequest, engine: Engine):
    """Switch a board to another column count."""
    await engine.set_columns(request.columns)
    return build_snapshot(board_id, engine)


@router.post("/{board_id}/move", response_model=MutationResponse)
async def move_item(board_id: str, request: MoveRequest, engine: ReadyEngine):
    """Move a card to a cell, keeping its size."""
    applied = engine.move_item(
        request.item_id,
        GridPosition(column=request.column, row=request.row),
    )
    return {**build_snapshot(board_id, engine), "applied": applied}


@router.post("/{board_id}/drag", response_model=MutationResponse)
async def drag_item(board_id: str, request: DragRequest, engine: ReadyEngine):
    """Finish a drag: swap when dropped on a card, otherwise move by the pixel delta."""
    cell = cell_size(request.grid_width, engine.columns, engine.gap)
    applied = False
    if engine.start_drag(request.item_id):
        applied = engine.end_drag(request.delta, cell, request.over_id)
    return {**build_snapshot(board_id, engine, request.grid_width), "applied": applied}


@router.post("/{board_id}/swap", response_model=MutationResponse)
async def swap_items(board_id: str, request: SwapRequest, engine: ReadyEngine):
    """Exchange the cells of two cards."""
    applied = engine.swap_items(request.active_id, request.over_id)
    return {**build_snapshot(board_id, engine), "applied": applied}


@router.put("/{board_id}/items", response_model=MutationResponse)
async def sync_items(board_id: str, request: SyncRequest, engine: ReadyEngine):
    """Replace the card definitions of a board.

    ``applied`` is false when no card was added, removed or resized.
    """
    applied = engine.sync_items(request.items) is not None
    return {**build_snapshot(board_id, engine), "applied": applied}


@router.get("/{board_id}", response_model=LayoutResponse)
async def get_board(
    board_id: str,
    engine: Engine,
    grid_width: Optional[float] = Query(None, alias="gridWidth", gt=0),
):
    """Current layout, with pixel rectangles when ``gridWidth`` is given."""
    return build_snapshot(board_id, engine, grid_width)
