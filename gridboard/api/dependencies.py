"""FastAPI dependencies for board lookup."""

import asyncio
import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from gridboard.api.config import Settings
from gridboard.db.cache import LayoutStore
from gridboard.db.layouts import LayoutRepository
from gridboard.engine.layout_engine import LayoutEngine

logger = logging.getLogger("gridboard.api")


class BoardRegistry:
    """One LayoutEngine per board id, all sharing one store."""

    def __init__(self, store: LayoutStore, settings: Settings):
        self.store = store
        self.settings = settings
        self._engines: dict[str, LayoutEngine] = {}

    def __len__(self) -> int:
        return len(self._engines)

    def get(self, board_id: str) -> LayoutEngine | None:
        return self._engines.get(board_id)

    def get_or_create(self, board_id: str) -> LayoutEngine:
        """Engine for a board, created with the configured defaults."""
        engine = self._engines.get(board_id)
        if engine is None:
            repository = LayoutRepository(
                self.store,
                base_key=f"{board_id}:{self.settings.layout_base_key}",
                mirror_legacy=self.settings.mirror_legacy_layout,
            )
            engine = LayoutEngine(
                repository,
                columns=self.settings.default_columns,
                gap=self.settings.grid_gap,
                drag_threshold=self.settings.drag_threshold,
            )
            self._engines[board_id] = engine
            logger.info(f"Created board {board_id}")
        return engine

    async def flush_all(self) -> None:
        """Wait for pending writes of every board."""
        await asyncio.gather(*(engine.flush() for engine in self._engines.values()))


def get_registry(request: Request) -> BoardRegistry:
    """Registry stored on the application state."""
    return request.app.state.boards


async def get_engine(
    board_id: str,
    registry: BoardRegistry = Depends(get_registry),
) -> LayoutEngine:
    """Get a board's engine.

    Raises:
        HTTPException: If the board was never loaded.
    """
    engine = registry.get(board_id)
    if engine is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Board {board_id} not found",
        )
    return engine


async def get_ready_engine(
    engine: LayoutEngine = Depends(get_engine),
) -> LayoutEngine:
    """Get a board's engine, requiring a finished load.

    Raises:
        HTTPException: If the board is still loading.
    """
    if not engine.is_ready:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Board is {engine.state.value}, load it first",
        )
    return engine


# Type aliases for cleaner route signatures
Registry = Annotated[BoardRegistry, Depends(get_registry)]
Engine = Annotated[LayoutEngine, Depends(get_engine)]
ReadyEngine = Annotated[LayoutEngine, Depends(get_ready_engine)]
