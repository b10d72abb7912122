"""
layout_engine.py: Layout state machine.

The LayoutEngine owns the committed layout of one board:
1. Loads it for the current column count (restore, or reflow on a cold start)
2. Applies drag and swap mutations after bounds/collision checks
3. Reconciles it when the host's card definitions change
4. Persists a full snapshot after every change without blocking the caller

States: UNINITIALIZED -> LOADING -> READY <-> MUTATING. Mutations are
synchronous and optimistic; writes run as asyncio tasks on the loop that
performed the last load, or wait for the next flush() once that loop is closed.
"""

import asyncio
import logging
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional, Union

from gridboard.constraints.collision import collides, find_violations, in_bounds
from gridboard.constraints.snapping import exceeds_drag_threshold, resolve_drag_position
from gridboard.constraints.swap import resolve_swap_by_id
from gridboard.db.cache import PersistenceError
from gridboard.models.schema import (
    CellSize,
    GridItem,
    GridPosition,
    PixelDelta,
    PixelRect,
    SavedLayout,
)

from . import grid_layout
from .reflow import reading_order, reflow
from .units import DESKTOP_COLUMNS, DRAG_THRESHOLD, GRID_GAP

if TYPE_CHECKING:
    from gridboard.db.layouts import LayoutRepository

logger = logging.getLogger("gridboard.layout")


class LayoutState(str, Enum):
    """Lifecycle of a LayoutEngine."""
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    MUTATING = "mutating"


class LoadSource(str, Enum):
    """Where the committed layout of the current session came from."""
    COLUMN_LAYOUT = "column_layout"   # Restored from the column-scoped key
    LEGACY_ORDER = "legacy_order"     # Reflowed in the legacy layout's reading order
    HOST_ORDER = "host_order"         # Reflowed in the host's own order
    FALLBACK = "fallback"             # Store unreadable, reflowed without saving


# =============================================================================
# LIST TRANSFORMS
# =============================================================================

def restore_from_saved(
    items: List[GridItem],
    saved: Optional[SavedLayout]
) -> List[GridItem]:
    """
    Apply stored cells to the host's cards.

    Only column and row come from storage. Spans always come from the current
    definitions, so a card that changed size keeps its new size. Cards
    without a stored position keep the host's position.
    """
    if saved is None:
        return list(items)

    restored = []
    for item in items:
        stored = saved.positions.get(item.id)
        if stored is None:
            restored.append(item)
            continue
        restored.append(item.with_position(item.position.moved_to(stored.column, stored.row)))
    return restored


def to_saved_layout(items: List[GridItem], columns: Optional[int] = None) -> SavedLayout:
    """Snapshot card positions for persistence."""
    return SavedLayout(
        columns=columns,
        positions={item.id: item.position for item in items},
    )


def update_item_in_list(
    items: List[GridItem],
    item_id: str,
    position: GridPosition
) -> List[GridItem]:
    """Copy of ``items`` with one card moved."""
    return [item.with_position(position) if item.id == item_id else item for item in items]


def swap_items_in_list(
    items: List[GridItem],
    active_id: str,
    over_id: str,
    active_position: GridPosition,
    over_position: GridPosition
) -> List[GridItem]:
    """Copy of ``items`` with two cards at their swapped positions."""
    result = []
    for item in items:
        if item.id == active_id:
            result.append(item.with_position(active_position))
        elif item.id == over_id:
            result.append(item.with_position(over_position))
        else:
            result.append(item)
    return result


def sync_initial_items(
    current: List[GridItem],
    incoming: List[GridItem]
) -> Optional[List[GridItem]]:
    """
    Reconcile the tracked layout with a new list of card definitions.

    Args:
        current: Cards as currently laid out
        incoming: Cards as now defined by the host

    Returns:
        None when the ids and every span are unchanged. Otherwise the
        incoming cards in incoming order: known cards keep their cell with the
        new spans, new cards keep the position the host gave them.
    """
    current_spans = {item.id: item.span_signature for item in current}
    incoming_spans = {item.id: item.span_signature for item in incoming}
    if current_spans == incoming_spans:
        return None

    by_id = {item.id: item for item in current}
    synced = []
    for item in incoming:
        existing = by_id.get(item.id)
        if existing is None:
            synced.append(item)
        else:
            synced.append(item.with_position(
                item.position.moved_to(existing.position.column, existing.position.row)
            ))
    return synced


# =============================================================================
# ENGINE
# =============================================================================

class LayoutEngine:
    """
    Committed layout of one board for the current column count.

    Example:
        >>> engine = LayoutEngine(LayoutRepository(InMemoryStore()), columns=4)
        >>> await engine.load(items)
        >>> engine.swap_items("timer", "calendar")
        >>> await engine.flush()
    """

    def __init__(
        self,
        repository: "LayoutRepository",
        columns: int = DESKTOP_COLUMNS,
        gap: float = GRID_GAP,
        drag_threshold: float = DRAG_THRESHOLD,
    ):
        self.repository = repository
        self.columns = columns
        self.gap = gap
        self.drag_threshold = drag_threshold

        self.state = LayoutState.UNINITIALIZED
        self.load_source: Optional[LoadSource] = None

        self._items: List[GridItem] = []
        self._definitions: List[GridItem] = []
        self._active_id: Optional[str] = None
        self._load_generation = 0
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._pending: set = set()
        self._deferred: Optional[tuple] = None

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def items(self) -> List[GridItem]:
        """Committed layout (empty until the first load finishes)."""
        return list(self._items)

    @property
    def is_ready(self) -> bool:
        return self.state == LayoutState.READY

    @property
    def active_id(self) -> Optional[str]:
        """Card being dragged, if any."""
        return self._active_id

    def get_item(self, item_id: str) -> Optional[GridItem]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def pixel_rects(self, cell: CellSize) -> Dict[str, PixelRect]:
        """Absolute rectangles of every card, keyed by id."""
        return {
            item.id: grid_layout.item_pixel_rect(item.position, cell, self.gap)
            for item in self._items
        }

    def container_height(self, cell: CellSize) -> Union[float, str]:
        return grid_layout.container_height(self._items, cell.height, self.gap)

    def active_overlay(self, cell: CellSize) -> Optional[CellSize]:
        """Drag preview size for the card being dragged."""
        item = self.get_item(self._active_id) if self._active_id else None
        if item is None:
            return None
        return grid_layout.overlay_size(
            item.position.column_span,
            item.position.row_span,
            cell.width,
            cell.height,
            self.gap,
        )

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    async def load(self, items: Optional[List[GridItem]] = None) -> List[GridItem]:
        """
        Start a column-count session.

        Priority:
        1. Layout saved for the current column count: restore it
        2. Legacy layout: reflow in its reading order
        3. Nothing saved: reflow in the host's reading order

        The result is saved under the column-scoped key so the next load at
        this column count restores it directly. If the store cannot be read,
        the host's cards are reflowed and nothing is saved.

        Args:
            items: Current card definitions. Defaults to the last ones given.

        Returns:
            The committed layout
        """
        if items is not None:
            self._definitions = list(items)
        definitions = list(self._definitions)
        columns = self.columns

        self._loop = asyncio.get_running_loop()
        self._load_generation += 1
        generation = self._load_generation
        self._active_id = None
        self.state = LayoutState.LOADING

        logger.info(f"Loading layout {self.repository.base_key!r} for {columns} columns")

        # Writes from the previous session must land before the store is read
        await self.flush()

        try:
            layout, source = await self._resolve_layout(definitions, columns)
        except PersistenceError as e:
            if generation != self._load_generation:
                return self.items
            logger.error(f"Failed to load layout, reflowing {len(definitions)} items: {e}")
            self._items = reflow(reading_order(definitions), columns)
            self.load_source = LoadSource.FALLBACK
            self.state = LayoutState.READY
            return self.items

        if generation != self._load_generation:
            # A newer load (e.g. another column change) superseded this one
            logger.debug(f"Discarding stale {columns}-column load")
            return self.items

        self._items = layout
        self.load_source = source
        if self._definitions != definitions:
            # Definitions changed while the store was being read
            synced = sync_initial_items(layout, self._definitions)
            if synced is not None:
                self._items = synced
        self.state = LayoutState.READY
        logger.info(f"Layout ready from {source.value} ({len(self._items)} items)")

        self._schedule_save()
        return self.items

    async def _resolve_layout(
        self,
        definitions: List[GridItem],
        columns: int
    ) -> tuple:
        scoped = await self.repository.load_column_layout(columns)
        if scoped is not None:
            restored = restore_from_saved(definitions, scoped)
            violations = find_violations(restored, columns)
            if not violations:
                return restored, LoadSource.COLUMN_LAYOUT
            # Spans grew or new cards landed on stored cells
            logger.warning(
                f"Stored {columns}-column layout has {len(violations)} violations, reflowing"
            )
            return reflow(reading_order(definitions, scoped), columns), LoadSource.COLUMN_LAYOUT

        legacy = await self.repository.load_legacy_layout()
        if legacy is not None:
            return reflow(reading_order(definitions, legacy), columns), LoadSource.LEGACY_ORDER

        return reflow(reading_order(definitions), columns), LoadSource.HOST_ORDER

    async def set_columns(self, columns: int) -> List[GridItem]:
        """Switch to another column count (new session)."""
        if columns == self.columns and self.state != LayoutState.UNINITIALIZED:
            return self.items
        logger.info(f"Column count changed {self.columns} -> {columns}")
        self.columns = columns
        return await self.load()

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def move_item(self, item_id: str, position: GridPosition) -> bool:
        """
        Move a card to a new cell.

        The card keeps its own spans. Rejected (state unchanged) if the engine
        is not ready, the card is unknown, or the cell is out of bounds or
        occupied.

        Returns:
            True if the move was committed
        """
        if not self._accepts_mutation("move"):
            return False

        item = self.get_item(item_id)
        if item is None:
            logger.debug(f"Move ignored, unknown item {item_id}")
            return False

        candidate = item.position.moved_to(position.column, position.row)
        if not in_bounds(candidate, self.columns):
            logger.debug(f"Move of {item_id} to ({candidate.column}, {candidate.row}) out of bounds")
            return False
        if collides(candidate, item_id, self._items):
            logger.debug(f"Move of {item_id} to ({candidate.column}, {candidate.row}) collides")
            return False

        logger.info(f"Moving {item_id} to ({candidate.column}, {candidate.row})")
        self._commit(update_item_in_list(self._items, item_id, candidate))
        return True

    def drag_item(self, item_id: str, delta: PixelDelta, cell: CellSize) -> bool:
        """Move a card by the pixel travel of a drag."""
        item = self.get_item(item_id)
        if item is None:
            logger.debug(f"Drag ignored, unknown item {item_id}")
            return False

        candidate = resolve_drag_position(item.position, delta, cell, self.columns, self.gap)
        if (candidate.column, candidate.row) == (item.position.column, item.position.row):
            return False
        return self.move_item(item_id, candidate)

    def swap_items(self, active_id: str, over_id: str) -> bool:
        """
        Exchange the cells of two cards, each keeping its own size.

        Both targets must be in bounds, must not overlap any other card, and
        must not overlap each other.

        Returns:
            True if the swap was committed
        """
        if not self._accepts_mutation("swap"):
            return False
        if active_id == over_id:
            return False

        result = resolve_swap_by_id(self._items, active_id, over_id, self.columns)
        if result is None:
            logger.debug(f"Swap ignored, unknown item {active_id} or {over_id}")
            return False

        others = [item for item in self._items if item.id not in (active_id, over_id)]
        for position in (result.active_position, result.over_position):
            if not in_bounds(position, self.columns) or collides(position, None, others):
                logger.debug(f"Swap of {active_id} and {over_id} rejected")
                return False
        if result.active_position.overlaps(result.over_position):
            logger.debug(f"Swap of {active_id} and {over_id} rejected, targets overlap")
            return False

        logger.info(f"Swapping {active_id} and {over_id}")
        self._commit(swap_items_in_list(
            self._items,
            active_id,
            over_id,
            result.active_position,
            result.over_position,
        ))
        return True

    def start_drag(self, item_id: str) -> bool:
        """Begin a drag gesture on a card."""
        if not self.is_ready or self.get_item(item_id) is None:
            return False
        self._active_id = item_id
        return True

    def cancel_drag(self) -> None:
        self._active_id = None

    def end_drag(
        self,
        delta: PixelDelta,
        cell: CellSize,
        over_id: Optional[str] = None
    ) -> bool:
        """
        Finish a drag gesture.

        Dropping onto another card swaps the two; otherwise a drop beyond the
        drag threshold moves the card by the travelled distance. Positions in
        between start and end are never validated or saved.

        Returns:
            True if a mutation was committed
        """
        active_id = self._active_id
        self._active_id = None
        if active_id is None:
            return False

        if over_id is not None and over_id != active_id:
            return self.swap_items(active_id, over_id)

        if exceeds_drag_threshold(delta, self.drag_threshold):
            return self.drag_item(active_id, delta, cell)

        return False

    # -------------------------------------------------------------------------
    # Reconciliation
    # -------------------------------------------------------------------------

    def sync_items(self, items: List[GridItem]) -> Optional[List[GridItem]]:
        """
        Reconcile with a new list of card definitions from the host.

        Returns:
            None if no card was added, removed or resized. Otherwise the
            rebuilt layout, which is committed and saved.
        """
        self._definitions = list(items)
        if not self.is_ready:
            # The next load picks the new definitions up
            return None

        synced = sync_initial_items(self._items, self._definitions)
        if synced is None:
            # Same cards, same sizes: refresh render payloads only
            by_id = {item.id: item for item in self._definitions}
            self._items = [by_id[item.id].with_position(item.position) for item in self._items]
            return None

        violations = find_violations(synced, self.columns)
        if violations:
            logger.warning(
                f"Reconciled layout has {len(violations)} violations: "
                + "; ".join(v.message for v in violations)
            )

        logger.info(f"Items changed, layout now has {len(synced)} items")
        self._commit(synced)
        return list(synced)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    async def flush(self) -> None:
        """Wait for every pending write."""
        if self._deferred is not None:
            layout, columns = self._deferred
            self._deferred = None
            await self._save(layout, columns)
        while self._pending:
            await asyncio.gather(*list(self._pending))

    def _accepts_mutation(self, operation: str) -> bool:
        if self.state != LayoutState.READY:
            logger.debug(f"{operation} ignored while {self.state.value}")
            return False
        return True

    def _commit(self, items: List[GridItem]) -> None:
        self.state = LayoutState.MUTATING
        self._items = items
        self.state = LayoutState.READY
        self._schedule_save()

    def _schedule_save(self) -> None:
        snapshot = to_saved_layout(self._items, self.columns)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Called from plain code: fall back to the loop of the last load
            loop = self._loop
        if loop is None or loop.is_closed():
            # Written by the next flush() or load()
            logger.warning(f"No event loop to save the {self.columns}-column layout, deferring")
            self._deferred = (snapshot, self.columns)
            return

        self._deferred = None
        task = loop.create_task(self._save(snapshot, self.columns))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _save(self, layout: SavedLayout, columns: int) -> None:
        try:
            await self.repository.save(layout, columns)
        except PersistenceError as e:
            # Not retried: the next successful write carries the full snapshot
            logger.error(f"Failed to save {columns}-column layout: {e}")
            return
        logger.debug(f"Saved {columns}-column layout ({len(layout.positions)} items)")
