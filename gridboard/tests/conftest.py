"""Pytest configuration and fixtures."""

import asyncio
from typing import Any, Optional

import pytest
from fastapi.testclient import TestClient

from gridboard.api.config import Settings
from gridboard.api.main import create_app
from gridboard.db.cache import InMemoryStore, PersistenceError
from gridboard.db.layouts import LayoutRepository
from gridboard.models.schema import GridItem, GridItemSize, GridPosition


def build_item(
    item_id: str,
    column: int = 1,
    row: int = 1,
    column_span: int = 1,
    row_span: int = 1,
    payload: Any = None,
) -> GridItem:
    size = GridItemSize.SMALL_RECTANGLE if column_span == 2 else GridItemSize.SMALL_SQUARE
    if row_span == 2:
        size = GridItemSize.LARGE if column_span == 2 else GridItemSize.MEDIUM
    return GridItem(
        id=item_id,
        size=size,
        position=GridPosition(column=column, row=row, column_span=column_span, row_span=row_span),
        payload=payload,
    )


class FlakyStore(InMemoryStore):
    """In-memory store whose reads or writes can be switched to fail."""

    def __init__(self):
        super().__init__()
        self.fail_reads = False
        self.fail_writes = False
        self.writes: list[str] = []

    async def get(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise PersistenceError(f"Failed to read {key}", "read")
        return await super().get(key)

    async def set(self, key: str, value: str) -> bool:
        if self.fail_writes:
            raise PersistenceError(f"Failed to write {key}", "write")
        self.writes.append(key)
        return await super().set(key, value)


class GatedStore(InMemoryStore):
    """In-memory store whose reads can be held until a gate opens."""

    def __init__(self):
        super().__init__()
        self.gate: Optional[asyncio.Event] = None
        self.held = 0

    def hold_reads(self) -> asyncio.Event:
        """Make every following read wait for the returned event."""
        self.gate = asyncio.Event()
        return self.gate

    async def get(self, key: str) -> Optional[str]:
        gate = self.gate
        if gate is not None:
            self.held += 1
            await gate.wait()
        return await super().get(key)


@pytest.fixture
def make_item():
    """Factory for grid items."""
    return build_item


@pytest.fixture
def dashboard_items() -> list[GridItem]:
    """A valid four-column dashboard.

    Row 1: timer, calendar (2 wide), weather
    Row 2: notes, stats (2 tall), links
    """
    return [
        build_item("timer", 1, 1, payload={"title": "Timer"}),
        build_item("calendar", 2, 1, column_span=2, payload={"title": "Calendar"}),
        build_item("weather", 4, 1),
        build_item("notes", 1, 2),
        build_item("stats", 2, 2, row_span=2),
        build_item("links", 3, 2),
    ]


@pytest.fixture
def store() -> InMemoryStore:
    """Empty in-memory store."""
    return InMemoryStore()


@pytest.fixture
def flaky_store() -> FlakyStore:
    """Store that records writes and can be made to fail."""
    return FlakyStore()


@pytest.fixture
def gated_store() -> GatedStore:
    """Store whose reads can be held mid-load."""
    return GatedStore()


@pytest.fixture
def repository(store: InMemoryStore) -> LayoutRepository:
    """Repository on the default layout key."""
    return LayoutRepository(store)


@pytest.fixture
def app_store() -> InMemoryStore:
    """Store backing the test application."""
    return InMemoryStore()


@pytest.fixture
def client(app_store: InMemoryStore) -> TestClient:
    """Create a test client for the FastAPI app."""
    app = create_app(settings=Settings(), store=app_store)
    with TestClient(app) as test_client:
        yield test_client
