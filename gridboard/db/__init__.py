"""Persistence module for gridboard."""

from gridboard.db.cache import (
    InMemoryStore,
    LayoutStore,
    PersistenceError,
    RedisStore,
    StoreConfig,
    get_store,
)
from gridboard.db.layouts import LayoutRepository, migrate_layout, parse_layout

__all__ = [
    "InMemoryStore",
    "LayoutStore",
    "PersistenceError",
    "RedisStore",
    "StoreConfig",
    "get_store",
    "LayoutRepository",
    "migrate_layout",
    "parse_layout",
]
