"""Layout documents on top of a key-value store.

Two keys exist per board:

- ``<base_key>-<columns>col``: the authoritative layout for one column count,
  stored as a versioned document ``{"schemaVersion": 2, "columns": N,
  "positions": {...}}``.
- ``<base_key>``: the legacy column-agnostic layout ``{"positions": {...}}``.
  It is mirrored on every save unless mirroring is switched off, and it is
  read as a reading-order hint when no column-scoped layout exists yet.

Every write stores a whole snapshot. Concurrent writers are not reconciled:
the last write wins.
"""

import asyncio
import json
import logging
from typing import Optional

from pydantic import ValidationError

from gridboard.engine.units import COLUMN_KEY_SUFFIX, DEFAULT_LAYOUT_KEY
from gridboard.models.schema import LAYOUT_SCHEMA_VERSION, SavedLayout

from .cache import LayoutStore

logger = logging.getLogger("gridboard.store")


def parse_layout(raw: Optional[str]) -> Optional[SavedLayout]:
    """Parse a stored layout document.

    Args:
        raw: JSON text as read from the store.

    Returns:
        SavedLayout, or None for a missing, corrupt or unrecognised document.
    """
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.warning("Ignoring stored layout that is not valid JSON")
        return None
    if not isinstance(data, dict) or "positions" not in data:
        logger.warning("Ignoring stored layout without positions")
        return None
    try:
        return SavedLayout.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Ignoring invalid stored layout: {e.error_count()} errors")
        return None


class LayoutRepository:
    """Reads and writes layouts for one board."""

    def __init__(
        self,
        store: LayoutStore,
        base_key: str = DEFAULT_LAYOUT_KEY,
        mirror_legacy: bool = True,
    ):
        self.store = store
        self.base_key = base_key
        self.mirror_legacy = mirror_legacy

    @property
    def legacy_key(self) -> str:
        return self.base_key

    def column_key(self, columns: int) -> str:
        return f"{self.base_key}-{columns}{COLUMN_KEY_SUFFIX}"

    async def load_column_layout(self, columns: int) -> Optional[SavedLayout]:
        """Layout saved for exactly this column count.

        Raises:
            PersistenceError: If the store cannot be read.
        """
        return parse_layout(await self.store.get(self.column_key(columns)))

    async def load_legacy_layout(self) -> Optional[SavedLayout]:
        """Column-agnostic layout from before column-scoped keys.

        Raises:
            PersistenceError: If the store cannot be read.
        """
        return parse_layout(await self.store.get(self.legacy_key))

    async def save(self, layout: SavedLayout, columns: int) -> None:
        """Write a full layout snapshot for a column count.

        Raises:
            PersistenceError: If any of the writes fails.
        """
        document = layout.model_copy(
            update={"schema_version": LAYOUT_SCHEMA_VERSION, "columns": columns}
        )
        writes = [self.store.set(self.column_key(columns), document.to_json())]
        if self.mirror_legacy:
            writes.append(self.store.set(self.legacy_key, document.to_legacy_json()))
        await asyncio.gather(*writes)


async def migrate_layout(
    source: LayoutRepository,
    target: LayoutRepository,
    columns: Optional[int] = None,
) -> bool:
    """Copy layouts to another store unless it already has its own.

    Used once when a user moves from local storage to a remote store. The
    legacy layout is always considered; the column-scoped layout only when
    ``columns`` is given.

    Returns:
        True if anything was copied.

    Raises:
        PersistenceError: If either store fails.
    """
    migrated = False

    legacy = await source.load_legacy_layout()
    if legacy is None:
        logger.info("No legacy layout to migrate")
    elif await target.load_legacy_layout() is not None:
        logger.info("Target already has a legacy layout, skipping")
    else:
        await target.store.set(target.legacy_key, legacy.to_legacy_json())
        migrated = True
        logger.info(f"Migrated legacy layout ({len(legacy.positions)} positions)")

    if columns is not None:
        scoped = await source.load_column_layout(columns)
        if scoped is not None and await target.load_column_layout(columns) is None:
            await target.store.set(target.column_key(columns), scoped.to_json())
            migrated = True
            logger.info(f"Migrated {columns}-column layout ({len(scoped.positions)} positions)")

    return migrated
