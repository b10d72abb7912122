"""Bounds and overlap predicates for grid positions."""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from gridboard.models.schema import GridItem, GridPosition


@dataclass
class Violation:
    """A broken layout invariant."""

    rule: str  # "bounds" or "overlap"
    message: str
    item_ids: list[str] = field(default_factory=list)


def in_bounds(position: GridPosition, columns: int) -> bool:
    """Check that the position's column range lies within [1, columns].

    Rows start at 1 and grow downwards without limit.
    """
    return position.column >= 1 and position.column_end <= columns and position.row >= 1


def collides(
    candidate: GridPosition,
    exclude_id: Optional[str],
    items: Iterable[GridItem],
) -> bool:
    """Check whether a candidate position overlaps any other item.

    Args:
        candidate: Position to test.
        exclude_id: Id skipped during the scan (the item being moved).
        items: Items currently on the grid.

    Returns:
        True if the candidate shares a cell with any item other than
        ``exclude_id``.
    """
    return any(
        item.id != exclude_id and candidate.overlaps(item.position)
        for item in items
    )


def find_violations(items: list[GridItem], columns: int) -> list[Violation]:
    """List every bounds and overlap violation in a layout.

    Args:
        items: Layout to check.
        columns: Grid width in columns.

    Returns:
        Violations, bounds first, then overlapping pairs in item order.
    """
    violations = []

    for item in items:
        if not in_bounds(item.position, columns):
            violations.append(
                Violation(
                    rule="bounds",
                    message=(
                        f"Item {item.id} at column {item.position.column}-"
                        f"{item.position.column_end}, row {item.position.row} "
                        f"is outside columns 1-{columns} or above row 1"
                    ),
                    item_ids=[item.id],
                )
            )

    for i, first in enumerate(items):
        for second in items[i + 1:]:
            if first.position.overlaps(second.position):
                violations.append(
                    Violation(
                        rule="overlap",
                        message=f"Items {first.id} and {second.id} overlap",
                        item_ids=[first.id, second.id],
                    )
                )

    return violations
