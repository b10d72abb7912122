"""Grid constraints - bounds, collisions, drag snapping and swaps."""

from gridboard.constraints.collision import Violation, collides, find_violations, in_bounds
from gridboard.constraints.snapping import exceeds_drag_threshold, resolve_drag_position, snap_steps
from gridboard.constraints.swap import SwapResult, resolve_swap, resolve_swap_by_id

__all__ = [
    # Collision
    "Violation",
    "collides",
    "find_violations",
    "in_bounds",
    # Snapping
    "exceeds_drag_threshold",
    "resolve_drag_position",
    "snap_steps",
    # Swap
    "SwapResult",
    "resolve_swap",
    "resolve_swap_by_id",
]
