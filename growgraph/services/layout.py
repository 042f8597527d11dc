# growgraph/services/layout.py
import math
from growgraph.models.graph import Position

DEFAULT_RADIUS = 260.0
DEFAULT_MAX_SLOTS = 7


def compute_position(parent: Position, child_index: int, max_slots: int, radius: float) -> Position:
    """
    Places a child on an arc below its parent.

    The arc spans the lower half circle split into `max_slots + 1` steps and is
    centred on straight down, so with 7 slots index 3 lands directly beneath
    the parent. Indices at or past `max_slots` keep stepping around the circle
    and will overlap other children; see `has_free_slot`.
    """
    if child_index < 0:
        raise ValueError("child_index must be >= 0")
    if max_slots <= 0:
        raise ValueError("max_slots must be > 0")

    angle_step = math.pi / (max_slots + 1)
    base_angle = math.pi / 2
    angle = base_angle + (child_index - (max_slots - 1) / 2) * angle_step
    return Position(
        x=parent.x + radius * math.cos(angle),
        y=parent.y + radius * math.sin(angle),
    )


def has_free_slot(child_index: int, max_slots: int) -> bool:
    return 0 <= child_index < max_slots
