"""
Key bindings for input sources.
"""

from typing import Optional

from domain.constants import Direction

KEY_BINDINGS = {
    "ArrowUp": Direction.UP,
    "ArrowDown": Direction.DOWN,
    "ArrowLeft": Direction.LEFT,
    "ArrowRight": Direction.RIGHT,
    "w": Direction.UP,
    "s": Direction.DOWN,
    "a": Direction.LEFT,
    "d": Direction.RIGHT,
}


def direction_for_key(key: str) -> Optional[Direction]:
    """Map a key name to a direction, None for keys the game does not use."""
    if key in KEY_BINDINGS:
        return KEY_BINDINGS[key]
    return KEY_BINDINGS.get(key.lower()) if len(key) == 1 else None


def parse_direction(name: str) -> Direction:
    """Parse 'up', 'UP', ' Right ' and friends."""
    try:
        return Direction(name.strip().upper())
    except ValueError:
        valid = ", ".join(d.value for d in Direction)
        raise ValueError(f"Unknown direction '{name}'. Expected one of: {valid}") from None
