"""
Snake movement and growth.

Every segment follows its predecessor: after a move, segment i sits where
the head (or segment i - 1) was one tick earlier.
"""

from typing import Optional

from domain.constants import Direction, FoodType
from domain.grid import Position
from domain.snake import BodySegment, Snake


def next_head(head: Position, direction: Direction) -> Position:
    dx, dy = direction.offset
    return head.moved(dx, dy)


def advance(
    snake: Snake,
    direction: Optional[Direction],
    grew: bool = False,
    growth_type: Optional[FoodType] = None,
) -> Snake:
    """
    Move the snake one cell in direction and return the moved snake.

    A growth move keeps the tail cell and appends a segment tagged with
    growth_type there. Without a direction the snake stays where it is.
    """
    if direction is None:
        return snake
    if grew and growth_type is None:
        raise ValueError("A growth move needs the type of the food eaten.")

    new_head = next_head(snake.head, direction)

    if grew:
        positions = (new_head,) + snake.positions
        tags = [segment.type for segment in snake.body] + [growth_type]
    else:
        positions = (new_head,) + snake.positions[:-1]
        tags = [segment.type for segment in snake.body]

    body = tuple(
        BodySegment(type=tag, position=positions[i + 1])
        for i, tag in enumerate(tags)
    )

    return Snake(head=new_head, body=body, positions=positions, direction=direction)
