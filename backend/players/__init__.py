"""
Player implementations.

Players are input sources: they read the engine's snapshots and emit
direction commands, standing in for a keyboard when running headless.
"""

from .base import Player
from .random_player import RandomPlayer
from .scripted_player import ScriptedPlayer, parse_moves

__all__ = [
    'Player',
    'RandomPlayer',
    'ScriptedPlayer',
    'parse_moves',
]
