"""Copyright (c) 2021-25 MIT 6.102/6.031 course staff, all rights reserved.
Redistribution of original or derived work requires permission of course staff.
"""

from .board import Board, FlipDownPolicy
from .errors import (
    AlreadyFaceDown,
    AlreadyFaceUp,
    BoardError,
    DuplicatePlayer,
    FormatError,
    NoPicture,
    NotController,
    OutOfBounds,
    UnknownPlayer,
)
from .player import Player, PlayerRegistry

__all__ = [
    'Board',
    'FlipDownPolicy',
    'Player',
    'PlayerRegistry',
    'BoardError',
    'FormatError',
    'OutOfBounds',
    'UnknownPlayer',
    'DuplicatePlayer',
    'AlreadyFaceUp',
    'AlreadyFaceDown',
    'NoPicture',
    'NotController',
]
