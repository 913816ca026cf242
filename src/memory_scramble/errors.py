"""Copyright (c) 2021-25 MIT 6.102/6.031 course staff, all rights reserved.
Redistribution of original or derived work requires permission of course staff.
"""


"""
Errors raised by the Memory Scramble board.

Every failed board operation raises a subclass of BoardError and leaves the
board exactly as it was before the call. The concrete errors also derive from
ValueError or IndexError so callers can keep catching the builtin types.
"""


class BoardError(Exception):
    """Base class for all board errors."""


class FormatError(BoardError, ValueError):
    """A board description could not be read or does not follow the grammar."""


class OutOfBounds(BoardError, IndexError):
    """A row or column lies outside the board."""

    def __init__(self, row: int, column: int, rows: int, columns: int):
        super().__init__(f'Position ({row}, {column}) is out of bounds for a {rows}x{columns} board')
        self.row = row
        self.column = column


class UnknownPlayer(BoardError, ValueError):
    def __init__(self, player_id: str):
        super().__init__(f'Unknown player {player_id!r}')
        self.player_id = player_id


class DuplicatePlayer(BoardError, ValueError):
    def __init__(self, player_id: str):
        super().__init__(f'Player {player_id!r} is already registered')
        self.player_id = player_id


class AlreadyFaceUp(BoardError, ValueError):
    def __init__(self, row: int, column: int, controller: str):
        super().__init__(f'Card at ({row}, {column}) is already face up, controlled by {controller!r}')
        self.row = row
        self.column = column
        self.controller = controller


class AlreadyFaceDown(BoardError, ValueError):
    def __init__(self, row: int, column: int):
        super().__init__(f'Card at ({row}, {column}) is already face down')
        self.row = row
        self.column = column


class NoPicture(BoardError, ValueError):
    def __init__(self, row: int, column: int):
        super().__init__(f'No card at position ({row}, {column})')
        self.row = row
        self.column = column


class NotController(BoardError, ValueError):
    """Raised under the controller-only flip-down policy."""

    def __init__(self, row: int, column: int, player_id, controller: str):
        super().__init__(
            f'Player {player_id!r} cannot flip down ({row}, {column}), it is controlled by {controller!r}'
        )
        self.row = row
        self.column = column
        self.player_id = player_id
        self.controller = controller
