"""Copyright (c) 2021-25 MIT 6.102/6.031 course staff, all rights reserved.
Redistribution of original or derived work requires permission of course staff.
"""

import enum
import logging
import re
from typing import List, Optional, Sequence

import aiofiles

from .errors import (
    AlreadyFaceDown,
    AlreadyFaceUp,
    FormatError,
    NoPicture,
    NotController,
    OutOfBounds,
    UnknownPlayer,
)
from .player import Player, PlayerRegistry

logger = logging.getLogger(__name__)

# ASCII digits only, no leading zeros, so the header dumps back byte for byte
_HEADER = re.compile(r'^([1-9][0-9]*)x([1-9][0-9]*)$')
_WHITESPACE = re.compile(r'\s')


class FlipDownPolicy(enum.Enum):
    """Who may turn a face-up card back down."""

    ANY_PLAYER = 'any'
    CONTROLLER_ONLY = 'controller'


class Board:
    """
    A mutable Memory Scramble board shared by concurrent players.

    Every operation is a plain synchronous method that never suspends, so when
    players are asyncio tasks on one event loop each call runs to completion
    before any other player can observe the board. Conflicting flips are
    decided by whichever call the scheduler runs first; the other call fails
    with an error instead of waiting.

    Representation:
    - _rows, _columns: board dimensions
    - _pictures: 2D list of picture strings, None where the card has been removed
    - _controllers: 2D list of player ids, None where the card is face down
    - _players: registry of the players allowed to flip cards
    - _flip_down_policy: whether any caller or only the controller may flip down

    Abstraction function:
    AF(self) = a _rows x _columns grid where the cell (r, c)
      - is an empty space if _pictures[r][c] is None
      - otherwise holds the card _pictures[r][c], face up and credited to
        player _controllers[r][c] if that is not None, face down otherwise

    Representation invariant:
    - _rows > 0 and _columns > 0
    - _pictures and _controllers are both _rows x _columns
    - every picture is None or a non-empty string without whitespace
    - if _pictures[r][c] is None then _controllers[r][c] is None
    - every non-None controller is a registered player

    Safety from rep exposure:
    - all fields are private and the grids are copied on construction
    - queries return strings, booleans and ints; cells are never handed out
    - clients only read Player handles; flip counts are credited only by flip_up
    """

    def __init__(self, rows: int, columns: int, pictures: Sequence[Sequence[Optional[str]]],
                 flip_down_policy: FlipDownPolicy = FlipDownPolicy.ANY_PLAYER):
        """
        Create a new board with every card face down and no players.

        Args:
            rows: number of rows (must be > 0)
            columns: number of columns (must be > 0)
            pictures: rows lists of columns pictures each; None marks an empty space
            flip_down_policy: who may flip a face-up card back down
        Raises:
            FormatError if dimensions are invalid or a picture is not a legal card
        """
        if rows <= 0 or columns <= 0:
            raise FormatError(f'Board dimensions must be positive, got {rows}x{columns}')
        if len(pictures) != rows:
            raise FormatError(f'Expected {rows} rows, got {len(pictures)}')
        for r, row in enumerate(pictures):
            if len(row) != columns:
                raise FormatError(f'Row {r} has {len(row)} columns, expected {columns}')
            for c, picture in enumerate(row):
                if picture is not None and not _is_card(picture):
                    raise FormatError(f'Invalid card at ({r}, {c}): {picture!r}')

        self._rows = rows
        self._columns = columns
        self._pictures: List[List[Optional[str]]] = [list(row) for row in pictures]
        self._controllers: List[List[Optional[str]]] = [[None] * columns for _ in range(rows)]
        self._players = PlayerRegistry()
        self._flip_down_policy = flip_down_policy
        self.check_rep()

    @staticmethod
    def parse(text: str, flip_down_policy: FlipDownPolicy = FlipDownPolicy.ANY_PLAYER) -> 'Board':
        """
        Make a new board from a textual board description.

        The grammar is a `ROWSxCOLUMNS` header line followed by exactly
        ROWS*COLUMNS card lines in row-major order. Lines may end in \\n or
        \\r\\n and blank lines are allowed only at the end of the text.

        Args:
            text: the board description
            flip_down_policy: passed on to the new board
        Returns:
            a new board with all cards face down
        Raises:
            FormatError if text does not follow the grammar
        """
        lines = [line[:-1] if line.endswith('\r') else line for line in text.split('\n')]
        while lines and lines[-1] == '':
            lines.pop()
        if not lines:
            raise FormatError('Board description is empty')

        match = _HEADER.match(lines[0])
        if not match:
            raise FormatError(f'Invalid board dimensions format: {lines[0]!r}')
        rows = int(match.group(1))
        columns = int(match.group(2))
        if rows <= 0 or columns <= 0:
            raise FormatError(f'Board dimensions must be positive, got {lines[0]!r}')

        cards = lines[1:]
        if len(cards) != rows * columns:
            raise FormatError(f'Expected {rows * columns} cards, got {len(cards)}')
        for i, card in enumerate(cards):
            if not _is_card(card):
                raise FormatError(f'Invalid card at line {i + 2}: {card!r}')

        grid = [cards[r * columns:(r + 1) * columns] for r in range(rows)]
        logger.debug('parsed %dx%d board with %d distinct pictures', rows, columns, len(set(cards)))
        return Board(rows, columns, grid, flip_down_policy)

    @staticmethod
    async def parse_from_file(filename: str,
                              flip_down_policy: FlipDownPolicy = FlipDownPolicy.ANY_PLAYER) -> 'Board':
        """
        Make a new board by parsing a file.

        Args:
            filename: path to a board file
            flip_down_policy: passed on to the new board
        Returns:
            a new board with the size and cards from the file
        Raises:
            FormatError if the file cannot be read or is not a valid board
        """
        try:
            async with aiofiles.open(filename, 'r', encoding='utf-8', newline='') as f:
                content = await f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise FormatError(f'Error reading board file {filename}: {e}') from e
        logger.debug('loaded board file %s', filename)
        return Board.parse(content, flip_down_policy)

    def check_rep(self) -> None:
        assert self._rows > 0 and self._columns > 0
        assert len(self._pictures) == self._rows
        assert len(self._controllers) == self._rows
        for r in range(self._rows):
            assert len(self._pictures[r]) == self._columns
            assert len(self._controllers[r]) == self._columns
            for c in range(self._columns):
                picture = self._pictures[r][c]
                controller = self._controllers[r][c]
                assert picture is None or _is_card(picture), f'Bad card at ({r},{c})'
                if picture is None:
                    assert controller is None, f'Removed card at ({r},{c}) cannot be face up'
                if controller is not None:
                    assert controller in self._players, f'Card at ({r},{c}) controlled by unknown player'

    def num_rows(self) -> int:
        return self._rows

    def num_cols(self) -> int:
        return self._columns

    def picture_at(self, row: int, column: int) -> Optional[str]:
        """
        Returns:
            the picture on the card at (row, column), or None if that space is empty
        Raises:
            OutOfBounds if (row, column) is not on the board
        """
        self._check_bounds(row, column)
        return self._pictures[row][column]

    def is_face_up(self, row: int, column: int) -> bool:
        self._check_bounds(row, column)
        return self._controllers[row][column] is not None

    def controller_at(self, row: int, column: int) -> Optional[str]:
        """
        Returns:
            id of the player who turned the card at (row, column) face up,
            or None if it is face down
        Raises:
            OutOfBounds if (row, column) is not on the board
        """
        self._check_bounds(row, column)
        return self._controllers[row][column]

    def pictures_dump(self) -> str:
        """
        Serialize the card layout in the board file grammar, ignoring which
        cards are face up.

        Raises:
            NoPicture if a card has been removed, since the grammar has no way
            to describe an empty space
        """
        result = [f'{self._rows}x{self._columns}']
        for r in range(self._rows):
            for c in range(self._columns):
                picture = self._pictures[r][c]
                if picture is None:
                    raise NoPicture(r, c)
                result.append(picture)
        return '\n'.join(result) + '\n'

    def look(self, player_id: Optional[str]) -> str:
        """
        Render the board as player_id sees it: a `ROWSxCOLUMNS` line, then one
        line per cell in row-major order reading `none`, `down`, `my CARD` for
        cards player_id turned up, or `up CARD` for cards other players turned up.
        """
        result = [f'{self._rows}x{self._columns}']
        for r in range(self._rows):
            for c in range(self._columns):
                picture = self._pictures[r][c]
                controller = self._controllers[r][c]
                if picture is None:
                    result.append('none')
                elif controller is None:
                    result.append('down')
                elif controller == player_id:
                    result.append(f'my {picture}')
                else:
                    result.append(f'up {picture}')
        return '\n'.join(result) + '\n'

    def __str__(self) -> str:
        return self.look(None)

    def register_player(self, player_id: str, display_name: str) -> Player:
        """
        Register a new player who may then flip cards.

        Raises:
            DuplicatePlayer if player_id is already registered
        """
        return self._players.register(player_id, display_name)

    def get_player(self, player_id: str) -> Optional[Player]:
        return self._players.get(player_id)

    def players(self) -> List[Player]:
        """Registered players in registration order."""
        return list(self._players)

    def flip_up(self, player_id: str, row: int, column: int) -> str:
        """
        Turn a face-down card face up on behalf of player_id.

        Args:
            player_id: a registered player, who becomes the card's controller
            row: row of the card
            column: column of the card
        Returns:
            the picture on the card
        Raises:
            UnknownPlayer if player_id is not registered
            OutOfBounds if (row, column) is not on the board
            NoPicture if the space is empty
            AlreadyFaceUp if the card is face up, whoever controls it
        """
        if player_id not in self._players:
            raise UnknownPlayer(player_id)
        self._check_bounds(row, column)
        picture = self._pictures[row][column]
        if picture is None:
            raise NoPicture(row, column)
        controller = self._controllers[row][column]
        if controller is not None:
            raise AlreadyFaceUp(row, column, controller)

        self._controllers[row][column] = player_id
        self._players.increment_flips(player_id)
        self.check_rep()
        return picture

    def flip_down(self, row: int, column: int, player_id: Optional[str] = None) -> None:
        """
        Turn a face-up card face down and clear its controller.

        Under FlipDownPolicy.ANY_PLAYER player_id is ignored. Under
        FlipDownPolicy.CONTROLLER_ONLY it must be the card's controller.

        Raises:
            OutOfBounds if (row, column) is not on the board
            AlreadyFaceDown if the card is not face up
            NotController if the policy requires the controller and player_id is not it
        """
        self._check_bounds(row, column)
        controller = self._controllers[row][column]
        if controller is None:
            raise AlreadyFaceDown(row, column)
        if self._flip_down_policy is FlipDownPolicy.CONTROLLER_ONLY and player_id != controller:
            raise NotController(row, column, player_id, controller)

        self._controllers[row][column] = None
        self.check_rep()

    def _check_bounds(self, row: int, column: int) -> None:
        if not (0 <= row < self._rows and 0 <= column < self._columns):
            raise OutOfBounds(row, column, self._rows, self._columns)


def _is_card(picture: object) -> bool:
    return isinstance(picture, str) and bool(picture) and not _WHITESPACE.search(picture)
