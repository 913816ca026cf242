"""Copyright (c) 2021-25 MIT 6.102/6.031 course staff, all rights reserved.
Redistribution of original or derived work requires permission of course staff.
"""

from .board import Board
from .player import Player


"""
String-based commands provided by the Memory Scramble game.

These are the calls a driver makes on behalf of a player. Each one runs a
single synchronous board operation, so it never suspends half way through a
flip; errors from the board are propagated unchanged.
"""


async def register(board: Board, player_id: str, display_name: str) -> Player:
    """
    Registers a new player on the board.

    Args:
        board: a Memory Scramble board
        player_id: unique ID for the new player
        display_name: name shown for the player
    Returns:
        the registered player
    Raises:
        DuplicatePlayer if player_id is already registered
    """
    return board.register_player(player_id, display_name)


async def look(board: Board, player_id: str) -> str:
    """
    Looks at the current state of the board.

    Args:
        board: a Memory Scramble board
        player_id: ID of player looking at the board
    Returns:
        the state of the board from the perspective of player_id
    """
    return board.look(player_id)


async def flip_up(board: Board, player_id: str, row: int, column: int) -> str:
    """
    Tries to turn a face-down card face up. Fails immediately, without waiting,
    if another player got there first.

    Args:
        board: a Memory Scramble board
        player_id: ID of player making the flip
        row: row number of card to flip
        column: column number of card to flip
    Returns:
        the state of the board after the flip from the perspective of player_id
    Raises:
        BoardError if the flip is not allowed
    """
    board.flip_up(player_id, row, column)
    return board.look(player_id)


async def flip_down(board: Board, player_id: str, row: int, column: int) -> str:
    """
    Tries to turn a face-up card back face down.

    Args:
        board: a Memory Scramble board
        player_id: ID of player making the flip
        row: row number of card to flip
        column: column number of card to flip
    Returns:
        the state of the board after the flip from the perspective of player_id
    Raises:
        BoardError if the flip is not allowed
    """
    board.flip_down(row, column, player_id)
    return board.look(player_id)
