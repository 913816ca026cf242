"""Copyright (c) 2021-25 MIT 6.102/6.031 course staff, all rights reserved.
Redistribution of original or derived work requires permission of course staff.
"""

import asyncio

import pytest

from memory_scramble.board import Board
from memory_scramble.commands import flip_down, flip_up, look, register
from memory_scramble.errors import AlreadyFaceDown, AlreadyFaceUp, BoardError


"""
Tests for concurrent players sharing one board.
"""


class TestCommands:
    """Tests for the async command functions."""

    @pytest.mark.asyncio
    async def test_flip_up_returns_players_view(self):
        board = Board.parse('1x2\nA\nB\n')
        await register(board, 'p1', 'Alice')
        state = await flip_up(board, 'p1', 0, 1)
        assert state == '1x2\ndown\nmy B\n'
        assert await look(board, 'p2') == '1x2\ndown\nup B\n'

    @pytest.mark.asyncio
    async def test_flip_down_returns_players_view(self):
        board = Board.parse('1x2\nA\nB\n')
        await register(board, 'p1', 'Alice')
        await flip_up(board, 'p1', 0, 0)
        state = await flip_down(board, 'p1', 0, 0)
        assert state == '1x2\ndown\ndown\n'

    @pytest.mark.asyncio
    async def test_errors_propagate(self):
        board = Board.parse('1x1\nA\n')
        with pytest.raises(AlreadyFaceDown):
            await flip_down(board, 'p1', 0, 0)


class TestConcurrentPlayers:
    """Tests for interleaved players."""

    @pytest.mark.asyncio
    async def test_race_for_same_card_has_one_winner(self):
        board = Board.parse('2x2\nA\nB\nB\nA\n')
        players = [f'p{i}' for i in range(5)]
        for player_id in players:
            board.register_player(player_id, player_id)

        async def try_flip(player_id: str, delay: float):
            await asyncio.sleep(delay)
            await flip_up(board, player_id, 1, 1)
            return player_id

        results = await asyncio.gather(
            *(try_flip(p, 0.001 * (i % 2)) for i, p in enumerate(players)),
            return_exceptions=True,
        )
        winners = [r for r in results if not isinstance(r, Exception)]
        losers = [r for r in results if isinstance(r, Exception)]
        assert len(winners) == 1
        assert all(isinstance(err, AlreadyFaceUp) for err in losers)
        assert board.controller_at(1, 1) == winners[0]
        assert sum(board.get_player(p).get_flips() for p in players) == 1
        board.check_rep()

    @pytest.mark.asyncio
    async def test_loser_does_not_wait(self):
        board = Board.parse('1x1\nA\n')
        board.register_player('p1', 'Alice')
        board.register_player('p2', 'Bob')
        await flip_up(board, 'p1', 0, 0)

        # a blocked flip would hang here instead of failing
        with pytest.raises(AlreadyFaceUp):
            await asyncio.wait_for(flip_up(board, 'p2', 0, 0), timeout=1.0)

    @pytest.mark.asyncio
    async def test_interleaved_players_keep_board_consistent(self):
        board = Board.parse('3x3\nA\nB\nC\nA\nB\nC\nA\nB\nC\n')
        failures = []

        async def player(player_id: str, offset: int):
            board.register_player(player_id, player_id)
            for i in range(30):
                row, col = divmod((i + offset) % 9, 3)
                try:
                    await flip_up(board, player_id, row, col)
                    await asyncio.sleep(0)
                    if board.controller_at(row, col) == player_id:
                        await flip_down(board, player_id, row, col)
                except BoardError as err:
                    failures.append(err)
                await asyncio.sleep(0)

        await asyncio.gather(*(player(f'p{i}', i) for i in range(4)))

        board.check_rep()
        assert all(isinstance(err, AlreadyFaceUp) for err in failures)
        for r in range(3):
            for c in range(3):
                assert not board.is_face_up(r, c)
        successes = sum(p.get_flips() for p in board.players())
        assert successes + len(failures) == 4 * 30
