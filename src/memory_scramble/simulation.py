"""Copyright (c) 2021-25 MIT 6.102/6.031 course staff, all rights reserved.
Redistribution of original or derived work requires permission of course staff.
"""

import argparse
import asyncio
import logging
import random
import sys
from dataclasses import dataclass
from typing import List, Optional, Sequence

from . import commands
from .board import Board, FlipDownPolicy
from .errors import BoardError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationConfig:
    """Settings for one simulated game."""

    filename: str = 'boards/ab.txt'
    players: int = 4
    tries: int = 100
    size: Optional[int] = None  # range of random coordinates; defaults to the board's larger side
    min_delay_ms: float = 0.1
    max_delay_ms: float = 2.0
    seed: Optional[int] = None
    strict_flip_down: bool = False


@dataclass
class PlayerStats:
    player_id: str
    attempts: int = 0
    flips: int = 0
    matches: int = 0
    skipped: int = 0
    failures: int = 0


@dataclass
class SimulationResult:
    board: Board
    stats: List[PlayerStats]

    @property
    def total_flips(self) -> int:
        return sum(s.flips for s in self.stats)

    @property
    def total_matches(self) -> int:
        return sum(s.matches for s in self.stats)


async def simulation_main(config: SimulationConfig = SimulationConfig()) -> SimulationResult:
    """
    Simulate a multi-player Memory Scramble game.

    Each player is an asyncio task making random moves with random delays in
    between, so their flips interleave arbitrarily on the shared board. Failed
    flips are part of normal play; any other exception fails the simulation.

    Args:
        config: simulation settings
    Returns:
        the board after the game and per-player statistics
    Raises:
        FormatError if the board file cannot be read or parsed
    """
    if config.players <= 0 or config.tries < 0:
        raise ValueError('players must be positive and tries non-negative')
    if not 0 <= config.min_delay_ms <= config.max_delay_ms:
        raise ValueError('delays must satisfy 0 <= min_delay_ms <= max_delay_ms')

    policy = FlipDownPolicy.CONTROLLER_ONLY if config.strict_flip_down else FlipDownPolicy.ANY_PLAYER
    board = await Board.parse_from_file(config.filename, policy)
    size = config.size if config.size is not None else max(board.num_rows(), board.num_cols())
    if size <= 0:
        raise ValueError('size must be positive')

    print(f'Starting simulation with {config.players} players, {config.tries} tries each')
    print(f'Board size: {board.num_rows()}x{board.num_cols()}, coordinates drawn from [0, {size})')
    print(f'Delay range: {config.min_delay_ms}ms - {config.max_delay_ms}ms')

    # one generator per player; a seeded run repeats exactly only when delays are zero,
    # otherwise skips depend on how the players happen to interleave
    seeder = random.Random(config.seed)
    player_tasks = [
        player(ii, board, size, config, random.Random(seeder.getrandbits(64)))
        for ii in range(config.players)
    ]
    stats = await asyncio.gather(*player_tasks)
    board.check_rep()

    result = SimulationResult(board, list(stats))
    _print_summary(result)
    return result


async def player(player_number: int, board: Board, size: int,
                 config: SimulationConfig, rng: random.Random) -> PlayerStats:
    """
    Simulate one player looking for matches.

    Each try turns up a random first card, then after a delay a random second
    card, reports whether they match, and turns its own cards back down.
    Coordinates that are off the board, empty, or already face up are skipped.

    Args:
        player_number: used to build the player's id and name
        board: shared game board
        size: random coordinates are drawn from [0, size)
        config: simulation settings
        rng: this player's random number generator
    Returns:
        what this player did during the game
    """
    player_id = f'p{player_number}'
    await commands.register(board, player_id, f'Player {player_number}')
    stats = PlayerStats(player_id)

    for jj in range(config.tries):
        stats.attempts += 1
        try:
            await timeout(random_delay(rng, config))
            row1 = random_int(rng, size)
            col1 = random_int(rng, size)
            if not _can_flip(board, row1, col1):
                stats.skipped += 1
                continue

            await commands.flip_up(board, player_id, row1, col1)
            stats.flips += 1
            first = board.picture_at(row1, col1)
            logger.info('player %s: flipped first at (%d,%d) = %s', player_id, row1, col1, first)

            await timeout(random_delay(rng, config))
            row2 = random_int(rng, size)
            col2 = random_int(rng, size)
            flipped_second = False
            if _can_flip(board, row2, col2):
                await commands.flip_up(board, player_id, row2, col2)
                flipped_second = True
                stats.flips += 1
                second = board.picture_at(row2, col2)
                logger.info('player %s: flipped second at (%d,%d) = %s', player_id, row2, col2, second)
                if first == second:
                    stats.matches += 1
                    logger.info('player %s: MATCH', player_id)
                else:
                    logger.info('player %s: no match', player_id)

            # turn our own cards back down to keep exploring
            if flipped_second and board.controller_at(row2, col2) == player_id:
                await commands.flip_down(board, player_id, row2, col2)
            if board.controller_at(row1, col1) == player_id:
                await commands.flip_down(board, player_id, row1, col1)

        except BoardError as err:
            stats.failures += 1
            logger.debug('player %s: try %d failed: %s', player_id, jj, err)

    return stats


def _can_flip(board: Board, row: int, column: int) -> bool:
    return (row < board.num_rows() and column < board.num_cols()
            and board.picture_at(row, column) is not None
            and not board.is_face_up(row, column))


def _print_summary(result: SimulationResult) -> None:
    print('\n' + '=' * 60)
    print('SIMULATION COMPLETED')
    print('=' * 60)
    for stats in result.stats:
        registered = result.board.get_player(stats.player_id)
        name = registered.get_display_name() if registered is not None else stats.player_id
        print(f'{name} ({stats.player_id}): {stats.flips} flips, {stats.matches} matches, '
              f'{stats.skipped} skipped, {stats.failures} failed')
    print(f'Total flips: {result.total_flips}, total matches: {result.total_matches}')


def random_int(rng: random.Random, max_val: int) -> int:
    """
    Args:
        rng: random number generator to draw from
        max_val: a positive integer which is the upper bound of the generated number
    Returns:
        a random integer >= 0 and < max_val
    """
    return rng.randrange(0, max_val)


def random_delay(rng: random.Random, config: SimulationConfig) -> float:
    return config.min_delay_ms + rng.random() * (config.max_delay_ms - config.min_delay_ms)


async def timeout(milliseconds: float) -> None:
    """
    Args:
        milliseconds: duration to wait
    Returns:
        a coroutine that completes no less than `milliseconds` after timeout() was called
    """
    await asyncio.sleep(milliseconds / 1000.0)


def _setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s  %(name)-25s  %(levelname)-7s  %(message)s',
    )


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    defaults = SimulationConfig()
    ap = argparse.ArgumentParser(
        prog='memory-scramble-sim',
        description='Run randomized players against a Memory Scramble board.',
    )
    ap.add_argument('filename', nargs='?', default=defaults.filename, help='board file to load')
    ap.add_argument('--players', type=int, default=defaults.players)
    ap.add_argument('--tries', type=int, default=defaults.tries)
    ap.add_argument('--size', type=int, default=None,
                    help='draw coordinates from [0, SIZE); defaults to the larger board side')
    ap.add_argument('--min-delay', type=float, default=defaults.min_delay_ms, help='milliseconds')
    ap.add_argument('--max-delay', type=float, default=defaults.max_delay_ms, help='milliseconds')
    ap.add_argument('--seed', type=int, default=None)
    ap.add_argument('--strict-flip-down', action='store_true',
                    help='only the player who turned a card up may turn it down')
    ap.add_argument('-v', '--verbose', action='store_true', help='enable debug logging')
    return ap.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    _setup_logging(args.verbose)
    config = SimulationConfig(
        filename=args.filename,
        players=args.players,
        tries=args.tries,
        size=args.size,
        min_delay_ms=args.min_delay,
        max_delay_ms=args.max_delay,
        seed=args.seed,
        strict_flip_down=args.strict_flip_down,
    )
    try:
        asyncio.run(simulation_main(config))
    except (BoardError, ValueError) as err:
        logger.error('simulation failed: %s', err)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
