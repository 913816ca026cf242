"""Copyright (c) 2021-25 MIT 6.102/6.031 course staff, all rights reserved.
Redistribution of original or derived work requires permission of course staff.
"""

from typing import Dict, Iterator, Optional

from .errors import DuplicatePlayer, UnknownPlayer


class Player:
    """
    A player registered against a Memory Scramble board.

    Abstraction function:
        AF(player_id, display_name, flips) = the player known to the board as
            player_id, shown as display_name, who has turned `flips` cards face up
    Representation invariant:
        - player_id and display_name are strings
        - _flips >= 0
    Safety from rep exposure:
        - all fields are immutable values except _flips, which only record_flip
          changes, called by PlayerRegistry when the board credits a flip
    """

    def __init__(self, player_id: str, display_name: str):
        self._player_id = player_id
        self._display_name = display_name
        self._flips = 0

    @property
    def player_id(self) -> str:
        return self._player_id

    def get_display_name(self) -> str:
        return self._display_name

    def get_flips(self) -> int:
        """
        Returns:
            number of cards this player has successfully turned face up
        """
        return self._flips

    def record_flip(self) -> int:
        """Count one more successful flip; called by PlayerRegistry."""
        self._flips += 1
        return self._flips

    def __repr__(self) -> str:
        return f'Player({self._player_id!r}, {self._display_name!r}, flips={self._flips})'


class PlayerRegistry:
    """
    Maps player ids to their mutable Player records.

    Players are kept in registration order and are never removed. The registry
    does no locking of its own: the Board that owns it only mutates it from
    inside its own synchronous operations.
    """

    def __init__(self) -> None:
        self._players: Dict[str, Player] = {}

    def register(self, player_id: str, display_name: str) -> Player:
        """
        Add a new player.

        Args:
            player_id: unique key for the player
            display_name: human-readable label
        Returns:
            the new Player
        Raises:
            DuplicatePlayer if player_id is already registered
        """
        if player_id in self._players:
            raise DuplicatePlayer(player_id)
        player = Player(player_id, display_name)
        self._players[player_id] = player
        return player

    def get(self, player_id: str) -> Optional[Player]:
        return self._players.get(player_id)

    def increment_flips(self, player_id: str) -> int:
        """
        Credit one successful flip to a player.

        Returns:
            the player's new flip count
        Raises:
            UnknownPlayer if player_id is not registered
        """
        player = self._players.get(player_id)
        if player is None:
            raise UnknownPlayer(player_id)
        return player.record_flip()

    def __contains__(self, player_id: object) -> bool:
        return player_id in self._players

    def __len__(self) -> int:
        return len(self._players)

    def __iter__(self) -> Iterator[Player]:
        return iter(list(self._players.values()))
