"""Copyright (c) 2021-25 MIT 6.102/6.031 course staff, all rights reserved.
Redistribution of original or derived work requires permission of course staff.
"""

import pytest

from memory_scramble.errors import DuplicatePlayer, UnknownPlayer
from memory_scramble.player import PlayerRegistry


class TestPlayerRegistry:
    """Tests for the player registry."""

    def test_register_and_get(self):
        registry = PlayerRegistry()
        player = registry.register('p1', 'Alice')
        assert registry.get('p1') is player
        assert registry.get('p2') is None
        assert 'p1' in registry
        assert 'p2' not in registry
        assert len(registry) == 1

    def test_duplicate(self):
        registry = PlayerRegistry()
        registry.register('p1', 'Alice')
        with pytest.raises(DuplicatePlayer):
            registry.register('p1', 'Bob')
        assert len(registry) == 1

    def test_increment_flips(self):
        registry = PlayerRegistry()
        player = registry.register('p1', 'Alice')
        assert registry.increment_flips('p1') == 1
        assert registry.increment_flips('p1') == 2
        assert player.get_flips() == 2

    def test_increment_unknown(self):
        registry = PlayerRegistry()
        with pytest.raises(UnknownPlayer):
            registry.increment_flips('ghost')

    def test_iteration_order(self):
        registry = PlayerRegistry()
        for player_id in ['c', 'a', 'b']:
            registry.register(player_id, player_id.upper())
        assert [p.player_id for p in registry] == ['c', 'a', 'b']
        assert [p.get_display_name() for p in registry] == ['C', 'A', 'B']

    def test_record_flip_counts_on_player(self):
        registry = PlayerRegistry()
        player = registry.register('p1', 'Alice')
        assert player.record_flip() == 1
        assert registry.increment_flips('p1') == 2
        assert registry.get('p1').get_flips() == 2
