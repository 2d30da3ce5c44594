"""
Pre-game lobby where participants sign up before roles are handed out.
"""

from typing import Hashable, List, Tuple

from .exceptions import InvalidRosterSize
from .player import Player
from .roles import MAX_PLAYERS, MIN_PLAYERS


class Lobby:
    """Collects sign-ups (join/leave) in signup order until it is closed."""

    def __init__(self, max_players: int = MAX_PLAYERS):
        self.max_players = max_players
        self._entries: List[Tuple[Hashable, str]] = []
        self._open = True

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def roster(self) -> List[Tuple[Hashable, str]]:
        """(player_id, display_name) pairs in signup order."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, player_id: Hashable) -> bool:
        return any(entry_id == player_id for entry_id, _ in self._entries)

    def join(self, player_id: Hashable, display_name: str) -> bool:
        """
        Add a participant.
        Returns False if the lobby is closed or full, or they already joined.
        """
        if not self._open or player_id in self or len(self._entries) >= self.max_players:
            return False
        self._entries.append((player_id, display_name))
        return True

    def leave(self, player_id: Hashable) -> bool:
        """Remove a participant. Returns False if they were not signed up."""
        if not self._open or player_id not in self:
            return False
        self._entries = [entry for entry in self._entries if entry[0] != player_id]
        return True

    def close(self) -> None:
        """Stop accepting joins and leaves."""
        self._open = False

    def finalize(self) -> List[Player]:
        """
        Close the lobby and turn the roster into players.

        Raises:
            InvalidRosterSize: If fewer than MIN_PLAYERS or more than MAX_PLAYERS signed up
        """
        self.close()
        count = len(self._entries)
        if count < MIN_PLAYERS or count > MAX_PLAYERS:
            raise InvalidRosterSize(count, MIN_PLAYERS, MAX_PLAYERS)
        return [Player(player_id=player_id, display_name=name) for player_id, name in self._entries]
