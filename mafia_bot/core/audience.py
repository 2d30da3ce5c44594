"""
Message audiences: who an announcement or permission change is meant for.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Hashable, Iterable, Optional, Tuple

from .player import Player


class AudienceKind(Enum):
    EVERYONE = "everyone"
    GROUP = "group"
    DIRECT = "direct"
    ARENA = "arena"


@dataclass(frozen=True)
class Audience:
    """Everyone, a group, a single player (private message) or the members of an arena."""
    kind: AudienceKind
    members: Tuple[Player, ...] = ()
    arena: Optional[Hashable] = None

    @classmethod
    def everyone(cls, players: Iterable[Player]) -> 'Audience':
        return cls(AudienceKind.EVERYONE, tuple(players))

    @classmethod
    def group(cls, players: Iterable[Player]) -> 'Audience':
        return cls(AudienceKind.GROUP, tuple(players))

    @classmethod
    def direct(cls, player: Player) -> 'Audience':
        return cls(AudienceKind.DIRECT, (player,))

    @classmethod
    def in_arena(cls, arena: Hashable, players: Iterable[Player]) -> 'Audience':
        return cls(AudienceKind.ARENA, tuple(players), arena)

    @property
    def member_ids(self) -> Tuple[Hashable, ...]:
        return tuple(p.player_id for p in self.members)
