"""
One-shot random role assignment.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .exceptions import InvalidRosterSize
from .player import Player
from .roles import (
    MAX_PLAYERS, MIN_PLAYERS, RoleType, create_role, get_role_distribution,
)

logger = logging.getLogger(__name__)


@dataclass
class RolePartition:
    """Who got which role. ``townspeople`` holds every non-mafia player."""
    mafia: List[Player] = field(default_factory=list)
    townspeople: List[Player] = field(default_factory=list)
    detective: Optional[Player] = None
    doctor: Optional[Player] = None


def validate_roster_size(player_count: int) -> None:
    """Raise InvalidRosterSize unless MIN_PLAYERS <= player_count <= MAX_PLAYERS."""
    if player_count < MIN_PLAYERS or player_count > MAX_PLAYERS:
        raise InvalidRosterSize(player_count, MIN_PLAYERS, MAX_PLAYERS)


def assign_roles(players: Sequence[Player], rng: Optional[random.Random] = None) -> RolePartition:
    """
    Shuffle the players and hand out roles.

    The last ``max(1, n // 4)`` players of the shuffled order become Mafia.
    Of the remaining players, the last one is the Detective (6+ players) and
    the second-to-last is the Doctor (8+ players); everyone else is a
    Townsperson. ``players`` itself is not reordered.

    Args:
        players: Players in signup order, none of them holding a role yet
        rng: Random source; pass a seeded ``random.Random`` for reproducible games

    Returns:
        RolePartition describing the assignment
    """
    validate_roster_size(len(players))
    rng = rng or random.Random()

    shuffled = list(players)
    rng.shuffle(shuffled)

    partition = RolePartition()
    for player, role_type in zip(shuffled, get_role_distribution(len(shuffled))):
        player.assign_role(create_role(role_type))
        if role_type == RoleType.MAFIA:
            partition.mafia.append(player)
            continue
        partition.townspeople.append(player)
        if role_type == RoleType.DETECTIVE:
            partition.detective = player
        elif role_type == RoleType.DOCTOR:
            partition.doctor = player

    logger.debug(
        "Assigned roles: %d mafia, detective=%s, doctor=%s",
        len(partition.mafia),
        partition.detective.player_id if partition.detective else None,
        partition.doctor.player_id if partition.doctor else None,
    )
    return partition
