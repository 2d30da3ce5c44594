"""
Role definitions and the role distribution policy for the Mafia game.
"""

from enum import Enum
from typing import List
from dataclasses import dataclass

MIN_PLAYERS = 5
MAX_PLAYERS = 10


class Team(Enum):
    """Player faction."""
    TOWN = "town"
    MAFIA = "mafia"


class RoleType(Enum):
    """Player role types."""
    TOWNSPERSON = "townsperson"
    MAFIA = "mafia"
    DETECTIVE = "detective"
    DOCTOR = "doctor"


@dataclass(frozen=True)
class Role:
    """Represents a player's role in the game."""
    role_type: RoleType
    team: Team
    
    def __str__(self) -> str:
        return f"{self.role_type.value} (Team: {self.team.value})"
    
    @property
    def is_mafia(self) -> bool:
        """Check if role is part of the mafia."""
        return self.team == Team.MAFIA
    
    @property
    def is_town(self) -> bool:
        """Check if role is part of the town."""
        return self.team == Team.TOWN


def create_role(role_type: RoleType) -> Role:
    """Create a role with appropriate team assignment."""
    team = Team.MAFIA if role_type == RoleType.MAFIA else Team.TOWN
    return Role(role_type=role_type, team=team)


def get_mafia_count(player_count: int) -> int:
    """One mafia per four players, never fewer than one."""
    return max(1, player_count // 4)


def get_role_distribution(player_count: int) -> List[RoleType]:
    """
    Get the role list for a game of the given size, in assignment order.
    
    The list lines up with a shuffled player order: townspeople first, then
    the Doctor (8+ players), then the Detective (6+ players), and the mafia last.
    """
    mafia_count = get_mafia_count(player_count)
    town_count = player_count - mafia_count
    
    specials = []
    if player_count >= 8:
        specials.append(RoleType.DOCTOR)
    if player_count >= 6:
        specials.append(RoleType.DETECTIVE)
    
    townspeople = [RoleType.TOWNSPERSON] * (town_count - len(specials))
    return townspeople + specials + [RoleType.MAFIA] * mafia_count
