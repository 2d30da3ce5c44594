"""
Player class representing a game participant.
"""

from dataclasses import dataclass, field
from typing import Hashable, List, Optional, Dict, Any
from enum import Enum

from .roles import Role, RoleType
from .exceptions import GameInvariantError


class PlayerStatus(Enum):
    """Player status in the game."""
    ALIVE = "alive"
    DEAD = "dead"


@dataclass(eq=False)
class Player:
    """
    Represents a player in the game.

    Players compare and hash by ``player_id`` only, so two objects describing
    the same participant are interchangeable as dictionary keys.
    """
    player_id: Hashable
    display_name: str
    role: Optional[Role] = None
    status: PlayerStatus = PlayerStatus.ALIVE

    # Game history
    votes_cast: Dict[int, Hashable] = field(default_factory=dict)  # {round_number: candidate_id}

    # Private information (role-specific)
    known_mafia: List[Hashable] = field(default_factory=list)  # For mafia players
    detective_checks: Dict[int, Dict[str, Any]] = field(default_factory=dict)  # {round_number: {"target": id, "result": "Mafia"/"Town"}}
    doctor_protections: Dict[int, Hashable] = field(default_factory=dict)  # {round_number: protected_id}

    def __str__(self) -> str:
        if self.role is None:
            return self.display_name
        return f"{self.display_name} ({self.role.role_type.value})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Player):
            return NotImplemented
        return self.player_id == other.player_id

    def __hash__(self) -> int:
        return hash(self.player_id)

    @property
    def is_alive(self) -> bool:
        """Check if player is alive."""
        return self.status == PlayerStatus.ALIVE

    @property
    def is_mafia(self) -> bool:
        """Check if player is on the mafia team."""
        return self.role is not None and self.role.is_mafia

    @property
    def is_town(self) -> bool:
        """Check if player is on the town team."""
        return self.role is not None and self.role.is_town

    @property
    def role_type(self) -> Optional[RoleType]:
        return self.role.role_type if self.role else None

    def assign_role(self, role: Role) -> None:
        """Give the player their role. Roles never change once assigned."""
        if self.role is not None:
            raise GameInvariantError(f"{self.display_name} already has a role")
        self.role = role

    def eliminate(self) -> bool:
        """
        Mark player as dead.
        Returns False if the player was already dead (nothing changes).
        """
        if not self.is_alive:
            return False
        self.status = PlayerStatus.DEAD
        return True

    def vote(self, candidate_id: Hashable, round_number: int) -> None:
        """Record a vote."""
        self.votes_cast[round_number] = candidate_id

    def add_detective_check(self, round_number: int, target: Hashable, result: str) -> None:
        """Record a Detective check result."""
        self.detective_checks[round_number] = {"target": target, "result": result}

    def add_doctor_protection(self, round_number: int, target: Hashable) -> None:
        """Record a Doctor's protection choice."""
        self.doctor_protections[round_number] = target
