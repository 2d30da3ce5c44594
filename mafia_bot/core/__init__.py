"""
Core game components: roles, players, the game session, role assignment and the judge.
"""

from .exceptions import InvalidRosterSize, GameInvariantError
from .roles import (
    Role, RoleType, Team, create_role, get_mafia_count, get_role_distribution,
    MIN_PLAYERS, MAX_PLAYERS,
)
from .player import Player, PlayerStatus
from .audience import Audience, AudienceKind
from .role_assignor import RolePartition, assign_roles, validate_roster_size
from .lobby import Lobby
from .game_engine import GameSession, GamePhase, GameResult
from .judge import Judge

__all__ = [
    'InvalidRosterSize',
    'GameInvariantError',
    'Role',
    'RoleType',
    'Team',
    'create_role',
    'get_mafia_count',
    'get_role_distribution',
    'MIN_PLAYERS',
    'MAX_PLAYERS',
    'Player',
    'PlayerStatus',
    'Audience',
    'AudienceKind',
    'RolePartition',
    'assign_roles',
    'validate_roster_size',
    'Lobby',
    'GameSession',
    'GamePhase',
    'GameResult',
    'Judge',
]
