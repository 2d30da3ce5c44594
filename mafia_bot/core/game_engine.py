"""
Game session: the player registry, round counter and win-condition check.
"""

import logging
import random
from enum import Enum
from typing import Hashable, List, Optional, Dict, Any, Sequence, TYPE_CHECKING
from dataclasses import dataclass, field

from .exceptions import GameInvariantError
from .player import Player
from .roles import RoleType
from .role_assignor import assign_roles, validate_roster_size

if TYPE_CHECKING:
    from ..recording.event_emitter import EventEmitter

logger = logging.getLogger(__name__)


class GamePhase(Enum):
    """Round state, informational only; the round engine drives transitions."""
    SETUP = "setup"
    NIGHT_MAFIA = "night_mafia"
    NIGHT_ROLES = "night_roles"  # Doctor and Detective, concurrently
    NIGHT_RESOLUTION = "night_resolution"
    DAY_DISCUSSION = "day_discussion"
    DAY_VOTE = "day_vote"
    DAY_RESOLUTION = "day_resolution"
    ROUND_COMPLETE = "round_complete"
    GAME_OVER = "game_over"


@dataclass
class GameResult:
    """Final outcome of a game."""
    mafia_won: bool
    winners: List[Player]
    round_number: int = 0
    reason: str = "win_condition"  # or "max_rounds"

    @property
    def winning_team(self) -> str:
        return "mafia" if self.mafia_won else "town"


@dataclass
class GameSession:
    """Complete state of one game. Players are kept in signup order."""
    players: List[Player] = field(default_factory=list)
    round_number: int = 1
    phase: GamePhase = GamePhase.SETUP

    # Round history
    night_kills: Dict[int, Optional[Hashable]] = field(default_factory=dict)  # {round: killed_id}
    day_votes: Dict[int, Dict[Hashable, Hashable]] = field(default_factory=dict)  # {round: {voter: candidate}}
    eliminations: List[Dict[str, Any]] = field(default_factory=list)
    action_log: List[Dict[str, Any]] = field(default_factory=list)

    result: Optional[GameResult] = None
    strict_invariants: bool = False

    # Event emitter for run recording (optional)
    event_emitter: Optional['EventEmitter'] = None

    @classmethod
    def from_roster(cls, players: Sequence[Player], rng: Optional[random.Random] = None,
                    **kwargs: Any) -> 'GameSession':
        """
        Create a session from a finalized roster and assign roles.
        Raises InvalidRosterSize before anything is created if the roster is out of range.
        """
        validate_roster_size(len(players))
        session = cls(players=list(players), **kwargs)
        assign_roles(session.players, rng)
        session._provide_mafia_knowledge()
        session._log_action("game_start", {"players": len(session.players)})
        return session

    def _provide_mafia_knowledge(self) -> None:
        """Provide all mafia identities to mafia team players."""
        mafia_ids = [p.player_id for p in self.players if p.is_mafia]
        for player in self.players:
            if player.is_mafia:
                player.known_mafia = mafia_ids.copy()

    def get_player(self, player_id: Hashable) -> Optional[Player]:
        """Get player by id."""
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    def get_alive_players(self) -> List[Player]:
        """Get all alive players."""
        return [p for p in self.players if p.is_alive]

    def get_dead_players(self) -> List[Player]:
        return [p for p in self.players if not p.is_alive]

    def get_mafia_players(self) -> List[Player]:
        """Get all alive mafia players."""
        return [p for p in self.get_alive_players() if p.is_mafia]

    def get_town_players(self) -> List[Player]:
        """Get all alive non-mafia players."""
        return [p for p in self.get_alive_players() if not p.is_mafia]

    def get_role_holder(self, role_type: RoleType) -> Optional[Player]:
        """Get the player holding a unique role (Detective/Doctor), alive or dead."""
        return next((p for p in self.players if p.role_type == role_type), None)

    def eliminate_player(self, player_id: Hashable, reason: str = "eliminated") -> bool:
        """
        Kill a player. Returns True if someone died.

        Killing an unknown or already-dead player changes nothing; in strict mode
        it raises GameInvariantError instead.
        """
        player = self.get_player(player_id)
        if player is None:
            self._invariant_violation(f"Cannot eliminate unknown player {player_id!r}")
            return False
        if not player.eliminate():
            self._invariant_violation(f"{player.display_name} is already dead")
            return False

        self.eliminations.append({
            "player": player.player_id,
            "reason": reason,
            "round_number": self.round_number,
        })
        self._log_action("player_eliminated", {"player": player.player_id, "reason": reason})
        logger.info("%s has been eliminated (%s)", player, reason)

        if self.event_emitter:
            self.event_emitter.emit_elimination(player.player_id, reason, self.round_number)
        return True

    def count_alive_mafia(self) -> int:
        return len(self.get_mafia_players())

    def count_alive_town(self) -> int:
        return len(self.get_town_players())

    def check_win_condition(self) -> Optional[GameResult]:
        """
        Check if the game has ended and return the result.
        Returns None if the game continues.
        """
        alive_mafia = self.count_alive_mafia()
        alive_town = self.count_alive_town()

        # Mafia parity is checked first; a tie goes to the mafia
        if alive_mafia >= alive_town:
            return self._result(mafia_won=True)

        if alive_mafia == 0:
            return self._result(mafia_won=False)

        return None

    def _result(self, mafia_won: bool, reason: str = "win_condition") -> GameResult:
        # Whole faction wins, dead members included
        winners = [p for p in self.players if p.is_mafia == mafia_won]
        return GameResult(
            mafia_won=mafia_won,
            winners=winners,
            round_number=self.round_number,
            reason=reason,
        )

    def resolve_round_cap(self) -> GameResult:
        """Result when the round cap is hit: the mafia need parity, otherwise town wins."""
        result = self.check_win_condition()
        if result is not None:
            result.reason = "max_rounds"
            return result
        return self._result(mafia_won=False, reason="max_rounds")

    def advance_round(self) -> None:
        """Move on to the next round."""
        self.round_number += 1
        self._log_action("round_start", {"round_number": self.round_number})

    def set_phase(self, phase: GamePhase) -> None:
        self.phase = phase
        if self.event_emitter:
            self.event_emitter.emit_phase_change(phase.value, self.round_number)

    def end_game(self, result: GameResult) -> None:
        """End the game with a result."""
        self.phase = GamePhase.GAME_OVER
        self.result = result
        self._log_action("game_over", {
            "winner": result.winning_team,
            "reason": result.reason,
            "round_number": self.round_number,
        })

    def _invariant_violation(self, message: str) -> None:
        logger.error("Invariant violation: %s", message)
        if self.strict_invariants:
            raise GameInvariantError(message)

    def _log_action(self, action_type: str, data: Dict[str, Any]) -> None:
        """Log a game action."""
        self.action_log.append({
            "type": action_type,
            "phase": self.phase.value,
            "round": self.round_number,
            "data": data
        })

    def get_game_summary(self) -> Dict[str, Any]:
        """Get a summary of the current game state."""
        return {
            "phase": self.phase.value,
            "round": self.round_number,
            "alive_players": len(self.get_alive_players()),
            "alive_mafia": self.count_alive_mafia(),
            "alive_town": self.count_alive_town(),
            "winner": self.result.winning_team if self.result else None,
        }
