"""
Event emitter for recording game events to files.
"""

import logging
from typing import Dict, Any, Hashable, List, Optional

from .run_recorder import RunRecorder

logger = logging.getLogger(__name__)


class EventEmitter:
    """Event emitter that records game events to files."""
    
    def __init__(self, run_recorder: Optional[RunRecorder] = None):
        self.run_recorder = run_recorder or RunRecorder()
    
    def _emit(self, event_type: str, data: Dict[str, Any]) -> None:
        """Emit an event by recording it to file."""
        if self.run_recorder:
            try:
                self.run_recorder.record_event(event_type, data)
            except Exception as e:
                # Recording errors never reach the game
                logger.warning("Error recording event %s: %s", event_type, e)
    
    def emit_game_start(self, players: List[Hashable], mafia: List[Hashable],
                        detective: Optional[Hashable], doctor: Optional[Hashable]) -> None:
        """Emit game start event."""
        self._emit("game_start", {
            "players": players,
            "mafia": mafia,
            "detective": detective,
            "doctor": doctor
        })
    
    def emit_phase_change(self, phase: str, round_number: int) -> None:
        """Emit phase change event."""
        self._emit("phase_change", {
            "phase": phase,
            "round_number": round_number
        })
    
    def emit_vote(self, label: str, voter: Hashable, target: Hashable, round_number: int) -> None:
        """Emit individual vote event."""
        self._emit("vote", {
            "label": label,
            "voter": voter,
            "target": target,
            "round_number": round_number
        })
    
    def emit_vote_results(self, label: str, tally: Dict[Hashable, int], winner: Optional[Hashable],
                          round_number: int) -> None:
        """Emit voting results event."""
        self._emit("vote_results", {
            "label": label,
            "tally": [[candidate, count] for candidate, count in tally.items()],
            "winner": winner,
            "round_number": round_number
        })
    
    def emit_night_result(self, round_number: int, mafia_target: Optional[Hashable],
                          doctor_target: Optional[Hashable], killed: Optional[Hashable]) -> None:
        """Emit night resolution event."""
        self._emit("night_result", {
            "round_number": round_number,
            "mafia_target": mafia_target,
            "doctor_target": doctor_target,
            "killed": killed
        })
    
    def emit_detective_check(self, target: Hashable, result: str, round_number: int) -> None:
        """Emit Detective check event."""
        self._emit("detective_check", {
            "target": target,
            "result": result,
            "round_number": round_number
        })
    
    def emit_elimination(self, player: Hashable, reason: str, round_number: int) -> None:
        """Emit player elimination event."""
        self._emit("elimination", {
            "player": player,
            "reason": reason,
            "round_number": round_number
        })
    
    def emit_game_over(self, winner: str, reason: str, round_number: int,
                       winners: List[Hashable]) -> None:
        """Emit game over event."""
        self._emit("game_over", {
            "winner": winner,
            "reason": reason,
            "round_number": round_number,
            "winners": winners
        })
