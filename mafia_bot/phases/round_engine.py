"""
Round engine: one full night + day cycle.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING

from ..core import GameSession, GamePhase, Judge, Player
from ..config.game_config import GameConfig, default_config
from .day_phase import DayPhaseHandler
from .night_phase import NightPhaseHandler
from .timing import Clock, SystemClock
from .voting import VotingHandler

if TYPE_CHECKING:
    from ..platform.base_platform import BasePlatform
    from ..recording.event_emitter import EventEmitter

logger = logging.getLogger(__name__)


@dataclass
class RoundSummary:
    """Who died in a round."""
    round_number: int
    night_victim: Optional[Player] = None
    executed: Optional[Player] = None

    @property
    def deaths(self) -> List[Player]:
        return [p for p in (self.night_victim, self.executed) if p is not None]


class RoundEngine:
    """
    Drives one round through its states:
    NightMafia -> NightDoctor + NightDetective -> Resolution ->
    DayDiscussion -> DayVote -> DayResolution -> RoundComplete.
    """

    def __init__(self, session: GameSession, judge: Judge, platform: 'BasePlatform',
                 clock: Optional[Clock] = None, config: GameConfig = default_config,
                 event_emitter: Optional['EventEmitter'] = None):
        self.session = session
        self.clock = clock or SystemClock()
        self.voting = VotingHandler(
            session, judge, platform, clock=self.clock, config=config, event_emitter=event_emitter
        )
        self.night_handler = NightPhaseHandler(
            session, judge, platform, self.voting,
            clock=self.clock, config=config, event_emitter=event_emitter,
        )
        self.day_handler = DayPhaseHandler(
            session, judge, self.voting, clock=self.clock, config=config, event_emitter=event_emitter
        )

    async def run_round(self) -> RoundSummary:
        """Play the current round to completion. Does not check for a winner."""
        round_number = self.session.round_number
        logger.info("--- ROUND %d ---", round_number)

        night_victim = await self.night_handler.run_night_phase()
        executed = await self.day_handler.run_day_phase()

        self.session.set_phase(GamePhase.ROUND_COMPLETE)
        summary = RoundSummary(round_number, night_victim=night_victim, executed=executed)
        logger.info(
            "Round %d complete: %d death(s), %d mafia / %d town alive",
            round_number, len(summary.deaths),
            self.session.count_alive_mafia(), self.session.count_alive_town(),
        )
        return summary
