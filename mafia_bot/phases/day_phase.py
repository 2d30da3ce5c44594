"""
Day phase handler for discussion and the execution vote.
"""

import logging
from typing import Optional, TYPE_CHECKING

from ..core import GameSession, GamePhase, Judge, Player
from ..config.game_config import GameConfig, default_config
from .timing import Clock, PhaseWindow, SystemClock
from .voting import VoteResult, VotingHandler

if TYPE_CHECKING:
    from ..recording.event_emitter import EventEmitter

logger = logging.getLogger(__name__)


class DayPhaseHandler:
    """Handles day phase operations: discussion, execution vote, execution."""

    def __init__(self, session: GameSession, judge: Judge, voting: VotingHandler,
                 clock: Optional[Clock] = None, config: GameConfig = default_config,
                 event_emitter: Optional['EventEmitter'] = None):
        self.session = session
        self.judge = judge
        self.voting = voting
        self.clock = clock or SystemClock()
        self.config = config
        self.event_emitter = event_emitter

    async def run_discussion(self) -> None:
        """Let the living talk for the discussion window. Nobody votes yet."""
        self.session.set_phase(GamePhase.DAY_DISCUSSION)
        alive = self.session.get_alive_players()

        window = PhaseWindow(self.clock, self.config.discussion_window)
        await self.judge.set_communication(alive, True)
        names = ", ".join(p.display_name for p in alive)
        await self.judge.announce(
            f"Morning has come. Players alive: {names}. "
            f"You have {int(self.config.discussion_window)} seconds to discuss."
        )
        await window.wait_closed()

    async def run_day_vote(self) -> VoteResult:
        """Every alive player votes on which alive player to execute."""
        self.session.set_phase(GamePhase.DAY_VOTE)
        alive = self.session.get_alive_players()

        await self.judge.announce("It is voting time. Vote for the player to execute.")
        result = await self.voting.run_vote(alive, alive, self.config.day_vote_window, label="day_vote")

        round_number = self.session.round_number
        self.session.day_votes[round_number] = dict(result.ballots)
        for voter_id, candidate_id in result.ballots.items():
            voter = self.session.get_player(voter_id)
            if voter:
                voter.vote(candidate_id, round_number)
        return result

    async def resolve_day(self, result: VoteResult) -> Optional[Player]:
        """Execute the vote winner, whatever their faction. A tie executes nobody."""
        self.session.set_phase(GamePhase.DAY_RESOLUTION)

        if result.winner is None:
            if result.is_tie:
                await self.judge.announce("The vote is tied. Nobody is executed today.")
            else:
                await self.judge.announce("No votes were cast. Nobody is executed today.")
            return None

        target = result.winner
        if not self.session.eliminate_player(target.player_id, "day execution"):
            return None

        await self.judge.set_communication([target], False)
        await self.judge.announce(
            f"{target.display_name} has been executed with {result.count_for(target)} vote(s)."
        )
        return target

    async def run_day_phase(self) -> Optional[Player]:
        """
        Run the complete day phase.
        Returns the executed player, if any.
        """
        await self.run_discussion()
        result = await self.run_day_vote()
        executed = await self.resolve_day(result)
        await self.judge.set_communication(self.session.get_alive_players(), False)
        return executed
