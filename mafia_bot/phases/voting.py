"""
Timed voting: a tally of one live choice per voter, resolved to a single winner or no result.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Optional, Sequence, TYPE_CHECKING

from ..core import GameSession, Judge, Player
from ..config.game_config import GameConfig, default_config
from ..platform.exceptions import VoteCollectionFailure
from .timing import Clock, PhaseWindow, SystemClock

if TYPE_CHECKING:
    from ..platform.base_platform import BasePlatform
    from ..recording.event_emitter import EventEmitter

logger = logging.getLogger(__name__)


@dataclass
class VoteResult:
    """Outcome of a vote. ``tally`` maps candidate id to count."""
    winner: Optional[Player] = None
    tally: Dict[Hashable, int] = field(default_factory=dict)
    ballots: Dict[Hashable, Hashable] = field(default_factory=dict)  # {voter_id: candidate_id}

    @property
    def is_tie(self) -> bool:
        """Two or more candidates share a non-zero top count."""
        if self.winner is not None or not self.tally:
            return False
        top = max(self.tally.values())
        return top > 0 and list(self.tally.values()).count(top) > 1

    def count_for(self, player: Player) -> int:
        return self.tally.get(player.player_id, 0)


class VoteTally:
    """
    Live (voter -> choice) pairs for one vote.

    Casting again replaces the voter's previous choice, and counts are always
    recomputed from the current choices, so nobody is ever counted twice.
    """

    def __init__(self, eligible_voters: Sequence[Player], candidates: Sequence[Player]):
        self._voters = {p.player_id for p in eligible_voters}
        self._candidates: Dict[Hashable, Player] = {p.player_id: p for p in candidates}
        self._choices: Dict[Hashable, Hashable] = {}

    @property
    def candidates(self) -> List[Player]:
        return list(self._candidates.values())

    def check(self, voter_id: Hashable, candidate_id: Hashable) -> Optional[str]:
        """Return why a vote would be rejected, or None if it counts."""
        if voter_id not in self._voters:
            return "not eligible to vote"
        if candidate_id not in self._candidates:
            return "not a candidate"
        return None

    def cast(self, voter_id: Hashable, candidate_id: Hashable) -> bool:
        """
        Set the voter's current choice.
        Returns False (and changes nothing) if the vote is rejected.
        """
        if self.check(voter_id, candidate_id) is not None:
            return False
        self._choices[voter_id] = candidate_id
        return True

    def clear(self) -> None:
        self._choices.clear()

    def counts(self) -> Dict[Hashable, int]:
        """Vote count per candidate, zero for candidates nobody picked."""
        counts = {candidate_id: 0 for candidate_id in self._candidates}
        for candidate_id in self._choices.values():
            counts[candidate_id] += 1
        return counts

    def resolve(self) -> VoteResult:
        """
        Pick the candidate with the strictly highest count.

        Any tie for the top count, or nobody voting at all, means no winner.
        """
        counts = self.counts()
        leader: Optional[Hashable] = None
        max_count = -1
        tied = False

        for candidate_id, count in counts.items():
            if count > max_count:
                leader, max_count, tied = candidate_id, count, False
            elif count == max_count:
                tied = True

        winner = None
        if leader is not None and not tied and max_count > 0:
            winner = self._candidates[leader]

        return VoteResult(winner=winner, tally=counts, ballots=dict(self._choices))


class VotingHandler:
    """Runs timed votes against the platform."""

    def __init__(self, session: GameSession, judge: Judge, platform: 'BasePlatform',
                 clock: Optional[Clock] = None, config: GameConfig = default_config,
                 event_emitter: Optional['EventEmitter'] = None):
        self.session = session
        self.judge = judge
        self.platform = platform
        self.clock = clock or SystemClock()
        self.config = config
        self.event_emitter = event_emitter

    async def run_vote(self, eligible_voters: Sequence[Player], candidates: Sequence[Player],
                       window: float, label: str = "vote") -> VoteResult:
        """
        Collect votes for ``window`` seconds and resolve them.

        Voter and candidate sets are fixed before the window opens. A platform
        failure counts as a window in which nobody voted.

        Args:
            eligible_voters: Players whose votes count
            candidates: Players that can be voted for
            window: Window length in seconds
            label: Name of the vote for logs and events

        Returns:
            VoteResult (winner is None on a tie or when nobody voted)
        """
        eligible_voters = list(eligible_voters)
        candidates = list(candidates)
        tally = VoteTally(eligible_voters, candidates)

        if not eligible_voters or not candidates:
            logger.info("Skipping %s: nobody to vote or nobody to vote for", label)
            return tally.resolve()

        phase_window = PhaseWindow(self.clock, window)
        try:
            await phase_window.guard(
                self._consume_votes(tally, phase_window, eligible_voters, candidates, label),
                grace=self.config.window_grace,
            )
        except VoteCollectionFailure as e:
            logger.warning("%s; treating %s as a vote nobody took part in", e, label)
            tally.clear()
        except asyncio.TimeoutError:
            logger.warning("Platform overran the %s window; closing with the votes received", label)
        except Exception as e:
            logger.warning("Platform error during %s (%s); treating it as a vote nobody took part in", label, e)
            tally.clear()

        await phase_window.wait_closed()

        result = tally.resolve()
        logger.info(
            "%s closed: tally=%s winner=%s", label, result.tally,
            result.winner.player_id if result.winner else None,
        )
        if self.event_emitter:
            self.event_emitter.emit_vote_results(
                label,
                result.tally,
                result.winner.player_id if result.winner else None,
                self.session.round_number,
            )
        return result

    async def _consume_votes(self, tally: VoteTally, phase_window: PhaseWindow,
                             eligible_voters: List[Player], candidates: List[Player],
                             label: str) -> None:
        """Feed the platform's vote stream into the tally until it ends."""
        stream = self.platform.collect_votes(candidates, eligible_voters, phase_window.duration)
        async for voter_id, candidate_id in stream:
            if phase_window.is_closed:
                reason = "window closed"
            else:
                reason = tally.check(voter_id, candidate_id)

            if reason is not None:
                await self._reject(voter_id, candidate_id, reason)
                continue

            tally.cast(voter_id, candidate_id)
            logger.debug("[%s] %s votes for %s", label.upper(), voter_id, candidate_id)
            if self.event_emitter:
                self.event_emitter.emit_vote(label, voter_id, candidate_id, self.session.round_number)

    async def _reject(self, voter_id: Hashable, candidate_id: Hashable, reason: str) -> None:
        try:
            await self.platform.report_rejected_vote(voter_id, candidate_id, reason)
        except Exception as e:
            logger.warning("Could not report rejected vote from %s: %s", voter_id, e)
