"""
Chat-platform interface the game engine talks through.
"""

import logging
from abc import ABC, abstractmethod
from typing import AsyncIterator, Hashable, Optional, Sequence, Tuple

from ..core.audience import Audience, AudienceKind
from ..core.player import Player

logger = logging.getLogger(__name__)

# (voter_id, candidate_id) as delivered by the platform
VoteEvent = Tuple[Hashable, Hashable]

__all__ = ['Audience', 'AudienceKind', 'BasePlatform', 'VoteEvent']


class BasePlatform(ABC):
    """
    Abstract base class for chat platforms hosting a game.

    The engine only ever reaches the outside world through these calls, so a
    game can be run against a real chat service, a simulation or a test fake.
    """

    @abstractmethod
    async def announce(self, audience: Audience, message: str) -> None:
        """
        Post a message to an audience. Fire-and-forget for the engine.

        Args:
            audience: Everyone, a group, one player (private message) or an arena
            message: Text to post
        """
        pass

    @abstractmethod
    def collect_votes(self, candidates: Sequence[Player], eligible_voters: Sequence[Player],
                      window: float) -> AsyncIterator[VoteEvent]:
        """
        Open a vote and stream the votes as they come in.

        The stream ends when the window closes. It can only be consumed once.
        Raise VoteCollectionFailure if the vote cannot be run.

        Args:
            candidates: Players that can be voted for
            eligible_voters: Players that may vote
            window: Window length in seconds

        Returns:
            Async iterator of (voter_id, candidate_id) events
        """
        pass

    @abstractmethod
    async def collect_single_choice(self, candidates: Sequence[Player], voter: Player,
                                    window: float) -> Optional[Hashable]:
        """
        Privately ask one player to pick a candidate.

        Returns:
            The chosen candidate id, or None if the window elapsed unanswered.
            Raise SolicitationFailure if the player cannot be reached.
        """
        pass

    @abstractmethod
    async def set_communication_allowed(self, audience: Audience, allowed: bool) -> None:
        """Allow or forbid the audience to speak in the game channel."""
        pass

    @abstractmethod
    async def create_private_arena(self, audience: Audience) -> Hashable:
        """Create a space only the audience can see. Returns a handle for destroy_arena."""
        pass

    @abstractmethod
    async def destroy_arena(self, handle: Hashable) -> None:
        """Remove an arena created by create_private_arena."""
        pass

    async def report_rejected_vote(self, voter_id: Hashable, candidate_id: Hashable,
                                   reason: str) -> None:
        """
        Tell the vote source a vote did not count.

        Default implementation only logs; platforms can override to notify the voter.
        """
        logger.info("Rejected vote from %s for %s: %s", voter_id, candidate_id, reason)
