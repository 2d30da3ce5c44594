"""
Dummy platform implementation with seeded random behavior.
"""

import asyncio
import logging
import random
from typing import AsyncIterator, Dict, Hashable, List, Optional, Sequence, Set, Tuple

from ..core.player import Player
from .base_platform import Audience, BasePlatform, VoteEvent

logger = logging.getLogger(__name__)


class DummyPlatform(BasePlatform):
    """
    Simulated chat platform with reproducible random players:
    - Votes: every eligible voter votes for a random candidate, and sometimes
      changes their mind once before the window closes
    - Doctor/Detective: pick a random candidate straight away
    - Messages go into a transcript instead of a chat service
    """

    def __init__(self, seed: Optional[int] = None, change_mind_chance: float = 0.2):
        # Same seed, same game
        self.random = random.Random(seed)
        self.change_mind_chance = change_mind_chance
        self.transcript: List[Tuple[Audience, str]] = []
        self.rejected_votes: List[Tuple[Hashable, Hashable, str]] = []
        self.arenas: Dict[int, Audience] = {}
        self.can_speak: Set[Hashable] = set()
        self._next_arena = 1

    async def announce(self, audience: Audience, message: str) -> None:
        self.transcript.append((audience, message))

    async def collect_votes(self, candidates: Sequence[Player], eligible_voters: Sequence[Player],
                            window: float) -> AsyncIterator[VoteEvent]:
        voters = list(eligible_voters)
        self.random.shuffle(voters)
        for voter in voters:
            yield voter.player_id, self.random.choice(candidates).player_id
            if self.random.random() < self.change_mind_chance:
                yield voter.player_id, self.random.choice(candidates).player_id
            await asyncio.sleep(0)

    async def collect_single_choice(self, candidates: Sequence[Player], voter: Player,
                                    window: float) -> Optional[Hashable]:
        if not candidates:
            return None
        return self.random.choice(candidates).player_id

    async def set_communication_allowed(self, audience: Audience, allowed: bool) -> None:
        if allowed:
            self.can_speak.update(audience.member_ids)
        else:
            self.can_speak.difference_update(audience.member_ids)

    async def create_private_arena(self, audience: Audience) -> Hashable:
        handle = self._next_arena
        self._next_arena += 1
        self.arenas[handle] = audience
        return handle

    async def destroy_arena(self, handle: Hashable) -> None:
        self.arenas.pop(handle, None)

    async def report_rejected_vote(self, voter_id: Hashable, candidate_id: Hashable,
                                   reason: str) -> None:
        self.rejected_votes.append((voter_id, candidate_id, reason))
