"""
Pytest fixtures for Mafia game tests.
"""

import pytest
from typing import Callable, Dict, Hashable, List, Optional, Sequence, Tuple, Union

from mafia_bot.core import (
    Audience, AudienceKind, GameSession, Judge, Player, RoleType, create_role,
)
from mafia_bot.config.game_config import GameConfig
from mafia_bot.phases import InstantClock, RoundEngine
from mafia_bot.platform import BasePlatform

# A scripted vote entry is a (voter_id, candidate_id) event, or a number of
# seconds to let pass on the clock before the next event.
ScriptEntry = Union[Tuple[Hashable, Hashable], float]
VoteScript = Union[List[ScriptEntry], Exception, Callable[[Sequence[Player], Sequence[Player]], List[ScriptEntry]]]


class ScriptedPlatform(BasePlatform):
    """
    Fake chat platform that replays scripted votes and choices and records
    everything the engine asks of it.

    - ``vote_scripts``: consumed one per collect_votes call; an Exception is raised
      instead of voting; a callable gets (candidates, voters) and returns the script
    - ``vote_policy``: used once the scripts run out
    - ``choices``: per-player queue of answers (id, None, or an Exception to raise)
    - ``choice_policy``: used when a player has no queued answer
    """

    def __init__(self, clock: Optional[InstantClock] = None):
        self.clock = clock
        self.vote_scripts: List[VoteScript] = []
        self.vote_policy: Optional[Callable[[Sequence[Player], Sequence[Player]], List[ScriptEntry]]] = None
        self.choices: Dict[Hashable, list] = {}
        self.choice_policy: Optional[Callable[[Sequence[Player], Player], Optional[Hashable]]] = None

        self.announcements: List[Tuple[Audience, str]] = []
        self.vote_calls: List[Dict] = []
        self.choice_calls: List[Dict] = []
        self.communication: List[Tuple[Tuple[Hashable, ...], bool]] = []
        self.arenas_created: List[Hashable] = []
        self.arenas_destroyed: List[Hashable] = []
        self.rejected: List[Tuple[Hashable, Hashable, str]] = []
        self.fail_arena_creation = False

    async def announce(self, audience, message):
        self.announcements.append((audience, message))

    async def collect_votes(self, candidates, eligible_voters, window):
        self.vote_calls.append({
            "candidates": [p.player_id for p in candidates],
            "voters": [p.player_id for p in eligible_voters],
            "window": window,
        })
        if self.vote_scripts:
            script = self.vote_scripts.pop(0)
        elif self.vote_policy is not None:
            script = self.vote_policy
        else:
            script = []

        if isinstance(script, Exception):
            raise script
        if callable(script):
            script = script(candidates, eligible_voters)

        for entry in script:
            if isinstance(entry, (int, float)):
                await self.clock.sleep(entry)
                continue
            yield entry

    async def collect_single_choice(self, candidates, voter, window):
        self.choice_calls.append({
            "voter": voter.player_id,
            "candidates": [p.player_id for p in candidates],
            "window": window,
        })
        queue = self.choices.get(voter.player_id)
        if queue:
            answer = queue.pop(0)
        elif self.choice_policy is not None:
            answer = self.choice_policy(candidates, voter)
        else:
            answer = None
        if isinstance(answer, Exception):
            raise answer
        return answer

    async def set_communication_allowed(self, audience, allowed):
        self.communication.append((audience.member_ids, allowed))

    async def create_private_arena(self, audience):
        if self.fail_arena_creation:
            raise RuntimeError("missing permissions")
        handle = f"arena-{len(self.arenas_created) + 1}"
        self.arenas_created.append(handle)
        return handle

    async def destroy_arena(self, handle):
        self.arenas_destroyed.append(handle)

    async def report_rejected_vote(self, voter_id, candidate_id, reason):
        self.rejected.append((voter_id, candidate_id, reason))

    def messages_to(self, player: Player) -> List[str]:
        """Private messages sent to one player."""
        return [
            message for audience, message in self.announcements
            if audience.kind == AudienceKind.DIRECT and audience.members[0] == player
        ]

    def public_messages(self) -> List[str]:
        return [message for audience, message in self.announcements if audience.kind == AudienceKind.EVERYONE]


def make_players(count: int) -> List[Player]:
    """Players p1..pN without roles."""
    return [Player(player_id=f"p{i}", display_name=f"Player {i}") for i in range(1, count + 1)]


def make_session(role_types: Sequence[RoleType], strict: bool = True) -> GameSession:
    """Session with roles handed out in the given order (p1 gets role_types[0], ...)."""
    players = make_players(len(role_types))
    for player, role_type in zip(players, role_types):
        player.assign_role(create_role(role_type))
    session = GameSession(players=players, strict_invariants=strict)
    session._provide_mafia_knowledge()
    return session


def votes_for(target_id: Hashable) -> Callable[[Sequence[Player], Sequence[Player]], List[ScriptEntry]]:
    """Vote script in which every eligible voter picks the same target."""
    def script(candidates, voters):
        return [(voter.player_id, target_id) for voter in voters]
    return script


T = RoleType.TOWNSPERSON
M = RoleType.MAFIA
DET = RoleType.DETECTIVE
DOC = RoleType.DOCTOR


@pytest.fixture
def game_config():
    """Test game configuration."""
    return GameConfig(
        mafia_vote_window=10.0,
        doctor_window=5.0,
        detective_window=7.0,
        discussion_window=20.0,
        day_vote_window=15.0,
        window_grace=1.0,
        strict_invariants=True,
    )


@pytest.fixture
def clock():
    return InstantClock()


@pytest.fixture
def platform(clock):
    return ScriptedPlatform(clock)


@pytest.fixture
def eight_player_session():
    """p1-p4 townspeople, p5 mafia, p6 doctor, p7 detective, p8 mafia."""
    return make_session([T, T, T, T, M, DOC, DET, M])


@pytest.fixture
def judge(eight_player_session, platform, game_config):
    return Judge(eight_player_session, platform, game_config)


@pytest.fixture
def round_engine(eight_player_session, judge, platform, clock, game_config):
    return RoundEngine(eight_player_session, judge, platform, clock=clock, config=game_config)
