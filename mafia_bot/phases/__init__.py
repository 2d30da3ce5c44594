"""
Phase handlers for voting, night, day and whole rounds.
"""

from .timing import Clock, SystemClock, InstantClock, PhaseWindow
from .voting import VoteResult, VoteTally, VotingHandler
from .night_phase import NightPhaseHandler
from .day_phase import DayPhaseHandler
from .round_engine import RoundEngine, RoundSummary

__all__ = [
    'Clock',
    'SystemClock',
    'InstantClock',
    'PhaseWindow',
    'VoteResult',
    'VoteTally',
    'VotingHandler',
    'NightPhaseHandler',
    'DayPhaseHandler',
    'RoundEngine',
    'RoundSummary',
]
