"""
Chat-platform contract the engine runs against, plus a simulated platform.
"""

from .base_platform import BasePlatform, Audience, AudienceKind, VoteEvent
from .dummy_platform import DummyPlatform
from .exceptions import PlatformError, VoteCollectionFailure, SolicitationFailure

__all__ = [
    'BasePlatform',
    'Audience',
    'AudienceKind',
    'VoteEvent',
    'DummyPlatform',
    'PlatformError',
    'VoteCollectionFailure',
    'SolicitationFailure',
]
