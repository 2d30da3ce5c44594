"""
Exceptions for chat-platform (collaborator) errors.
"""

from typing import Hashable, Optional


class PlatformError(Exception):
    """Base class for failures reported by the chat platform."""


class VoteCollectionFailure(PlatformError):
    """Raised when a vote window could not be run or broke off mid-window."""
    
    def __init__(self, label: str, message: str = ""):
        self.label = label
        self.message = message or f"Vote collection failed during {label}"
        super().__init__(self.message)


class SolicitationFailure(PlatformError):
    """Raised when a private choice could not be requested from a player (e.g. DM refused)."""
    
    def __init__(self, player_id: Optional[Hashable], action_type: str, message: str = ""):
        self.player_id = player_id
        self.action_type = action_type
        self.message = message or f"Could not reach player {player_id} for {action_type}"
        super().__init__(self.message)
