"""
Exceptions raised by the core game model.
"""


class InvalidRosterSize(Exception):
    """Raised when a roster falls outside the supported player range."""
    
    def __init__(self, player_count: int, minimum: int, maximum: int, message: str = ""):
        self.player_count = player_count
        self.minimum = minimum
        self.maximum = maximum
        self.message = message or (
            f"A game needs between {minimum} and {maximum} players, got {player_count}"
        )
        super().__init__(self.message)


class GameInvariantError(AssertionError):
    """Raised in strict mode when the engine is asked to break a game invariant."""
