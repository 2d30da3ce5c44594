"""
Game configuration and constants.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class GameConfig:
    """Configuration for game parameters."""
    
    # Windows (seconds)
    registration_window: float = 20.0  # Lobby sign-up
    mafia_vote_window: float = 60.0
    doctor_window: float = 30.0
    detective_window: float = 30.0
    discussion_window: float = 120.0
    day_vote_window: float = 60.0
    window_grace: float = 5.0  # Slack given to the platform past a window's end
    
    # Game settings
    total_players: int = 8  # Used by the simulation CLI
    max_rounds: Optional[int] = None  # Safety cap on completed rounds; None = play until a team wins
    random_seed: Optional[int] = None  # Seeds role assignment and the dummy platform
    log_level: str = "INFO"
    
    # Judge announcements
    use_judge_announcements: bool = True
    
    # Raise on internal invariant violations (double kill etc.) instead of ignoring them
    strict_invariants: bool = False
    
    # Run recording
    record_runs: bool = False
    runs_dir: str = "runs"


# Default configuration instance
default_config = GameConfig()
