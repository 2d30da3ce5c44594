"""
Mafia party-game engine: role assignment, day/night rounds, timed voting and win detection.
"""

__version__ = "0.1.0"
