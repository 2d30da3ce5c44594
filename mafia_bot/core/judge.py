"""
Judge/Moderator: talks to the players on the engine's behalf.
"""

import logging
from typing import Iterable, List, Optional, TYPE_CHECKING

from .game_engine import GameResult, GameSession
from .audience import Audience
from .player import Player
from ..config.game_config import GameConfig, default_config

if TYPE_CHECKING:
    from ..platform.base_platform import BasePlatform

logger = logging.getLogger(__name__)


class Judge:
    """Moderator that makes announcements and manages who may speak."""

    def __init__(self, session: GameSession, platform: 'BasePlatform',
                 config: GameConfig = default_config):
        self.session = session
        self.platform = platform
        self.config = config
        self.announcements: List[str] = []

    async def announce(self, message: str, audience: Optional[Audience] = None) -> None:
        """
        Make a judge announcement (to everyone unless an audience is given).
        Platform failures are logged and never reach the game.
        """
        self.announcements.append(message)
        logger.info("[JUDGE] %s", message)
        if not self.config.use_judge_announcements:
            return
        audience = audience or Audience.everyone(self.session.players)
        try:
            await self.platform.announce(audience, message)
        except Exception as e:
            logger.warning("Announcement failed (%s): %s", audience.kind.value, e)

    async def tell(self, player: Player, message: str) -> None:
        """Private message to a single player."""
        await self.announce(message, Audience.direct(player))

    async def set_communication(self, players: Iterable[Player], allowed: bool) -> None:
        """
        Allow or forbid players to speak. Dead players are never allowed to.
        """
        players = list(players)
        if allowed:
            players = [p for p in players if p.is_alive]
        if not players:
            return
        try:
            await self.platform.set_communication_allowed(Audience.group(players), allowed)
        except Exception as e:
            logger.warning("Could not %s communication: %s", "allow" if allowed else "forbid", e)

    async def reveal_roles(self) -> None:
        """Tell every player their role; the mafia also learn their teammates."""
        for player in self.session.players:
            await self.tell(player, f"Your role is {player.role.role_type.value.title()}.")
            if player.is_mafia:
                teammates = [
                    p.display_name for p in self.session.players
                    if p.player_id in player.known_mafia and p != player
                ]
                if teammates:
                    await self.tell(player, f"Your fellow mafia: {', '.join(teammates)}")

    async def announce_result(self, result: GameResult) -> None:
        """Announce the winning team and its members."""
        names = "\n".join(p.display_name for p in result.winners)
        await self.announce(
            f"The game was won by the {'mafia' if result.mafia_won else 'townspeople'}! "
            f"The member(s) of the winning team are:\n{names}"
        )
