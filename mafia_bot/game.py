"""
Game loop: plays rounds until one faction wins.
"""

import asyncio
import logging
import random
from typing import Optional, Sequence, TYPE_CHECKING

from .core import GameResult, GameSession, Judge, Lobby, Player, RoleType, validate_roster_size
from .config.game_config import GameConfig, default_config
from .phases import Clock, PhaseWindow, RoundEngine, SystemClock
from .recording import EventEmitter, RunRecorder

if TYPE_CHECKING:
    from .platform.base_platform import BasePlatform

logger = logging.getLogger(__name__)


class MafiaGame:
    """Main game controller. One instance owns one game session."""

    def __init__(self, roster: Sequence[Player], platform: 'BasePlatform',
                 config: Optional[GameConfig] = None, clock: Optional[Clock] = None,
                 rng: Optional[random.Random] = None,
                 event_emitter: Optional[EventEmitter] = None, run_name: Optional[str] = None):
        """
        Set up a game: validates the roster size and assigns roles.

        Args:
            roster: Players in signup order, without roles
            platform: Chat platform the game is played on
            config: Game configuration (defaults to ``default_config``)
            clock: Time source for phase windows (defaults to wall-clock time)
            rng: Random source for role assignment; seeded from ``config.random_seed`` if omitted
            event_emitter: Optional event recorder; created when ``config.record_runs`` is set
            run_name: Run directory name when recording

        Raises:
            InvalidRosterSize: If the roster is outside the supported range (no game is created)
        """
        # Nothing is created (run directory included) for an invalid roster
        validate_roster_size(len(roster))

        self.config = config or default_config
        self.platform = platform
        self.clock = clock or SystemClock()

        # Generate seed if not provided, so every game can be replayed
        self.seed = self.config.random_seed
        if self.seed is None:
            self.seed = random.randint(0, 2**31 - 1)
        self.rng = rng or random.Random(self.seed)

        self.run_recorder: Optional[RunRecorder] = None
        if event_emitter is None and self.config.record_runs:
            self.run_recorder = RunRecorder(self.config.runs_dir)
            run_name = self.run_recorder.create_run(run_name)
            event_emitter = EventEmitter(self.run_recorder)
            logger.info("Recording game to: %s/%s/", self.config.runs_dir, run_name)
        elif event_emitter is not None:
            self.run_recorder = event_emitter.run_recorder
        self.event_emitter = event_emitter

        self.session = GameSession.from_roster(
            roster,
            rng=self.rng,
            strict_invariants=self.config.strict_invariants,
            event_emitter=self.event_emitter,
        )
        self.judge = Judge(self.session, platform, self.config)
        self.round_engine = RoundEngine(
            self.session, self.judge, platform,
            clock=self.clock, config=self.config, event_emitter=self.event_emitter,
        )

    @classmethod
    def from_lobby(cls, lobby: Lobby, platform: 'BasePlatform', **kwargs) -> 'MafiaGame':
        """Close the lobby and start a game with whoever signed up."""
        return cls(lobby.finalize(), platform, **kwargs)

    @classmethod
    async def open_registration(cls, lobby: Lobby, platform: 'BasePlatform',
                                config: Optional[GameConfig] = None, clock: Optional[Clock] = None,
                                **kwargs) -> 'MafiaGame':
        """
        Keep the lobby open for ``config.registration_window`` seconds, then
        start a game with whoever is signed up at that moment.

        Raises:
            InvalidRosterSize: If the lobby closes outside the supported range
        """
        config = config or default_config
        clock = clock or SystemClock()
        logger.info("Registration open for %s seconds", config.registration_window)
        await PhaseWindow(clock, config.registration_window).wait_closed()
        return cls.from_lobby(lobby, platform, config=config, clock=clock, **kwargs)

    async def run(self) -> GameResult:
        """
        Run the complete game until a win condition (or the round cap) is reached.
        Returns the game result.
        """
        await self._start()

        while True:
            await self.round_engine.run_round()

            result = self.session.check_win_condition()
            if result is None and self._round_cap_reached():
                logger.info("Round cap of %d reached", self.config.max_rounds)
                result = self.session.resolve_round_cap()
            if result is not None:
                break

            self.session.advance_round()

        await self._finish(result)
        return result

    def run_game(self) -> GameResult:
        """Synchronous wrapper around run()."""
        return asyncio.run(self.run())

    def _round_cap_reached(self) -> bool:
        return self.config.max_rounds is not None and self.session.round_number >= self.config.max_rounds

    async def _start(self) -> None:
        session = self.session
        mafia = [p.player_id for p in session.players if p.is_mafia]
        detective = session.get_role_holder(RoleType.DETECTIVE)
        doctor = session.get_role_holder(RoleType.DOCTOR)

        if self.event_emitter:
            self.event_emitter.emit_game_start(
                [p.player_id for p in session.players],
                mafia,
                detective.player_id if detective else None,
                doctor.player_id if doctor else None,
            )
            if self.run_recorder:
                self.run_recorder.save_metadata({
                    "players": [p.player_id for p in session.players],
                    "mafia": mafia,
                    "random_seed": self.seed,
                    "max_rounds": self.config.max_rounds,
                })

        logger.info("MAFIA GAME - Starting with %d players (seed %s)", len(session.players), self.seed)
        await self.judge.announce(
            f"A game of Mafia begins with {len(session.players)} players. "
            f"There {'is' if len(mafia) == 1 else 'are'} {len(mafia)} mafia among you."
        )
        await self.judge.reveal_roles()

    async def _finish(self, result: GameResult) -> None:
        self.session.end_game(result)

        if self.event_emitter:
            self.event_emitter.emit_game_over(
                result.winning_team,
                result.reason,
                result.round_number,
                [p.player_id for p in result.winners],
            )

        logger.info(
            "GAME OVER - %s win after %d round(s) (%s)",
            result.winning_team, result.round_number, result.reason,
        )
        logger.info("Summary: %s", self.session.get_game_summary())
        await self.judge.announce_result(result)
