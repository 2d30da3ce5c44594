"""
Night phase handler for the mafia kill, the Doctor's protection and the Detective's check.
"""

import asyncio
import logging
from typing import Any, Dict, Hashable, List, Optional, TYPE_CHECKING

from ..core import Audience, GameSession, GamePhase, Judge, Player, RoleType
from ..config.game_config import GameConfig, default_config
from ..platform.exceptions import SolicitationFailure
from .timing import Clock, PhaseWindow, SystemClock
from .voting import VotingHandler

if TYPE_CHECKING:
    from ..platform.base_platform import BasePlatform
    from ..recording.event_emitter import EventEmitter

logger = logging.getLogger(__name__)


class NightPhaseHandler:
    """Handles night phase operations: mafia vote, Doctor and Detective choices, kill resolution."""

    def __init__(self, session: GameSession, judge: Judge, platform: 'BasePlatform',
                 voting: VotingHandler, clock: Optional[Clock] = None,
                 config: GameConfig = default_config,
                 event_emitter: Optional['EventEmitter'] = None):
        self.session = session
        self.judge = judge
        self.platform = platform
        self.voting = voting
        self.clock = clock or SystemClock()
        self.config = config
        self.event_emitter = event_emitter

    async def process_mafia_vote(self) -> Optional[Player]:
        """
        The alive mafia vote, in their own arena, on which non-mafia player to kill.
        Returns the nominated victim, or None on a tie or no votes.
        """
        self.session.set_phase(GamePhase.NIGHT_MAFIA)
        mafia = self.session.get_mafia_players()
        targets = self.session.get_town_players()
        if not mafia or not targets:
            return None

        await self.judge.announce("The mafia goes hunting.")

        arena = await self._open_arena(mafia)
        try:
            if arena is not None:
                await self.judge.announce(
                    "Vote on tonight's victim. A tie means nobody dies.",
                    Audience.in_arena(arena, mafia),
                )
            result = await self.voting.run_vote(
                mafia, targets, self.config.mafia_vote_window, label="mafia_vote"
            )
        finally:
            if arena is not None:
                await self._close_arena(arena)

        if result.winner:
            logger.info("[MAFIA] Chose %s", result.winner)
        else:
            logger.info("[MAFIA] No victim chosen (tally %s)", result.tally)
        return result.winner

    async def process_doctor(self) -> Optional[Player]:
        """Ask the Doctor who to protect. Any alive player, themselves included."""
        doctor = self.session.get_role_holder(RoleType.DOCTOR)
        if doctor is None or not doctor.is_alive:
            return None

        await self.judge.tell(doctor, "Doctor, choose one player to protect tonight.")
        target = await self.solicit_choice(
            doctor, self.session.get_alive_players(), self.config.doctor_window, "doctor_protect"
        )
        if target is not None:
            doctor.add_doctor_protection(self.session.round_number, target.player_id)
            logger.info("[DOCTOR] Protecting %s", target)
        return target

    async def process_detective(self) -> Optional[Dict[str, Any]]:
        """
        Ask the Detective who to investigate and tell them (only them) the faction.
        Returns check result or None.
        """
        detective = self.session.get_role_holder(RoleType.DETECTIVE)
        if detective is None or not detective.is_alive:
            return None

        candidates = [p for p in self.session.get_alive_players() if p != detective]
        await self.judge.tell(detective, "Detective, choose one player to investigate.")
        target = await self.solicit_choice(
            detective, candidates, self.config.detective_window, "detective_check"
        )
        if target is None:
            return None

        result = "Mafia" if target.is_mafia else "Town"
        detective.add_detective_check(self.session.round_number, target.player_id, result)
        logger.info("[DETECTIVE] %s is %s", target, result)

        if self.event_emitter:
            self.event_emitter.emit_detective_check(target.player_id, result, self.session.round_number)

        await self.judge.tell(detective, f"{target.display_name} is {result}.")
        return {"target": target.player_id, "result": result}

    async def solicit_choice(self, player: Player, candidates: List[Player],
                             window: float, action_type: str) -> Optional[Player]:
        """
        Privately ask one player to pick a candidate within ``window`` seconds.

        Unreachable players, unanswered windows and picks outside ``candidates``
        all count as no choice. The full window is always waited out.
        """
        phase_window = PhaseWindow(self.clock, window)
        choice_id: Optional[Hashable] = None
        try:
            choice_id = await phase_window.guard(
                self.platform.collect_single_choice(candidates, player, window),
                grace=self.config.window_grace,
            )
        except SolicitationFailure as e:
            logger.warning("%s; no %s this round", e, action_type)
        except asyncio.TimeoutError:
            logger.info("%s did not answer in time for %s", player, action_type)
        except Exception as e:
            logger.warning("Platform error asking %s for %s (%s); no %s this round",
                           player, action_type, e, action_type)

        await phase_window.wait_closed()

        if choice_id is None:
            return None
        chosen = next((c for c in candidates if c.player_id == choice_id), None)
        if chosen is None:
            logger.warning("Ignoring %s for %s: %r is not a valid target", action_type, player, choice_id)
        return chosen

    async def resolve_night(self, mafia_target: Optional[Player],
                            doctor_target: Optional[Player]) -> Optional[Player]:
        """
        Apply the night kill. Returns the player who died, if anyone.

        The victim survives only when the Doctor protected exactly them.
        """
        self.session.set_phase(GamePhase.NIGHT_RESOLUTION)
        round_number = self.session.round_number
        killed: Optional[Player] = None

        if mafia_target is not None and mafia_target != doctor_target:
            if self.session.eliminate_player(mafia_target.player_id, "night kill"):
                killed = mafia_target
        elif mafia_target is not None:
            logger.info("[DOCTOR] Saved %s", mafia_target)

        self.session.night_kills[round_number] = killed.player_id if killed else None

        if self.event_emitter:
            self.event_emitter.emit_night_result(
                round_number,
                mafia_target.player_id if mafia_target else None,
                doctor_target.player_id if doctor_target else None,
                killed.player_id if killed else None,
            )

        if killed is None:
            await self.judge.announce("The night passes. There are no casualties.")
        else:
            await self.judge.set_communication([killed], False)
            await self.judge.announce(f"{killed.display_name} was killed during the night.")
        return killed

    async def run_night_phase(self) -> Optional[Player]:
        """
        Run complete night phase.
        Sequence: Mafia vote -> Doctor + Detective (concurrently) -> Resolution
        """
        await self.judge.set_communication(self.session.get_alive_players(), False)
        await self.judge.announce(f"Night {self.session.round_number} falls.")

        mafia_target = await self.process_mafia_vote()

        self.session.set_phase(GamePhase.NIGHT_ROLES)
        doctor_target, _ = await asyncio.gather(self.process_doctor(), self.process_detective())

        return await self.resolve_night(mafia_target, doctor_target)

    async def _open_arena(self, players: List[Player]) -> Optional[Hashable]:
        try:
            return await self.platform.create_private_arena(Audience.group(players))
        except Exception as e:
            logger.warning("Could not create the mafia arena: %s", e)
            return None

    async def _close_arena(self, arena: Hashable) -> None:
        try:
            await self.platform.destroy_arena(arena)
        except Exception as e:
            logger.warning("Could not destroy arena %s: %s", arena, e)
