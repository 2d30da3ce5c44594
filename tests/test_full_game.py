"""
Integration tests for full game flow.
"""

import asyncio
import random

import pytest
from mafia_bot.config.game_config import GameConfig
from mafia_bot.core import InvalidRosterSize, Judge, Lobby, RoleType
from mafia_bot.game import MafiaGame
from mafia_bot.phases import InstantClock, RoundEngine
from mafia_bot.platform import DummyPlatform

from conftest import ScriptedPlatform, make_players, make_session, votes_for, T, M


def killers_and_deadlock(candidates, voters):
    """Mafia always agree on the first candidate; in the day everybody votes for themselves."""
    if set(candidates) == set(voters):
        return [(v.player_id, v.player_id) for v in voters]
    return [(v.player_id, candidates[0].player_id) for v in voters]


def test_five_player_game_ends(game_config):
    """With an unopposed kill every night, a 5-player game is over within 4 rounds."""
    clock = InstantClock()
    platform = ScriptedPlatform(clock)
    platform.vote_policy = killers_and_deadlock
    game = MafiaGame(make_players(5), platform, config=game_config, clock=clock, rng=random.Random(3))

    result = game.run_game()

    assert result.mafia_won
    assert game.session.round_number <= 4
    assert game.session.round_number == 3
    assert [e["reason"] for e in game.session.eliminations] == ["night kill"] * 3
    assert result.winners == [p for p in game.session.players if p.is_mafia]
    assert len(result.winners) == 1
    # No Doctor or Detective in a 5-player game
    assert platform.choice_calls == []
    assert platform.public_messages()[0] == "A game of Mafia begins with 5 players. There is 1 mafia among you."
    assert platform.public_messages()[-1].startswith("The game was won by the mafia!")


def test_doctor_save_still_ends_round(game_config):
    """The Doctor always saves the mafia's victim: nobody dies, rounds keep counting."""
    clock = InstantClock()
    platform = ScriptedPlatform(clock)
    platform.vote_policy = killers_and_deadlock

    def doctor_guesses_right(candidates, voter):
        if voter.role_type == RoleType.DOCTOR:
            return next(c for c in candidates if not c.is_mafia).player_id
        return None

    platform.choice_policy = doctor_guesses_right
    game_config.max_rounds = 2
    game = MafiaGame(make_players(8), platform, config=game_config, clock=clock, rng=random.Random(11))

    result = game.run_game()

    session = game.session
    assert session.night_kills == {1: None, 2: None}
    assert session.round_number == 2
    assert all(p.is_alive for p in session.players)
    assert not result.mafia_won
    assert result.reason == "max_rounds"
    assert session.result is result


def test_mafia_win_after_day_execution(platform, clock, game_config):
    """One mafia and one townsperson left after the day: mafia win, the mafia player is the winner."""
    session = make_session([T, T, T, M, T])
    session.eliminate_player("p1")
    session.eliminate_player("p2")
    judge = Judge(session, platform, game_config)
    engine = RoundEngine(session, judge, platform, clock=clock, config=game_config)

    platform.vote_scripts.append([])  # mafia stay quiet tonight
    platform.vote_scripts.append(votes_for("p5"))

    summary = asyncio.run(engine.run_round())
    result = session.check_win_condition()

    assert summary.night_victim is None
    assert summary.executed == session.get_player("p5")
    assert session.count_alive_mafia() == 1
    assert session.count_alive_town() == 1
    assert result.mafia_won
    assert result.winners == [session.get_player("p4")]


def test_town_wins_by_executing_mafia(game_config):
    clock = InstantClock()
    platform = ScriptedPlatform(clock)

    def lynch_the_mafia(candidates, voters):
        if set(candidates) == set(voters):
            mafia = next(c for c in candidates if c.is_mafia)
            return [(v.player_id, mafia.player_id) for v in voters]
        return []

    platform.vote_policy = lynch_the_mafia
    game = MafiaGame(make_players(6), platform, config=game_config, clock=clock, rng=random.Random(5))

    result = game.run_game()

    assert not result.mafia_won
    assert game.session.round_number == 1
    assert game.session.count_alive_mafia() == 0
    assert len(result.winners) == 5
    assert game.judge.announcements[-1].startswith("The game was won by the townspeople!")


def test_round_cap_without_parity_goes_to_town(game_config):
    clock = InstantClock()
    platform = ScriptedPlatform(clock)
    platform.vote_policy = killers_and_deadlock
    game_config.max_rounds = 2
    game = MafiaGame(make_players(5), platform, config=game_config, clock=clock, rng=random.Random(3))

    result = game.run_game()

    assert not result.mafia_won
    assert result.reason == "max_rounds"
    assert game.session.round_number == 2
    assert game.session.count_alive_mafia() == 1
    assert game.session.count_alive_town() == 2


def test_invalid_roster_creates_no_game(game_config):
    with pytest.raises(InvalidRosterSize):
        MafiaGame(make_players(11), ScriptedPlatform(), config=game_config, clock=InstantClock())


def test_invalid_roster_records_nothing(tmp_path):
    runs_dir = tmp_path / "runs"
    config = GameConfig(record_runs=True, runs_dir=str(runs_dir))

    with pytest.raises(InvalidRosterSize):
        MafiaGame(make_players(4), ScriptedPlatform(), config=config, clock=InstantClock())
    assert not runs_dir.exists()


def test_game_from_lobby(game_config):
    lobby = Lobby()
    for number in range(1, 7):
        lobby.join(f"u{number}", f"User {number}")
    lobby.leave("u6")
    lobby.join("u7", "User 7")

    clock = InstantClock()
    game = MafiaGame.from_lobby(lobby, ScriptedPlatform(clock), config=game_config, clock=clock)

    assert not lobby.is_open
    assert [p.player_id for p in game.session.players] == ["u1", "u2", "u3", "u4", "u5", "u7"]
    assert sum(p.is_mafia for p in game.session.players) == 1


def test_registration_window(game_config):
    lobby = Lobby()
    for number in range(1, 8):
        lobby.join(number, f"User {number}")
    clock = InstantClock()

    game = asyncio.run(MafiaGame.open_registration(lobby, ScriptedPlatform(clock), config=game_config, clock=clock))

    assert clock.now() == game_config.registration_window
    assert not lobby.join(8, "Too late")
    assert len(game.session.players) == 7


def test_registration_with_too_few_players(game_config):
    lobby = Lobby()
    lobby.join(1, "Alone")
    clock = InstantClock()

    with pytest.raises(InvalidRosterSize):
        asyncio.run(MafiaGame.open_registration(lobby, ScriptedPlatform(clock), config=game_config, clock=clock))
    assert not lobby.is_open


def test_same_seed_same_roles():
    config = GameConfig(random_seed=1234)
    first = MafiaGame(make_players(10), ScriptedPlatform(), config=config, clock=InstantClock())
    second = MafiaGame(make_players(10), ScriptedPlatform(), config=config, clock=InstantClock())

    assert first.seed == second.seed == 1234
    assert [p.role for p in first.session.players] == [p.role for p in second.session.players]


@pytest.mark.parametrize("seed", range(20))
def test_simulated_games_finish(seed):
    """Seeded games on the simulated platform reach a result and keep the registry consistent."""
    config = GameConfig(random_seed=seed, total_players=5 + seed % 6, max_rounds=50, strict_invariants=True)
    platform = DummyPlatform(seed=seed)
    game = MafiaGame(
        make_players(config.total_players), platform, config=config, clock=InstantClock()
    )

    result = game.run_game()
    session = game.session

    assert session.result is result
    assert 1 <= session.round_number <= 50
    # Every dead player died exactly once
    dead = [entry["player"] for entry in session.eliminations]
    assert len(dead) == len(set(dead))
    assert sorted(dead) == sorted(p.player_id for p in session.get_dead_players())
    # At most one night kill and one execution per round
    assert len(dead) <= 2 * session.round_number
    if result.reason == "win_condition":
        if result.mafia_won:
            assert session.count_alive_mafia() >= session.count_alive_town()
        else:
            assert session.count_alive_mafia() == 0
    # Nobody dead is allowed to speak at the end
    assert not platform.can_speak & {p.player_id for p in session.get_dead_players()}
