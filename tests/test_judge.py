"""
Tests for the Judge announcements and communication control.
"""

import asyncio

from mafia_bot.core import AudienceKind, GameResult, Judge

from conftest import ScriptedPlatform


def test_announce_reaches_everyone(judge, platform):
    asyncio.run(judge.announce("Hello"))

    audience, message = platform.announcements[0]
    assert message == "Hello"
    assert audience.kind == AudienceKind.EVERYONE
    assert len(audience.members) == 8
    assert judge.announcements == ["Hello"]


def test_announcements_can_be_disabled(eight_player_session, platform, game_config):
    game_config.use_judge_announcements = False
    judge = Judge(eight_player_session, platform, game_config)

    asyncio.run(judge.announce("Hello"))

    assert platform.announcements == []
    assert judge.announcements == ["Hello"]


def test_platform_errors_are_absorbed(eight_player_session, game_config):
    class FailingPlatform(ScriptedPlatform):
        async def announce(self, audience, message):
            raise ConnectionError("gateway down")

        async def set_communication_allowed(self, audience, allowed):
            raise ConnectionError("gateway down")

    judge = Judge(eight_player_session, FailingPlatform(), game_config)

    async def scenario():
        await judge.announce("Hello")
        await judge.set_communication(eight_player_session.players, True)

    asyncio.run(scenario())
    assert judge.announcements == ["Hello"]


def test_dead_players_never_allowed_to_speak(eight_player_session, judge, platform):
    session = eight_player_session
    session.eliminate_player("p1")

    asyncio.run(judge.set_communication(session.players, True))

    members, allowed = platform.communication[0]
    assert allowed
    assert "p1" not in members
    assert len(members) == 7


def test_silencing_includes_dead(eight_player_session, judge, platform):
    session = eight_player_session
    session.eliminate_player("p1")

    asyncio.run(judge.set_communication([session.get_player("p1")], False))

    assert platform.communication == [(("p1",), False)]


def test_reveal_roles(eight_player_session, judge, platform):
    session = eight_player_session

    asyncio.run(judge.reveal_roles())

    assert platform.messages_to(session.get_player("p1")) == ["Your role is Townsperson."]
    assert platform.messages_to(session.get_player("p6")) == ["Your role is Doctor."]
    assert platform.messages_to(session.get_player("p5")) == [
        "Your role is Mafia.",
        "Your fellow mafia: Player 8",
    ]
    assert platform.public_messages() == []


def test_announce_result(eight_player_session, judge, platform):
    session = eight_player_session
    result = GameResult(mafia_won=True, winners=[session.get_player("p5"), session.get_player("p8")])

    asyncio.run(judge.announce_result(result))

    assert platform.public_messages() == [
        "The game was won by the mafia! The member(s) of the winning team are:\nPlayer 5\nPlayer 8"
    ]
