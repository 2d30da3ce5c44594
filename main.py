"""
Run a simulated Mafia game on the dummy platform.
"""

import argparse
import dataclasses
import logging
import random

from mafia_bot.core import Lobby, MIN_PLAYERS, MAX_PLAYERS, InvalidRosterSize
from mafia_bot.config.config_loader import load_config
from mafia_bot.game import MafiaGame
from mafia_bot.phases import InstantClock, SystemClock
from mafia_bot.platform import DummyPlatform


def print_game_summary(game: MafiaGame) -> None:
    """Print a formatted game summary."""
    session = game.session
    result = session.result

    print("\n" + "=" * 60)
    print(f"GAME OVER - {result.winning_team.upper()} WIN!")
    if result.reason == "max_rounds":
        print(f"(Game ended at max rounds limit: {game.config.max_rounds})")
    print("=" * 60)

    print(f"Rounds played: {session.round_number}")
    print(f"Random Seed: {game.seed}")
    print(f"Winners: {', '.join(p.display_name for p in result.winners)}")

    deaths = {entry["player"]: entry for entry in session.eliminations}
    print("\nPlayers:")
    for player in session.players:
        role_name = player.role.role_type.value.title()
        entry = deaths.get(player.player_id)
        if entry:
            print(f"  • {player.display_name}: {role_name} - {entry['reason']} in round {entry['round_number']}")
        else:
            print(f"  • {player.display_name}: {role_name} - survived")


def main():
    """Entry point for running a game."""
    parser = argparse.ArgumentParser(
        description="Run a Mafia game simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                  # Default config, 8 players
  python main.py --config configs/default.yaml    # Use a YAML config
  python main.py --players 5 --seed 42            # Small reproducible game
  python main.py --realtime                       # Wait out the real phase windows
        """
    )
    parser.add_argument("--config", "-c", type=str, default=None,
                        help="Path to YAML configuration file (default: use default config)")
    parser.add_argument("--players", "-p", type=int, default=None,
                        help=f"Number of players, {MIN_PLAYERS}-{MAX_PLAYERS} (overrides config)")
    parser.add_argument("--seed", "-s", type=int, default=None,
                        help="Random seed for reproducible games (if not provided, one is generated and shown)")
    parser.add_argument("--max-rounds", type=int, default=None,
                        help="Stop after this many rounds (overrides config)")
    parser.add_argument("--realtime", action="store_true",
                        help="Use wall-clock phase windows instead of simulated time")
    parser.add_argument("--record", action="store_true",
                        help="Record game events under the runs directory")
    parser.add_argument("--run-name", "-r", type=str, default=None,
                        help="Custom name for this run (default: auto-generated timestamp)")

    args = parser.parse_args()

    # Copy so command-line overrides never touch the shared default
    config = dataclasses.replace(load_config(args.config))
    if args.players is not None:
        config.total_players = args.players
    if args.seed is not None:
        config.random_seed = args.seed
    elif config.random_seed is None:
        # One seed drives both role assignment and the simulated players
        config.random_seed = random.randint(0, 2**31 - 1)
    if args.max_rounds is not None:
        config.max_rounds = args.max_rounds
    if args.record:
        config.record_runs = True

    logging.basicConfig(
        level=getattr(logging, str(config.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    lobby = Lobby(max_players=config.total_players)
    for number in range(1, config.total_players + 1):
        lobby.join(number, f"Player {number}")

    platform = DummyPlatform(seed=config.random_seed)
    clock = SystemClock() if args.realtime else InstantClock()

    try:
        game = MafiaGame.from_lobby(lobby, platform, config=config, clock=clock, run_name=args.run_name)
    except InvalidRosterSize as e:
        parser.error(e.message)

    game.run_game()
    print_game_summary(game)

    if game.run_recorder:
        run_path = game.run_recorder.get_run_path()
        if run_path:
            print(f"\nGame events saved to: {run_path}")


if __name__ == "__main__":
    main()
