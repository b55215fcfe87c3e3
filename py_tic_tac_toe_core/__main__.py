import argparse
import logging

from py_tic_tac_toe_core.event_bus import EventBus
from py_tic_tac_toe_core.game import MatchOptions
from py_tic_tac_toe_core.game_engine import RulesEngine
from py_tic_tac_toe_core.ui_terminal import TerminalUi


def main() -> None:
    parser, args = _parse_args()

    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.mode == "pvp" and args.human_mark:
        parser.error("--human-mark only applies to vs-computer mode, use --first-seat-mark")
    if args.mode == "vs-computer" and args.first_seat_mark:
        parser.error("--first-seat-mark only applies to pvp mode, use --human-mark")

    options = MatchOptions(
        mode=args.mode,
        human_mark=args.human_mark or "X",
        difficulty=args.difficulty,
        player_names=args.names,
        first_seat_mark=args.first_seat_mark,
    )

    event_bus = EventBus()
    game_engine = RulesEngine(event_bus)
    ui = TerminalUi(event_bus, game_engine)
    try:
        ui.run(options)
    finally:
        event_bus.close()


def _parse_args() -> tuple[argparse.ArgumentParser, argparse.Namespace]:
    parser = argparse.ArgumentParser(prog="py_tic_tac_toe_core")

    parser.add_argument("--mode", choices=("pvp", "vs-computer"), default="vs-computer")

    # vs-computer mode
    parser.add_argument("--human-mark", choices=("X", "O"))
    parser.add_argument("--difficulty", choices=("easy", "medium", "hard"), default="easy")

    # pvp mode
    parser.add_argument("--first-seat-mark", choices=("X", "O"))

    parser.add_argument("--names", nargs="+", default=[], metavar="NAME")
    parser.add_argument("--log-level", choices=("DEBUG", "INFO", "WARNING", "ERROR"), default="WARNING")

    args = parser.parse_args()
    return parser, args


if __name__ == "__main__":
    main()
