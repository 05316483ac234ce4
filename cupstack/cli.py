"""
Cup Stack CLI - Text host for the engine.

Usage:
    cupstack play [--seed N] [--save FILE]    Play in the terminal
    cupstack replay <record_file>              Replay a saved game
    cupstack check <board_file> --drop-lane N  Report win / forced loss
"""

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from .config import GameConfig


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Cup Stack - lane stacking puzzle",
        prog="cupstack",
    )
    parser.add_argument("--log-level", help="Logging level (default from CUPSTACK_LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a game in the terminal")
    play_parser.add_argument("--seed", type=int, help="Seed for the drop lanes")
    play_parser.add_argument("--save", help="Write the game record to this file when done")
    play_parser.add_argument(
        "--no-forced-loss", action="store_true", help="Do not end the game early on forced losses",
    )

    # Replay command
    replay_parser = subparsers.add_parser("replay", help="Replay a saved game record")
    replay_parser.add_argument("record_file", help="Path to a GameRecord JSON file")

    # Check command
    check_parser = subparsers.add_parser("check", help="Check a board snapshot")
    check_parser.add_argument("board_file", help="Path to a BoardSnapshot JSON file")
    check_parser.add_argument(
        "--drop-lane", type=int, required=True, help="Next drop lane, numbered 1 to 4",
    )

    args = parser.parse_args(argv)

    config = GameConfig.from_env()
    if args.log_level:
        config.log_level = args.log_level.upper()
    logging.basicConfig(level=getattr(logging, config.log_level, logging.WARNING))

    if args.command == "play":
        return cmd_play(args, config)
    elif args.command == "replay":
        return cmd_replay(args, config)
    elif args.command == "check":
        return cmd_check(args)
    else:
        parser.print_help()
        sys.exit(1)


def _print_invalid(title, error):
    """Print a pydantic ValidationError one problem per line."""
    print(f"Error: {title}")
    for err in error.errors():
        location = ".".join(str(part) for part in err["loc"]) or "(root)"
        print(f"  - {location}: {err['msg']}")


def _print_turn(result):
    print()
    print(result.board.render())
    print(f"Turn {result.turn_number} | next drop: lane {result.next_drop_lane + 1} | {result.phase.value}")
    print(result.message)


def cmd_play(args, config, input_fn=input):
    """Play interactively: lane numbers select, 's' skips, 'q' quits."""
    from .schemas import GameRecord
    from .session import GameLoop

    if args.seed is not None:
        config.seed = args.seed
    if args.no_forced_loss:
        config.detect_forced_loss = False

    loop = GameLoop(config)
    result = loop.start()
    print(f"Seed: {loop.seed}")
    _print_turn(result)

    while not loop.phase.is_terminal:
        try:
            command = input_fn("lane 1-4, s=skip, q=quit > ").strip().lower()
        except EOFError:
            break
        if command == "q":
            break
        if command == "s":
            result = loop.skip()
        elif command.isdigit():
            result = loop.select_lane(int(command) - 1)
        else:
            print(f"Unknown command: {command}")
            continue
        _print_turn(result)

    if args.save:
        record = GameRecord.from_loop(loop)
        Path(args.save).write_text(record.model_dump_json(indent=2), encoding="utf-8")
        print(f"Saved game record to {args.save}")
    return 0


def cmd_replay(args, config):
    """Replay a GameRecord file."""
    from .engine_core.errors import ReplayError
    from .schemas import GameRecord
    from .session import replay

    try:
        text = Path(args.record_file).read_text(encoding="utf-8")
    except FileNotFoundError:
        print(f"Error: File not found: {args.record_file}")
        sys.exit(1)

    try:
        record = GameRecord.model_validate_json(text)
    except ValidationError as e:
        _print_invalid(f"Invalid game record: {args.record_file}", e)
        sys.exit(1)

    try:
        loop = replay(record.seed, record.turn_inputs(), record.apply_settings(config))
    except ReplayError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(loop.board.render())
    print(f"Turns: {loop.turn_number}")
    print(f"Phase: {loop.phase.value}")
    print(loop.message)
    return 0


def cmd_check(args):
    """Report win and forced-loss status for a board snapshot."""
    from .engine_core import BoardValidationError, check_win, detect_forced_loss, find_escape
    from .schemas import BoardSnapshot

    try:
        text = Path(args.board_file).read_text(encoding="utf-8")
    except FileNotFoundError:
        print(f"Error: File not found: {args.board_file}")
        sys.exit(1)

    try:
        board = BoardSnapshot.model_validate_json(text).to_board()
    except ValidationError as e:
        _print_invalid(f"Invalid board snapshot: {args.board_file}", e)
        sys.exit(1)
    except BoardValidationError as e:
        print(f"Error: {e}")
        for err in e.errors:
            print(f"  - {err}")
        sys.exit(1)

    lane = args.drop_lane - 1
    if not 0 <= lane < len(board):
        print(f"Error: drop lane must be 1 to {len(board)}")
        sys.exit(1)

    print(board.render())
    print(f"Win: {'yes' if check_win(board) else 'no'}")
    forced = detect_forced_loss(board, lane)
    if forced:
        print(f"Forced loss: {forced}")
    else:
        escape = find_escape(board, lane)
        if escape and escape.kind == "move":
            print(f"Safe: move lane {escape.from_lane + 1} to lane {escape.to_lane + 1}")
        elif escape:
            print("Safe: skipping survives the drop")
        else:
            print("Safe: no forced loss")
    return 0


if __name__ == "__main__":
    main()
