from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import TextIO

from dice_arena.config import RollConfig, load_roll_config
from dice_arena.engine import throw
from dice_arena.errors import AssessmentError, ConfigFormatError, NotationError
from dice_arena.notation import RollRequest, parse_roll
from dice_arena.reporting import format_results, summarize
from dice_arena.resolver import RollResult, resolve
from dice_arena.table import LiveTable, goto, render_arena

HELP = """
Enter dice rolls in the format:
'[coefficient]d[die kind]+/-[modifier]'.
Separate roll commands with commas or slashes.

Special rolls --
Advantage roll: 'adv d[dice kind]'.
Disadvantage roll: 'disadv d[dice kind]'.
Percentile roll: 'd100' or 'd%'.

Modifiers may be applied to any roll type,
but you may not add additional dice
to a special roll.

Enter 'quit' or 'exit' to close program."""


def _roll(request: RollRequest, config: RollConfig, *, out: TextIO, show_arena: bool = False) -> RollResult:
    """Throw the dice of one request, wait for them to settle, and resolve."""
    arena = config.arena()
    rng = random.Random(config.seed) if config.seed is not None else None

    live: LiveTable | None = None
    if config.live:
        live = LiveTable(out, arena, dict(enumerate(request.dice)), color=config.color)
        live.hide_cursor()
        live.clear()

    try:
        agg = throw(
            request.dice,
            arena,
            rng=rng,
            time_scale=config.time_scale,
            on_update=live.update if live is not None else None,
        )
    finally:
        if live is not None:
            live.show_cursor()

    snapshot = agg.final_snapshot()
    if live is not None:
        # Dice that ran over each other may have been erased mid-roll.
        live.redraw(snapshot)
        out.write(goto(1, arena.height) + "\n")
    elif show_arena:
        out.write(render_arena(snapshot, arena, color=config.color))

    return resolve(request.mode, snapshot.faces(), request.commands)


def _load_config(args: argparse.Namespace) -> RollConfig:
    config = RollConfig()
    if args.config:
        config = load_roll_config(Path(str(args.config)))
    return config.merged(
        width=args.width,
        height=args.height,
        seed=args.seed,
        time_scale=args.time_scale,
        color=args.color,
        live=args.live,
    )


def _cmd_roll(args: argparse.Namespace) -> int:
    try:
        config = _load_config(args)
    except ConfigFormatError as e:
        print(f"ERROR: invalid config: {e}", file=sys.stderr)
        return 2

    try:
        request = parse_roll(str(args.notation))
    except NotationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    try:
        result = _roll(request, config, out=sys.stdout, show_arena=bool(args.show_arena))
    except AssessmentError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    except ValueError as e:
        # Arena too small for the terminal or the requested size.
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    sys.stdout.write(format_results(result, color=config.color))
    sys.stdout.write(f"Result: {summarize(result, color=config.color)}\n")
    return 0


def _cmd_shell(args: argparse.Namespace) -> int:
    try:
        config = _load_config(args)
    except ConfigFormatError as e:
        print(f"ERROR: invalid config: {e}", file=sys.stderr)
        return 2

    sys.stdout.write("\nEnter command (or 'help' / 'quit'):")
    while True:
        sys.stdout.write("\nRoll: ")
        sys.stdout.flush()
        line = sys.stdin.readline()
        if not line:
            sys.stdout.write("\n")
            return 0

        command = line.strip().lower()
        if command == "help":
            print(HELP)
            continue
        if command in {"quit", "exit"}:
            return 0
        if not command:
            continue

        try:
            request = parse_roll(line)
            result = _roll(request, config, out=sys.stdout)
        except (NotationError, AssessmentError, ValueError) as e:
            print(str(e))
            continue
        print(f"Result: {summarize(result, color=config.color)}")


def _add_roll_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", type=str, help="Roll config JSON (arena size, seed, time scale).")
    p.add_argument("--width", type=int, default=None, help="Arena width in columns (default: terminal).")
    p.add_argument("--height", type=int, default=None, help="Arena height in rows (default: terminal).")
    p.add_argument("--seed", type=int, default=None, help="Seed for a reproducible roll.")
    p.add_argument(
        "--time-scale",
        type=float,
        default=None,
        help="Multiplier on the delay between steps (1.0 real time, 0 no delay).",
    )
    p.add_argument("--color", action="store_true", default=None, help="Colour natural 20s and 1s.")
    p.add_argument("--live", action="store_true", default=None, help="Animate the dice with ANSI codes.")
    p.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (logs go to stderr).",
    )


def build_parser() -> argparse.ArgumentParser:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="dice_arena",
        description=(
            "Dice Arena — terminal dice roller.\n"
            "\n"
            "Dice bounce around the arena on their own threads until they settle,\n"
            "then the roll is resolved (normal, advantage, disadvantage, percentile)."
        ),
    )

    sub = parser.add_subparsers(dest="command", required=True)

    roll = sub.add_parser("roll", help="Throw one roll and print the results table.")
    roll.add_argument("notation", type=str, help="Roll notation, e.g. '2d6+1, d20' or 'adv d20'.")
    roll.add_argument(
        "--show-arena",
        action="store_true",
        help="Print the settled arena before the results.",
    )
    _add_roll_options(roll)
    roll.set_defaults(func=_cmd_roll)

    shell = sub.add_parser("shell", help="Read rolls line by line from stdin.")
    _add_roll_options(shell)
    shell.set_defaults(func=_cmd_shell)

    return parser


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level)),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
