"""CLI commands for parsing, summarising and serving ascension logs."""

import argparse
import json
import sys
from typing import Optional

from kolviz.config.logging import setup_logging
from kolviz.config.settings import Settings
from kolviz.core.log_data import LogData
from kolviz.core.models import Statgain, TurnInterval
from kolviz.core.summary import LogSummary, compute_summary
from kolviz.data.reference import load_reference_data
from kolviz.parser.log_parser import parse_session_log
from kolviz.parser.preparsed_parser import parse_preparsed_log

RUNDOWN_FINISHED = "Turn rundown finished!"


def _settings_from_args(args: argparse.Namespace) -> Settings:
    return Settings.from_args(
        log_path=args.file,
        preparsed=getattr(args, "preparsed", False),
        include_notes=not getattr(args, "no_notes", False),
        old_ascension_counting=getattr(args, "old_counting", False),
        portable=getattr(args, "portable", False),
        host=getattr(args, "host", None),
        port=getattr(args, "port", None),
    )


def _load_log(settings: Settings) -> Optional[LogData]:
    """Parse the configured log, printing errors instead of raising."""
    errors = settings.validate()
    if errors:
        for error in errors:
            print(f"Error: {error}")
        return None

    reference = load_reference_data()
    try:
        if settings.preparsed:
            return parse_preparsed_log(settings.log_path, settings, reference)
        return parse_session_log(settings.log_path, settings, reference)
    except OSError as e:
        print(f"Error: Could not read {settings.log_path}: {e}")
        return None


def _format_stats(stats: Statgain) -> str:
    return f"[{stats.mus},{stats.myst},{stats.mox}]"


def _format_interval(interval: TurnInterval) -> str:
    if interval.total_turns > 1:
        turns = f"{interval.start_turn + 1}-{interval.end_turn}"
    else:
        turns = str(interval.end_turn)
    return f"[{turns}] {interval.area_name} {_format_stats(interval.stat_gain)}"


def format_rundown(log_data: LogData) -> list[str]:
    """
    Render the turn rundown of a log.

    Uses the pre-parsed log notation, so the output can be read back with
    ``parse --preparsed``.
    """
    lines = []
    days = sorted(log_data.day_changes.values(), key=lambda d: d.day_number)
    day_index = 0
    for interval in log_data.turn_intervals:
        while day_index + 1 < len(days) and days[day_index + 1].turn_number < interval.end_turn:
            day_index += 1
            lines.append("")
            lines.append(f"===Day {days[day_index].day_number}===")
            lines.append("")

        lines.append(_format_interval(interval))
        for consumable in interval.consumables_used:
            verb = {"FOOD": "Ate", "BOOZE": "Drank", "SPLEEN": "Chew"}.get(consumable.version.name, "Used")
            lines.append(
                f"     o> {verb} {consumable.amount} {consumable.name} "
                f"({consumable.adventure_gain} adventures gained) {_format_stats(consumable.stat_gain)}"
            )
        if interval.dropped_items:
            names = ", ".join(item.name for item in interval.dropped_items)
            lines.append(f"     +> [{interval.end_turn}] Got {names}")

    lines.append("")
    lines.append(RUNDOWN_FINISHED)
    return lines


def _print_summary(log_data: LogData, summary: LogSummary) -> None:
    print(f"Log: {log_data.log_name}")
    print(f"Class: {log_data.character_class.display_name}")
    print(f"Path: {log_data.ascension_path.value} ({log_data.game_mode.value})")
    print(f"Turns: {log_data.last_turn_number} over {len(log_data.day_changes)} days")
    print("-" * 50)
    print(f"Combats: {summary.combat_turns}  Noncombats: {summary.noncombat_turns}  Other: {summary.other_turns}")
    print(f"Stats gained: {_format_stats(summary.total_stats)}")
    print(f"Meat gained: {summary.total_meat_gain}  spent: {summary.total_meat_spent}")
    print(f"MP gained: {summary.total_mp_gain.total}  used: {summary.total_mp_used}")
    print(
        f"Turns from food: {summary.turns_from_food}  booze: {summary.turns_from_booze}  "
        f"other: {summary.turns_from_other}  rollover: {summary.turns_from_rollover}"
    )
    print(f"Free runaways: {summary.free_runaways}")
    print("-" * 50)
    print("Turns per area:")
    for area, turns in summary.turns_per_area[:20]:
        print(f"  {turns:>5} {area}")
    if len(summary.levels) > 1:
        print("Levels:")
        for level in summary.levels:
            print(f"  Level {level.level_number:>2} on turn {level.level_reached_on_turn}")


def cmd_parse(args: argparse.Namespace) -> int:
    """Parse a log and print its turn rundown."""
    settings = _settings_from_args(args)
    setup_logging(console=True, verbose=args.verbose, data_dir=settings.data_dir)

    log_data = _load_log(settings)
    if log_data is None:
        return 1

    for line in format_rundown(log_data):
        print(line)
    return 0


def cmd_summary(args: argparse.Namespace) -> int:
    """Parse a log and print its summary."""
    settings = _settings_from_args(args)
    setup_logging(console=True, verbose=args.verbose, data_dir=settings.data_dir)

    log_data = _load_log(settings)
    if log_data is None:
        return 1

    summary = compute_summary(log_data, load_reference_data())
    if args.json:
        from kolviz.api.schemas import build_summary

        print(json.dumps(build_summary(summary).model_dump(), indent=2))
    else:
        _print_summary(log_data, summary)
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Parse a log once and serve it through the read-only API."""
    from kolviz.version import __version__

    settings = _settings_from_args(args)
    logger = setup_logging(console=True, verbose=args.verbose, data_dir=settings.data_dir)
    logger.info(f"KolViz v{__version__} starting...")

    # Import here to avoid loading FastAPI when not needed
    try:
        import uvicorn
        from kolviz.api.app import create_app
    except ImportError:
        logger.error("FastAPI and Uvicorn are required for the serve command.")
        logger.error("Install with: pip install fastapi uvicorn[standard]")
        return 1

    log_data = _load_log(settings)
    if log_data is None:
        return 1

    summary = compute_summary(log_data, load_reference_data())
    app = create_app(log_data, summary, log_path=settings.log_path)

    logger.info(f"Serving {log_data.log_name} at http://{settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level="warning")
    return 0


def _add_parse_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "file",
        type=str,
        help="Session log or pre-parsed log to read",
    )
    parser.add_argument(
        "--preparsed",
        action="store_true",
        help="Read the file as a pre-parsed turn rundown",
    )
    parser.add_argument(
        "--no-notes",
        action="store_true",
        help="Ignore note, header and footer comments",
    )
    parser.add_argument(
        "--old-counting",
        action="store_true",
        help="Keep parsing after the end of the run",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="kolviz",
        description="KoLmafia ascension log parser and visualizer backend",
    )
    parser.add_argument(
        "--portable",
        action="store_true",
        help="Use portable mode (data beside the app)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log discarded lines and numbers",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # parse command
    parse_parser = subparsers.add_parser("parse", help="Print the turn rundown of a log")
    _add_parse_options(parse_parser)

    # summary command
    summary_parser = subparsers.add_parser("summary", help="Print the summary of a log")
    _add_parse_options(summary_parser)
    summary_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the summary as JSON",
    )

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Serve a parsed log over HTTP")
    _add_parse_options(serve_parser)
    serve_parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to run server on (default: 8000)",
    )
    serve_parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "parse": cmd_parse,
        "summary": cmd_summary,
        "serve": cmd_serve,
    }

    cmd_func = commands.get(args.command)
    if cmd_func is None:
        print(f"Unknown command: {args.command}")
        return 1

    return cmd_func(args)


if __name__ == "__main__":
    sys.exit(main())
