"""
Command-line interface: fetch the MyAnimeList schedule and export to file, or serve it over HTTP.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import __version__
from .config import get_config
from .export import export
from .logging import setup_logging
from .models import Schedule
from .schedule_fetch import fetch_schedule
from .schedule_html import parse_schedule_html
from .server import serve


def _print_summary(schedule: Schedule) -> None:
    print("Day        | Score | Members   | Title")
    print("-" * 60)
    for group in schedule.groups:
        for r in group.records:
            score = f"{r.score:.2f}" if r.score is not None else "-"
            members = f"{r.audience:,}" if r.audience is not None else "-"
            print(f"{group.label:<10} | {score:>5} | {members:>9} | {r.title[:40]}")
    print(f"\n{schedule.total} show(s) across {len(schedule.groups)} day(s)")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description=(
            "Export the MyAnimeList weekly anime schedule to ICS / CSV / JSON.\n"
            "- Fetch the live schedule page, parse a saved copy, or serve it as a JSON API."
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-o",
        "--output",
        default="anime_schedule",
        help="Output path (without extension). Default: anime_schedule",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["ics", "csv", "json"],
        default="json",
        help="Export format. Default: json",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--fetch",
        action="store_true",
        help="Fetch the schedule page from MyAnimeList, then export.",
    )
    mode.add_argument(
        "--schedule-html",
        metavar="HTML_PATH",
        help="Parse a schedule page saved from the browser instead of fetching it.",
    )
    mode.add_argument(
        "--serve",
        action="store_true",
        help="Run the JSON API server (GET /api/anime-schedule).",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print a per-day summary of the parsed schedule then exit.",
    )
    parser.add_argument("--host", help="(Serve mode) Interface to bind. Default from MAL_HOST or 127.0.0.1.")
    parser.add_argument("--port", type=int, help="(Serve mode) Port to listen on. Default from MAL_PORT/PORT or 3000.")
    parser.add_argument("--log-json", action="store_true", help="Emit logs as JSON lines.")
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR).")
    args = parser.parse_args(argv)

    config = get_config()
    if args.host is not None:
        config = config.model_copy(update={"host": args.host})
    if args.port is not None:
        config = config.model_copy(update={"port": args.port})
    setup_logging(
        json_output=args.log_json or config.log_json,
        log_level=args.log_level or config.log_level,
    )

    if args.serve:
        serve(config)
        return 0

    if args.fetch:
        try:
            schedule = fetch_schedule(config)
        except Exception as e:
            print(f"Error fetching schedule: {e}", file=sys.stderr)
            return 1
    elif args.schedule_html:
        if not Path(args.schedule_html).is_file():
            print(f"Error: --schedule-html not found: {args.schedule_html}", file=sys.stderr)
            return 1
        try:
            schedule = parse_schedule_html(
                html_path=args.schedule_html,
                origin=config.origin,
                image_format=config.image_format,
            )
        except Exception as e:
            print(f"Error parsing schedule HTML: {e}", file=sys.stderr)
            return 1
    else:
        print(
            "No mode specified. Use --fetch to scrape MyAnimeList, "
            "--schedule-html for a saved HTML file, or --serve to run the API.",
            file=sys.stderr,
        )
        return 1

    if args.list:
        _print_summary(schedule)
        return 0

    ext = {"ics": ".ics", "csv": ".csv", "json": ".json"}[args.format]
    out_path = Path(args.output).with_suffix(ext) if Path(args.output).suffix else Path(args.output + ext)
    export(schedule, out_path, args.format)
    print(f"Exported {schedule.total} show(s) to {out_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
