"""
mpvremote store - Entry Point

Run with: python -m mpvremote
"""

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict, replace
from pathlib import Path

from mpvremote import __version__
from mpvremote.config import load_settings
from mpvremote.core.store import MediaStore, MediaStoreError


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="mpvremote",
        description="Inspect and update the mpv remote progress/collections database",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Settings file (default: <mpv home>/scripts/mpvremote/settings.toml)",
    )

    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Database file (overrides the settings file)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init", help="Create the database and tables")

    progress = sub.add_parser("progress", help="Record playback progress for a file")
    progress.add_argument("path", help="Full path of the media file")
    progress.add_argument("time", help="Playback position in seconds")
    progress.add_argument("percent", help="Playback position in percent")

    status = sub.add_parser("status", help="Show recorded playback progress")
    target = status.add_mutually_exclusive_group()
    target.add_argument("--file", dest="filepath", help="Single file")
    target.add_argument("--dir", dest="directory", help="All files in a directory")

    collections = sub.add_parser("collections", help="List collections")
    collections.add_argument("id", type=int, nargs="?", help="Show one collection with its paths")

    return parser.parse_args(argv)


def _to_json(value: object) -> object:
    if value is None:
        return None
    if isinstance(value, list):
        return [_to_json(v) for v in value]
    return asdict(value)  # type: ignore[call-overload]


async def run_command(args: argparse.Namespace) -> object:
    """Execute the selected subcommand and return a JSON-serializable result."""
    settings = load_settings(args.config)
    if args.db is not None:
        settings = replace(settings, db_path=args.db)

    async with MediaStore.from_settings(settings) as store:
        if args.command == "init":
            return {"db_path": store.db_path}
        if args.command == "progress":
            return _to_json(await store.add_media_status_entry(args.path, args.time, args.percent))
        if args.command == "status":
            return _to_json(
                await store.get_media_status_entries(
                    filepath=args.filepath, directory=args.directory
                )
            )
        if args.command == "collections":
            return _to_json(await store.get_collections(args.id))

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the application."""
    args = parse_args(argv)
    setup_logging(verbose=args.verbose)

    logger = logging.getLogger(__name__)

    try:
        result = asyncio.run(run_command(args))
    except (MediaStoreError, ValueError) as e:
        logger.error("%s", e)
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
