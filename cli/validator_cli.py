"""CLI for registering locations and running checksum validation."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from integrity.config import Settings
from integrity.exceptions import JobError
from integrity.jobs.base import CompletedTaskCount, JobReportUpdate, TaskCount
from integrity.main import (
    _configure_logging,
    add_location,
    index_location,
    list_jobs,
    run_object_validator,
)


class ConsoleProgress:
    """Prints validator progress to stderr."""

    def __init__(self) -> None:
        self.total = 0

    def __call__(self, updates: list[JobReportUpdate]) -> None:
        for update in updates:
            if isinstance(update, TaskCount):
                self.total = update.count
                print(f"Files to validate: {self.total}", file=sys.stderr)
            elif isinstance(update, CompletedTaskCount):
                print(f"  [{update.count}/{self.total}]", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="integrity-validator",
        description="Compute integrity checksums for catalogued files",
    )
    parser.add_argument("--database-url", help="Database URL (default: from settings)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command")

    add_parser = subparsers.add_parser("add-location", help="Register a directory as a location")
    add_parser.add_argument("path", help="Directory to register")
    add_parser.add_argument("--name", help="Display name (default: directory name)")

    index_parser = subparsers.add_parser("index", help="Add untracked files to the catalog")
    index_parser.add_argument("location_id", type=int, help="Location id")

    validate_parser = subparsers.add_parser(
        "validate", help="Compute missing checksums in a location"
    )
    validate_parser.add_argument("location_id", type=int, help="Location id")
    validate_parser.add_argument("--sub-path", help="Restrict to a directory inside the location")

    jobs_parser = subparsers.add_parser("jobs", help="Show recent job history")
    jobs_parser.add_argument("--limit", type=int, default=20, help="Number of jobs to show")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    overrides: dict[str, object] = {}
    if args.database_url:
        overrides["database_url"] = args.database_url
    if args.debug:
        overrides["debug"] = True
    settings = Settings(**overrides)  # type: ignore[arg-type]
    _configure_logging(settings.debug)

    try:
        if args.command == "add-location":
            location = asyncio.run(add_location(settings, Path(args.path), args.name))
            print(f"Registered location {location.id}: {location.path}")
        elif args.command == "index":
            added = asyncio.run(index_location(settings, args.location_id))
            print(f"Indexed {added} new entries")
        elif args.command == "validate":
            sub_path = Path(args.sub_path) if args.sub_path else None
            report = asyncio.run(
                run_object_validator(settings, args.location_id, sub_path, ConsoleProgress())
            )
            print(f"Job {report.id} {report.status}: {report.task_count} tasks")
        elif args.command == "jobs":
            for entry in asyncio.run(list_jobs(settings, args.limit)):
                print(
                    f"{entry.id}  {entry.name:<18} {entry.status:<10} "
                    f"{entry.completed_task_count}/{entry.task_count}  {entry.date_created}"
                )
        else:
            parser.print_help()
    except (JobError, ValueError) as exc:
        print(f"Error: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
