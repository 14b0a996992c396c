"""Command line entry point for Job Tracker."""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from job_tracker import __version__
from job_tracker.config.settings import Settings
from job_tracker.utils.logging import configure_logging


def _hour(value: str) -> int:
    hour = int(value)
    if not (0 <= hour <= 23):
        raise argparse.ArgumentTypeError("hour must be between 0 and 23")
    return hour


def _minute(value: str) -> int:
    minute = int(value)
    if not (0 <= minute <= 59):
        raise argparse.ArgumentTypeError("minute must be between 0 and 59")
    return minute


def _add_record_fields(parser: argparse.ArgumentParser) -> None:
    """Options shared by ``add`` and ``update``; all default to "not given"."""
    parser.add_argument("--company", dest="company_name", default=None)
    parser.add_argument("--link", dest="job_link", default=None)
    parser.add_argument("--contact-method", default=None)
    parser.add_argument("--cv", dest="cv_used", default=None)
    parser.add_argument("--notes", default=None)
    parser.add_argument("--source", default=None)
    parser.add_argument("--contact-email", default=None)
    parser.add_argument("--applied", dest="application_date", default=None)
    parser.add_argument("--follow-up", dest="follow_up_date", default=None)
    parser.add_argument("--interview", dest="interview_date", default=None)
    parser.add_argument("--status", default=None, help="Status name or value")
    parser.add_argument("--tag", dest="tags", action="append", default=None)


RECORD_FIELDS = (
    "company_name",
    "job_link",
    "contact_method",
    "cv_used",
    "notes",
    "source",
    "contact_email",
    "application_date",
    "follow_up_date",
    "interview_date",
    "status",
    "tags",
)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="job-tracker",
        description="Job Tracker: keep track of job applications and follow-ups",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m job_tracker add "Flutter Developer" --company Acme --follow-up 2026-11-02
  python -m job_tracker list --search acme --sort nameAZ
  python -m job_tracker stats
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set the log level (overrides settings)",
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Override the database path (defaults to settings)",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="Available commands",
    )

    list_parser = subparsers.add_parser("list", help="List job applications")
    list_parser.add_argument("--search", default="", help="Search text")
    list_parser.add_argument("--status", default=None, help="Only this status")
    list_parser.add_argument(
        "--sort",
        default=None,
        help="dateNewest, dateOldest, nameAZ or nameZA",
    )
    list_parser.add_argument(
        "--filter",
        dest="dashboard_filter",
        default=None,
        help="interviews, followUps or successful",
    )

    add_parser = subparsers.add_parser("add", help="Add a job application")
    add_parser.add_argument("job_name", help="Job title")
    _add_record_fields(add_parser)
    add_parser.add_argument(
        "--force",
        action="store_true",
        help="Add even if a similar application already exists",
    )

    update_parser = subparsers.add_parser("update", help="Update a job application")
    update_parser.add_argument("id", help="Record id")
    update_parser.add_argument("--name", dest="job_name", default=None)
    _add_record_fields(update_parser)

    show_parser = subparsers.add_parser("show", help="Show one job application")
    show_parser.add_argument("id", help="Record id")

    delete_parser = subparsers.add_parser("delete", help="Delete job applications")
    delete_parser.add_argument("ids", nargs="+", help="Record ids")

    dup_parser = subparsers.add_parser(
        "duplicates", help="Check for existing similar applications"
    )
    dup_parser.add_argument("job_name", help="Job title")
    dup_parser.add_argument("--company", dest="company_name", default=None)

    subparsers.add_parser("stats", help="Show dashboard statistics")

    reschedule_parser = subparsers.add_parser(
        "reschedule", help="Move all reminders to a new time of day"
    )
    reschedule_parser.add_argument("hour", type=_hour)
    reschedule_parser.add_argument("minute", type=_minute)

    return parser


def _format_record(record) -> str:
    company = f" @ {record.company_name}" if record.company_name else ""
    date_part = record.application_date or record.created_at[:10]
    pin = "*" if record.is_pinned else " "
    return (
        f"{pin} {record.id}  {date_part}  {record.status.display_name:<20} "
        f"{record.job_name}{company}"
    )


async def _run(parsed: argparse.Namespace, settings: Settings) -> int:
    from job_tracker.notifications.gateway import (
        LoggingNotificationBackend,
        NotificationGateway,
    )
    from job_tracker.query.engine import DashboardFilter, SortOption
    from job_tracker.records.models import JobStatus
    from job_tracker.records.store import SqliteRecordStore
    from job_tracker.state.controller import JobsController

    store = SqliteRecordStore(parsed.db or settings.db_path)
    await store.initialize()
    controller = JobsController(
        store,
        NotificationGateway(LoggingNotificationBackend()),
        settings=settings,
    )

    try:
        await controller.load_all()
        if controller.state.error_message:
            print(controller.state.error_message, file=sys.stderr)
            return 1

        if parsed.command == "list":
            if parsed.status:
                controller.set_status_filter(JobStatus.parse(parsed.status))
            if parsed.sort:
                try:
                    controller.set_sort_option(SortOption(parsed.sort))
                except ValueError:
                    print("Invalid --sort", file=sys.stderr)
                    return 1
            if parsed.dashboard_filter:
                try:
                    controller.set_dashboard_filter(
                        DashboardFilter(parsed.dashboard_filter)
                    )
                except ValueError:
                    print("Invalid --filter", file=sys.stderr)
                    return 1
            controller.set_search_query(parsed.search)

            for record in controller.state.filtered_records:
                print(_format_record(record))
            print(
                f"{controller.state.displayed_count} of "
                f"{controller.state.total_count} applications"
            )
            return 0

        if parsed.command == "add":
            if not parsed.force:
                duplicates = controller.find_duplicates(
                    parsed.job_name, parsed.company_name
                )
                if duplicates:
                    print("Possible duplicates found (use --force to add anyway):")
                    for record in duplicates:
                        print(_format_record(record))
                    return 1

            fields = {name: getattr(parsed, name) for name in RECORD_FIELDS}
            record = await controller.add_record(parsed.job_name, **fields)
            if record is None:
                print(controller.state.error_message, file=sys.stderr)
                return 1
            print(record.id)
            return 0

        if parsed.command == "update":
            changes = {
                name: getattr(parsed, name)
                for name in ("job_name", *RECORD_FIELDS)
                if getattr(parsed, name) is not None
            }
            record = await controller.update_record(parsed.id, **changes)
            if record is None:
                print(controller.state.error_message or "Not found", file=sys.stderr)
                return 1
            print("ok")
            return 0

        if parsed.command == "show":
            record = controller.get_by_id(parsed.id)
            if record is None:
                print("Not found")
                return 1
            print(json.dumps(record.to_dict(), indent=2))
            return 0

        if parsed.command == "delete":
            for record_id in parsed.ids:
                if controller.get_by_id(record_id) is None:
                    print(f"Not found: {record_id}", file=sys.stderr)
                    return 1
            controller.enter_selection_mode(parsed.ids[0])
            for record_id in parsed.ids[1:]:
                controller.toggle_selection(record_id)
            deleted = await controller.delete_selected()
            if controller.state.error_message:
                print(controller.state.error_message, file=sys.stderr)
                return 1
            print(f"Deleted {deleted}")
            return 0

        if parsed.command == "duplicates":
            duplicates = controller.find_duplicates(
                parsed.job_name, parsed.company_name
            )
            for record in duplicates:
                print(_format_record(record))
            return 1 if duplicates else 0

        if parsed.command == "stats":
            stats = controller.dashboard_stats()
            print(f"Total: {stats.total_jobs}")
            print(f"Interviews: {stats.interviews}")
            print(f"Pending follow-ups: {stats.pending_follow_ups}")
            print(f"Success rate: {stats.success_rate:.1f}%")
            print(f"Overall success rate: {controller.overall_success_rate():.1f}%")
            print(f"Archived: {len(controller.archived_records())}")
            for source, figures in controller.source_success_rates().items():
                print(
                    f"  {source}: {figures.successful}/{figures.total} "
                    f"({figures.rate:.1f}%)"
                )
            for status, count in controller.status_counts().items():
                print(f"{status.display_name}: {count}")
            return 0

        if parsed.command == "reschedule":
            count = await controller.reschedule_all_notifications(
                parsed.hour, parsed.minute
            )
            print(f"Rescheduled {count}")
            return 0

        print("Unknown command", file=sys.stderr)
        return 1
    finally:
        controller.close()
        await store.close()


def main(args: list[str] | None = None) -> int:
    """Main entry point for the application.

    Args:
        args: Command line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    try:
        settings = Settings()
    except Exception as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    log_level = parsed.log_level or settings.log_level
    logger = configure_logging(level=log_level, log_file=settings.log_file)

    if parsed.command is None:
        parser.print_help()
        return 0

    logger.debug(f"Job Tracker v{__version__} running {parsed.command}")
    return asyncio.run(_run(parsed, settings))


if __name__ == "__main__":
    sys.exit(main())
