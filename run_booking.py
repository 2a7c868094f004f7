#!/usr/bin/env python3
"""
Yoga Lesson Booking Script.

Shows a day's lessons with their booking status for a viewer, and books
or cancels lessons on the studio backend.

Usage:
    python run_booking.py [--openid OPENID] schedule [--date YYYY-MM-DD] [--export]
    python run_booking.py [--openid OPENID] book --lesson-id ID
    python run_booking.py [--openid OPENID] unbook --reservation-id ID

Examples:
    # Today's lessons as an anonymous viewer
    python run_booking.py schedule

    # Lessons of a given day, exported to output/schedules
    python run_booking.py --openid oXy1AbCd schedule --date 2025-10-20 --export

    # Book lesson 42, then cancel reservation 55
    python run_booking.py --openid oXy1AbCd book --lesson-id 42
    python run_booking.py --openid oXy1AbCd unbook --reservation-id 55

    # Use open_id from environment variable
    export YOGA_OPENID="oXy1AbCd"
    python run_booking.py schedule
"""

import argparse
import logging
import sys
from datetime import datetime
from typing import List, Optional

import requests

from yoga_booking.api.client import YogaApiClient
from yoga_booking.booking.page import BookingOutcome, BookingPage
from yoga_booking.booking.session import ViewerSession
from yoga_booking.models.lesson import EnrichedLesson
from yoga_booking.resilience.circuit_breaker import CircuitBreaker
from yoga_booking.utils.config import config
from yoga_booking.utils.file_utils import export_schedule
from yoga_booking.utils.logger import setup_logger


def parse_arguments(argv: Optional[List[str]] = None):
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Browse and book yoga lessons",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument(
        "--openid",
        help="Viewer open_id (overrides YOGA_OPENID env var)"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: LOG_LEVEL env var or INFO)"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    schedule = commands.add_parser("schedule", help="Show lessons of a day")
    schedule.add_argument(
        "--date",
        help="Day in YYYY-MM-DD format (default: today)"
    )
    schedule.add_argument(
        "--export",
        action="store_true",
        help="Save the schedule as JSON and CSV under OUTPUT_DIR/schedules"
    )

    book = commands.add_parser("book", help="Book a lesson")
    book.add_argument("--lesson-id", type=int, required=True)

    unbook = commands.add_parser("unbook", help="Cancel a reservation")
    unbook.add_argument("--reservation-id", type=int, required=True)

    return parser.parse_args(argv)


def parse_day(day_str: str, tz=None) -> int:
    """
    Parse a YYYY-MM-DD day to its start in epoch seconds.

    Raises:
        ValueError: If format is invalid
    """
    try:
        day = datetime.strptime(day_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValueError(f"Invalid date '{day_str}': {e}")

    return int(day.replace(tzinfo=tz).timestamp())


def display_schedule(lessons: List[EnrichedLesson], holiday: bool):
    """Print the classified lessons of a day."""
    print("\n" + "=" * 60)
    print("LESSONS")
    print("=" * 60)

    if holiday:
        print("No lessons available (holiday or backend unreachable)")
        print("=" * 60)
        return

    if not lessons:
        print("No lessons scheduled")

    for lesson in lessons:
        title = lesson.get("title") or ""
        booked = len(lesson.get("users") or [])
        print(
            f"{lesson.get('id', '')!s:>5} | {lesson.get('date', '')} {lesson.get('time', ''):11s} | "
            f"{booked}/{lesson.get('peoples') or 0:<3} | {lesson.get('label', ''):6s} | {title}"
        )
        if "reservation_id" in lesson:
            print(f"      reservation: {lesson['reservation_id']}")

    print("=" * 60)


def build_page(open_id: Optional[str]) -> BookingPage:
    """Wire client, session and page from configuration."""
    client = YogaApiClient(
        base_url=config.api_base_url,
        timeout=config.request_timeout,
        class_type=config.class_type,
        circuit_breaker=CircuitBreaker(
            failure_threshold=config.circuit_failure_threshold,
            reset_timeout=config.circuit_reset_timeout,
            expected_exception=requests.RequestException
        )
    )
    session = ViewerSession(client, open_id)
    return BookingPage(client, session, tz=config.timezone)


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution function."""
    args = parse_arguments(argv)

    log_level = args.log_level or config.log_level
    logger = setup_logger("yoga_booking", level=getattr(logging, log_level, logging.INFO))

    try:
        config.validate()
    except ValueError as e:
        logger.error(str(e))
        print(f"ERROR: {e}")
        return 1

    open_id = args.openid or config.open_id
    page = build_page(open_id)

    try:
        if args.command == "schedule":
            if args.date:
                result = page.select_day(parse_day(args.date, config.timezone))
            else:
                result = page.load()

            display_schedule(page.lessons, page.holiday)

            if args.export and result.is_success:
                config.create_output_directories()
                stem = f"schedule_{datetime.fromtimestamp(page.selected_time, page.tz):%Y%m%d}"
                written = export_schedule(page.lessons, config.output_dir / "schedules", stem)
                for path in written.values():
                    print(f"Saved: {path}")

            return 0 if result.is_success else 1

        if args.command == "book":
            outcome = page.book(args.lesson_id)
        else:
            outcome = page.unbook(args.reservation_id)

        print(page.notice or outcome.value)
        return 0 if outcome in (BookingOutcome.BOOKED, BookingOutcome.CANCELLED) else 1

    except ValueError as e:
        logger.error(str(e))
        print(f"ERROR: {e}")
        return 1

    finally:
        page.client.close()


if __name__ == "__main__":
    sys.exit(main())
