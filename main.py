"""Entry point: load the configuration and open the paging calendar window."""

import argparse
import logging
import sys
from datetime import date

from settings import configuration_from_settings, load_settings

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Paging week/month calendar.")
    ap.add_argument("--config", default=None, help="Settings JSON file (default: ~/.mini-calendar-pager.json)")
    ap.add_argument("--style", choices=("week", "month"), default=None, help="Section style")
    ap.add_argument("--dynamic-rows", action="store_true", default=None,
                    help="Month pages end with the last week instead of a fixed 6-row grid")
    ap.add_argument("--axis", choices=("horizontal", "vertical"), default=None, help="Scroll axis")
    ap.add_argument("--start-of-week", default=None, help="First weekday, e.g. sun or mon")
    ap.add_argument("--date", default=None, help="Initial date (YYYY-MM-DD), default today")
    ap.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return ap


def settings_from_args(args: argparse.Namespace) -> dict:
    """Overlay command-line options on the settings file."""
    settings = load_settings(args.config)
    if args.style is not None:
        settings["style"] = args.style
    if args.dynamic_rows is not None:
        settings["dynamic_rows"] = args.dynamic_rows
    if args.axis is not None:
        settings["axis"] = args.axis
    if args.start_of_week is not None:
        settings["start_of_week"] = args.start_of_week
    return settings


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        configuration = configuration_from_settings(settings_from_args(args))
        initial_date = date.fromisoformat(args.date) if args.date else None
    except ValueError as e:  # ConfigurationError included
        logger.error("invalid configuration: %s", e)
        return 2

    # Imported late so configuration errors surface without a display
    from calendar_window import CalendarWindow

    CalendarWindow(configuration, initial_date=initial_date).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
