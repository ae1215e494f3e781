from __future__ import annotations

import argparse
from pathlib import Path

from tour_booking.connections.mongo import init_mongo, close_mongo
from tour_booking.dev_data import DEFAULT_TOURS_FILE, delete_data, import_data
from tour_booking.utils.config import settings
from tour_booking.utils.logging_config import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Load or wipe the sample tour data.")
    action = parser.add_mutually_exclusive_group(required=True)
    action.add_argument("--import", dest="import_", action="store_true", help="import tours from the JSON file")
    action.add_argument("--delete", action="store_true", help="delete every tour")
    parser.add_argument("--file", type=Path, default=DEFAULT_TOURS_FILE, help="tours JSON file")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(settings.log_level)

    init_mongo()
    try:
        if args.import_:
            import_data(args.file)
        else:
            delete_data()
    finally:
        close_mongo()


if __name__ == "__main__":
    main()
