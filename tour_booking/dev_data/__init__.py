from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

from tour_booking.models.tour import Tour


logger = logging.getLogger(__name__)

DEFAULT_TOURS_FILE = Path(__file__).parent / "tours-simple.json"


def load_tours(path: Path = DEFAULT_TOURS_FILE) -> list[dict]:
    with open(path, encoding="utf-8") as handle:
        return json.load(handle)


def import_data(path: Path = DEFAULT_TOURS_FILE) -> list[Tour]:
    """Create every tour in `path`; stops at the first tour that fails validation."""
    tours: list[Tour] = []
    for payload in load_tours(path):
        payload["start_dates"] = [datetime.fromisoformat(value) for value in payload.get("start_dates", [])]
        tour = Tour(**payload)
        tour.save()
        tours.append(tour)
    logger.info("Imported %d tours from %s", len(tours), path)
    return tours


def delete_data() -> int:
    """Delete all tours, secret ones included."""
    deleted = Tour.all_tours.delete()
    logger.info("Deleted %d tours", deleted)
    return deleted
