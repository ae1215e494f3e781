import json

import pytest
from mongoengine import ValidationError

from tour_booking.dev_data import DEFAULT_TOURS_FILE, delete_data, import_data, load_tours
from tour_booking.dev_data.run import build_parser
from tour_booking.models.tour import Tour


def test_import_loads_every_sample_tour():
    tours = import_data()
    assert len(tours) == len(load_tours(DEFAULT_TOURS_FILE))
    assert Tour.objects.count() == len(tours)
    assert all(tour.start_dates for tour in tours)


def test_delete_removes_secret_tours_too(tour_payload):
    import_data()
    Tour(**{**tour_payload, "name": "The Secret Valley", "secret_tour": True}).save()

    deleted = delete_data()

    assert deleted == len(load_tours(DEFAULT_TOURS_FILE)) + 1
    assert Tour.all_tours.count() == 0


def test_import_rejects_invalid_tour(tmp_path, tour_payload):
    path = tmp_path / "tours.json"
    path.write_text(json.dumps([{**tour_payload, "difficulty": "extreme"}]), encoding="utf-8")

    with pytest.raises(ValidationError):
        import_data(path)
    assert Tour.all_tours.count() == 0


def test_parser_requires_one_action():
    parser = build_parser()
    assert parser.parse_args(["--import"]).import_ is True
    assert parser.parse_args(["--delete"]).delete is True
    with pytest.raises(SystemExit):
        parser.parse_args([])
    with pytest.raises(SystemExit):
        parser.parse_args(["--import", "--delete"])
