import logging

from fastapi import Request
from fastapi.testclient import TestClient

from main import create_app
from tour_booking.utils.config import settings
from tour_booking.utils.errors import AppError


def test_welcome(client):
    response = client.get("/")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["data"]["endpoints"]["tours"]["all_tours"] == "/api/v1/tours"


def test_unknown_route_is_404(client):
    response = client.get("/api/v1/bookings")
    assert response.status_code == 404
    body = response.json()
    assert body["status"] == "fail"
    assert body["message"] == "Can't find /api/v1/bookings on this server"


def test_unsupported_method_is_404(client):
    response = client.put("/api/v1/tours")
    assert response.status_code == 404


def test_development_errors_carry_details(client, monkeypatch):
    monkeypatch.setattr(settings, "environment", "development")
    response = client.get("/api/v1/tours/not-an-id")
    body = response.json()
    assert body["error"] == "AppError"
    assert "stack" in body


def test_production_errors_hide_details(client, monkeypatch):
    monkeypatch.setattr(settings, "environment", "production")
    response = client.get("/api/v1/tours/not-an-id")
    assert response.status_code == 400
    assert response.json() == {"status": "fail", "message": "Invalid _id: not-an-id."}


def _app_with_crashing_route():
    app = create_app(lifespan=None)

    @app.get("/crash")
    def crash():
        raise RuntimeError("boom")

    # Register ahead of the catch-all route
    app.router.routes.insert(0, app.router.routes.pop())
    return TestClient(app, raise_server_exceptions=False)


def test_unexpected_error_is_generic_in_production(monkeypatch):
    monkeypatch.setattr(settings, "environment", "production")
    response = _app_with_crashing_route().get("/crash")
    assert response.status_code == 500
    assert response.json() == {"status": "error", "message": "Something went very wrong!"}


def test_unexpected_error_shows_message_in_development(monkeypatch):
    monkeypatch.setattr(settings, "environment", "development")
    response = _app_with_crashing_route().get("/crash")
    assert response.status_code == 500
    body = response.json()
    assert body["status"] == "error"
    assert body["message"] == "boom"
    assert body["error"] == "RuntimeError"


def test_app_error_status():
    assert AppError("missing", 404).status == "fail"
    assert AppError("broken", 500).status == "error"
    assert AppError("broken", 500).is_operational


def test_requests_are_stamped_and_logged_in_development(monkeypatch, caplog):
    monkeypatch.setattr(settings, "environment", "development")
    # The package logger does not propagate to the root handler caplog listens on
    monkeypatch.setattr(logging.getLogger("tour_booking"), "propagate", True)
    app = create_app(lifespan=None)

    @app.get("/stamp")
    def stamp(request: Request):
        return {"request_time": request.state.request_time}

    app.router.routes.insert(0, app.router.routes.pop())

    with caplog.at_level(logging.INFO, logger="tour_booking.main"):
        response = TestClient(app).get("/stamp")

    assert response.status_code == 200
    assert "T" in response.json()["request_time"]
    messages = [record.getMessage() for record in caplog.records if record.name == "tour_booking.main"]
    assert any(message.startswith("GET /stamp 200 ") and message.endswith(" ms") for message in messages)
