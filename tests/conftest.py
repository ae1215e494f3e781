"""
Shared pytest fixtures.

Every test gets a fresh in-memory MongoDB (mongomock behind mongoengine) and,
where needed, a FastAPI test client built without the production lifespan.
"""

import mongomock
import pytest
from fastapi.testclient import TestClient
from mongoengine import connect, disconnect

from main import create_app
from tour_booking.models.tour import Tour
from tour_booking.models.user import User
from tour_booking.services.auth import create_token


TEST_PASSWORD = "mypassword1"


@pytest.fixture(autouse=True)
def mongo():
    """Connect the default alias to an isolated mongomock database."""
    connect(
        "tour_booking_test",
        host="mongodb://localhost",
        alias="default",
        mongo_client_class=mongomock.MongoClient,
        tz_aware=True,
    )
    yield
    User.drop_collection()
    Tour.drop_collection()
    disconnect(alias="default")


@pytest.fixture
def client():
    app = create_app(lifespan=None)
    return TestClient(app)


@pytest.fixture
def make_user():
    """Factory creating saved users through the normal hashing hook."""

    def _make_user(email="jonas@natours.io", password=TEST_PASSWORD, role="user", name="Jonas Schmedtmann"):
        user = User(name=name, email=email, password=password, password_confirm=password, role=role)
        user.save()
        return user

    return _make_user


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        return {"Authorization": f"Bearer {create_token(subject=str(user.id))}"}

    return _auth_headers


@pytest.fixture
def tour_payload():
    return {
        "name": "The Forest Hiker",
        "duration": 5,
        "max_group_size": 25,
        "difficulty": "easy",
        "ratings_average": 4.7,
        "ratings_quantity": 37,
        "price": 397,
        "summary": "Breathtaking hike through the Canadian Banff National Park",
        "image_cover": "tour-1-cover.jpg",
    }
