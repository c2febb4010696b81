"""Shared fixtures: a fresh app + sqlite file per test, and login helpers."""
import pytest

from app import create_app
from store import get_store

API_KEY = "test-api-key"
DEBUG_PIN = "4321"


@pytest.fixture()
def app(tmp_path):
    flask_app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'test.db'}",
        "UPLOAD_FOLDER": str(tmp_path / "uploads"),
        "IOT_API_KEY": API_KEY,
        "DEBUG_PIN": DEBUG_PIN,
    })
    yield flask_app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def store(app):
    with app.app_context():
        yield get_store()


@pytest.fixture()
def api_headers():
    return {"X-API-Key": API_KEY}


def register(client, username, password="secret", role="farmer"):
    return client.post("/register", data={"username": username, "password": password, "role": role})


def login(client, username, password="secret"):
    return client.post("/login", data={"username": username, "password": password})


def add_greenhouse(client, name, plant_id=""):
    return client.post("/add-greenhouse", data={"name": name, "plant_id": plant_id})


@pytest.fixture()
def farmer(client):
    register(client, "alice")
    login(client, "alice")
    return client


@pytest.fixture()
def greenhouse_id(app, farmer):
    add_greenhouse(farmer, "GH1")
    with app.app_context():
        user = get_store().find_user("alice")
        return get_store().greenhouses_for(user.id)[0].id
