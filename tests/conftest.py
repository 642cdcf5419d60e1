import pytest
from fastapi.testclient import TestClient

from config import Settings
from main import create_app


@pytest.fixture()
def settings():
    # Pocas rondas de bcrypt para que los tests no sean lentos
    return Settings(JWT_SECRET="test-secret", BCRYPT_ROUNDS=4)


@pytest.fixture()
def app(settings):
    return create_app(settings)


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def signup(client):
    def _signup(handle="player1", password="secret1"):
        return client.post("/signup", json={"userHandle": handle, "password": password})
    return _signup


@pytest.fixture()
def auth_headers(client, signup):
    signup("player1", "secret1")
    res = client.post("/login", json={"userHandle": "player1", "password": "secret1"})
    token = res.json()["jsonWebToken"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def make_score():
    def _make_score(level="A", score=10, handle="player1", timestamp="2024-01-01T10:00:00Z"):
        return {"level": level, "userHandle": handle, "score": score, "timestamp": timestamp}
    return _make_score
