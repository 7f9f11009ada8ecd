import asyncio
import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017")
os.environ.setdefault("DB_NAME", "restaurant_test")

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from db.db_operation import mongo_conn
from settings.config import settings
from main import app

PNG_HEADER = b"\x89PNG\r\n\x1a\n"
MIB = 1024 * 1024


def run(coro):
    return asyncio.run(coro)


def png_bytes(size: int = MIB) -> bytes:
    return PNG_HEADER + b"\0" * (size - len(PNG_HEADER))


def auth_headers(token: str) -> dict:
    return {"x-auth-token": token}


def register(client, name="Guest User", email="guest@example.com", password="secret123") -> str:
    response = client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["token"]


def login(client, email, password="secret123") -> str:
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["token"]


@pytest.fixture(autouse=True)
def mock_db(monkeypatch, tmp_path):
    mongo_conn.bind(AsyncMongoMockClient(), "restaurant_test")
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path / "uploads"))
    yield mongo_conn


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def guest_token(client):
    return register(client)


@pytest.fixture
def admin_token(client):
    register(client, name="Admin", email="admin@example.com")
    run(mongo_conn.users_collection.update_one({"email": "admin@example.com"}, {"$set": {"role": "admin"}}))
    return login(client, "admin@example.com")


@pytest.fixture
def menu_item(client, admin_token):
    response = client.post(
        "/api/menu",
        data={"title": "Pancakes", "shortDescription": "Fluffy stack with maple syrup", "price": "7.5", "type": "breakfast"},
        files={"image": ("pancakes.png", png_bytes(), "image/png")},
        headers=auth_headers(admin_token),
    )
    assert response.status_code == 201, response.text
    return response.json()
