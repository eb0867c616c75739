from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from wallpaper_admin.app import create_app
from wallpaper_admin.config import Settings

API = "/api/v1/admin"
PASSWORD = "Secret1!"


def admin_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "firstName": "Radha",
        "lastName": "Rani",
        "email": "radha@example.com",
        "password": PASSWORD,
        "role": "admin",
    }
    payload.update(overrides)
    return payload


def wallpaper_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "title": "Krishna with flute",
        "description": "Lord Krishna playing the flute by the Yamuna at dusk",
        "imageUrl": "https://images.example.com/krishna-flute.jpg",
        "keywords": ["krishna", "flute"],
        "category": "lord_krishna",
        "wallpaperStyle": "real",
    }
    payload.update(overrides)
    return payload


def register(client: TestClient, **overrides: Any):
    return client.post(f"{API}/auth/register", json=admin_payload(**overrides))


def login(client: TestClient, email: str = "radha@example.com", password: str = PASSWORD):
    return client.post(f"{API}/auth/login", json={"email": email, "password": password})


def create_wallpaper(client: TestClient, **overrides: Any) -> dict[str, Any]:
    response = client.post(f"{API}/wallpapers", json=wallpaper_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture(name="settings")
def settings_fixture(tmp_path: Path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.sqlite3'}",
        jwt_secret="test-secret",
        cookie_secure=True,
        cors_origins=["http://localhost:5173"],
    )


@pytest.fixture(name="client")
def client_fixture(settings: Settings) -> Generator[TestClient, None, None]:
    app = create_app(settings)
    # The access cookie is marked secure, so talk to the app over https.
    with TestClient(app, base_url="https://testserver") as client:
        yield client


@pytest.fixture(name="admin_client")
def admin_client_fixture(client: TestClient) -> TestClient:
    assert register(client).status_code == 201
    assert login(client).status_code == 200
    return client
