from pathlib import Path

import pytest
from fastapi.testclient import TestClient

import config
from db import database

ADMIN_SECRET = "letmein"
ENV_OVERRIDES = (
    "WEEKWISE_ADMIN_SECRET",
    "WEEKWISE_JWT_SECRET",
    "WEEKWISE_TOKEN_MINUTES",
    "WEEKWISE_STORE_BACKEND",
    "WEEKWISE_DB_PATH",
    "WEEKWISE_IDENTITY_PROVIDER",
    "SUPABASE_URL",
    "SUPABASE_SERVICE_ROLE_KEY",
)


def write_test_config(config_path: Path, backend: str = "sqlite") -> None:
    config_path.write_text(
        "\n".join(
            [
                "[auth]",
                f"admin_secret = \"{ADMIN_SECRET}\"",
                "jwt_secret = \"test-signing-key-that-is-long-enough-for-hs256\"",
                "token_minutes = 5",
                "",
                "[store]",
                f"backend = \"{backend}\"",
                "",
                "[identity]",
                "provider = \"local\"",
            ]
        ),
        encoding="utf-8",
    )


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    config_dir = tmp_path / ".weekwise"
    config_dir.mkdir()
    config_path = config_dir / "config.toml"
    write_test_config(config_path)

    for name in ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config, "CONFIG_PATH", config_path)
    monkeypatch.setattr(database, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(database, "DB_PATH", config_dir / "weekwise.db")

    database.get_memory_store().clear()
    database.init_db()
    return config_dir


@pytest.fixture
def store(config_dir):
    with database.open_store() as store:
        yield store


@pytest.fixture
def client(config_dir):
    from main import app

    return TestClient(app)


def signup(client, email: str, name: str = "Test User", password: str = "secret123", admin: bool = False) -> dict:
    body = {"email": email, "password": password, "name": name}
    path = "/signup"
    if admin:
        body["adminSecret"] = ADMIN_SECRET
        path = "/admin/signup"
    response = client.post(path, json=body)
    assert response.status_code == 200, response.text
    return response.json()["user"]


def token_for(client, email: str, password: str = "secret123") -> str:
    response = client.post("/signin", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["accessToken"]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
