from __future__ import annotations

from collections.abc import Iterator
from datetime import timedelta
from pathlib import Path

import pytest
from flask import Flask
from sqlalchemy.orm import sessionmaker

from sso.app import create_app
from sso.application.services.tokens import parse_token
from sso.container import Container
from sso.infrastructure.db import build_engine, init_db
from sso.infrastructure.db.models import App, User
from sso.shared.config import AppConfig


@pytest.fixture()
def container(tmp_path: Path) -> Iterator[Container]:
    config = AppConfig(STORAGE_PATH=tmp_path / "sso.db", TOKEN_TTL="15m")
    engine = build_engine(config.database_url)
    init_db(engine)
    factory = sessionmaker(bind=engine, expire_on_commit=False)
    with factory() as session:
        session.add(App(id=1, name="test", secret="integration-secret-with-enough-bytes"))
        session.commit()
    yield Container(config, session_factory=factory)
    engine.dispose()


@pytest.fixture()
def app(container: Container) -> Flask:
    return create_app(container)


def test_register_login_is_admin_flow(app: Flask, container: Container) -> None:
    with app.test_client() as client:
        register = client.post(
            "/api/auth/register", json={"email": "a@x.com", "password": "pw123"}
        )
        assert register.status_code == 200
        user_id = register.get_json()["user_id"]
        assert user_id == 1

        duplicate = client.post(
            "/api/auth/register", json={"email": "a@x.com", "password": "pw123"}
        )
        assert duplicate.status_code == 409

        login = client.post(
            "/api/auth/login",
            json={"email": "a@x.com", "password": "pw123", "app_id": 1},
        )
        assert login.status_code == 200
        token = login.get_json()["token"]

        wrong = client.post(
            "/api/auth/login",
            json={"email": "a@x.com", "password": "wrong", "app_id": 1},
        )
        unknown = client.post(
            "/api/auth/login",
            json={"email": "nobody@x.com", "password": "pw123", "app_id": 1},
        )
        assert wrong.status_code == unknown.status_code == 401
        assert wrong.get_json() == unknown.get_json()

        missing_app = client.post(
            "/api/auth/login",
            json={"email": "a@x.com", "password": "pw123", "app_id": 9999},
        )
        assert missing_app.status_code == 500

        assert client.get(f"/api/auth/users/{user_id}/is-admin").get_json() == {
            "is_admin": False
        }
        missing_user = client.get("/api/auth/users/9999/is-admin")
        assert missing_user.status_code == 400
        assert missing_user.get_json() == {"error": "invalid_app_id"}

    claims = parse_token(token, container.storage)
    assert claims.user_id == user_id
    assert claims.app_id == 1
    assert claims.email == "a@x.com"
    assert container.config.token_ttl == timedelta(minutes=15)


def test_password_is_stored_hashed(app: Flask, container: Container) -> None:
    with app.test_client() as client:
        client.post("/api/auth/register", json={"email": "a@x.com", "password": "pw123"})

    with container.session_factory() as session:
        row = session.query(User).filter(User.email == "a@x.com").one()
    assert row.pass_hash != "pw123"
    assert container.password_hasher.verify("pw123", row.pass_hash)
