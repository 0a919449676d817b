from __future__ import annotations

from collections.abc import Iterator
from datetime import timedelta
from pathlib import Path

import pytest
from pydantic import ValidationError

from sso.shared.config import AppConfig, load_config, parse_duration


@pytest.fixture(autouse=True)
def clear_config_cache() -> Iterator[None]:
    load_config.cache_clear()
    yield
    load_config.cache_clear()


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1h", timedelta(hours=1)),
        ("30m", timedelta(minutes=30)),
        ("1h30m", timedelta(hours=1, minutes=30)),
        ("90s", timedelta(seconds=90)),
        ("250ms", timedelta(milliseconds=250)),
        ("3600", timedelta(seconds=3600)),
    ],
)
def test_parse_duration(raw: str, expected: timedelta) -> None:
    assert parse_duration(raw) == expected


def test_parse_duration_leaves_other_values_to_pydantic() -> None:
    assert parse_duration("PT1H") == "PT1H"
    assert parse_duration(60) == 60


def test_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    for name in ("APP_ENV", "STORAGE_PATH", "TOKEN_TTL", "CONFIG_PATH", "HTTP__PORT"):
        monkeypatch.delenv(name, raising=False)

    config = load_config()

    assert config.env == "local"
    assert config.token_ttl == timedelta(hours=1)
    assert config.storage_timeout == timedelta(seconds=5)
    assert config.http.port == 8080
    assert config.database_url == "sqlite:///storage/sso.db"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("CONFIG_PATH", raising=False)
    monkeypatch.setenv("TOKEN_TTL", "2h")
    monkeypatch.setenv("STORAGE_PATH", "/var/lib/sso/sso.db")
    monkeypatch.setenv("HTTP__PORT", "44044")

    config = load_config()

    assert config.token_ttl == timedelta(hours=2)
    assert config.database_url == "sqlite:////var/lib/sso/sso.db"
    assert config.http.port == 44044


def test_config_path_env_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("TOKEN_TTL", raising=False)
    monkeypatch.delenv("APP_ENV", raising=False)
    env_file = tmp_path / "local.env"
    env_file.write_text("APP_ENV=prod\nTOKEN_TTL=45m\n", encoding="utf-8")
    monkeypatch.setenv("CONFIG_PATH", str(env_file))

    config = load_config()

    assert config.is_production()
    assert config.token_ttl == timedelta(minutes=45)


def test_config_path_missing_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("CONFIG_PATH", str(tmp_path / "missing.env"))

    with pytest.raises(FileNotFoundError):
        load_config()


def test_non_positive_ttl_rejected() -> None:
    with pytest.raises(ValidationError):
        AppConfig(TOKEN_TTL="0s")


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> pytest.MonkeyPatch:
    monkeypatch.chdir(tmp_path)
    for name in (
        "APP_ENV",
        "STORAGE_PATH",
        "STORAGE_TIMEOUT",
        "TOKEN_TTL",
        "HTTP__HOST",
        "HTTP__PORT",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def _write_yaml(tmp_path: Path) -> Path:
    path = tmp_path / "local.yaml"
    path.write_text(
        "env: prod\n"
        "storage_path: ./storage/sso.db\n"
        "token_ttl: 45m\n"
        "grpc:\n"
        "  port: 44044\n"
        "  timeout: 10s\n",
        encoding="utf-8",
    )
    return path


def test_config_path_yaml_file(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("CONFIG_PATH", str(_write_yaml(tmp_path)))

    config = load_config()

    assert config.is_production()
    assert config.token_ttl == timedelta(minutes=45)
    assert config.storage_timeout == timedelta(seconds=10)
    assert config.http.port == 44044
    assert config.http.host == "0.0.0.0"
    assert config.database_url == "sqlite:///storage/sso.db"


def test_environment_overrides_yaml_file(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("CONFIG_PATH", str(_write_yaml(tmp_path)))
    clean_env.setenv("TOKEN_TTL", "2h")
    clean_env.setenv("HTTP__PORT", "9090")

    config = load_config()

    assert config.token_ttl == timedelta(hours=2)
    assert config.http.port == 9090
    assert config.env == "prod"
