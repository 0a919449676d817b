# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import os
import re
from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_DURATION_UNITS = {
    "h": "hours",
    "m": "minutes",
    "s": "seconds",
    "ms": "milliseconds",
}
_YAML_SUFFIXES = (".yaml", ".yml")
_SECTION_KEYS = ("http", "grpc")


def parse_duration(value: Any) -> Any:
    """Accept ``1h``, ``30m``, ``1h30m5s`` style durations on top of pydantic's formats."""
    if not isinstance(value, str):
        return value
    text = value.strip()
    if text.isdigit():
        return timedelta(seconds=int(text))
    parts = _DURATION_PART.findall(text)
    if not parts or "".join(num + unit for num, unit in parts) != text:
        return value
    total = timedelta()
    for number, unit in parts:
        total += timedelta(**{_DURATION_UNITS[unit]: float(number)})
    return total


class HttpConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(8080, ge=1, le=65535)


def _http_config_factory() -> HttpConfig:
    return HttpConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    env: str = Field("local", alias="APP_ENV")
    storage_path: Path = Field(Path("storage/sso.db"), alias="STORAGE_PATH")
    storage_timeout: timedelta = Field(timedelta(seconds=5), alias="STORAGE_TIMEOUT")
    token_ttl: timedelta = Field(timedelta(hours=1), alias="TOKEN_TTL")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    http: HttpConfig = Field(default_factory=_http_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        validate_assignment=True,
        extra="ignore",
    )

    @field_validator("token_ttl", "storage_timeout", mode="before")
    @classmethod
    def _parse_durations(cls, value: Any) -> Any:
        return parse_duration(value)

    @field_validator("token_ttl", mode="after")
    @classmethod
    def _ensure_positive_ttl(cls, value: timedelta) -> timedelta:
        if value <= timedelta(0):
            raise ValueError("token_ttl must be positive")
        return value

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)

    @property
    def database_url(self) -> str:
        return f"sqlite:///{self.storage_path}"

    def is_production(self) -> bool:
        return self.env.lower() in ("production", "prod")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources = [init_settings, env_settings, dotenv_settings]
        path = os.getenv("CONFIG_PATH")
        if _is_yaml(path) and Path(path).is_file():  # type: ignore[arg-type]
            sources.append(YamlFileSource(settings_cls, Path(path)))  # type: ignore[arg-type]
        return (*sources, file_secret_settings)


def _config_path() -> str | None:
    path = os.getenv("CONFIG_PATH")
    if path and not os.path.exists(path):
        raise FileNotFoundError(f"config file not found: {path}")
    return path


def _is_yaml(path: str | None) -> bool:
    return bool(path) and Path(path).suffix.lower() in _YAML_SUFFIXES


class YamlFileSource(PydanticBaseSettingsSource):
    """YAML config file in the service's file layout.

    Top-level keys match field names or their env aliases case-insensitively.
    A ``grpc`` or ``http`` section holds ``host``, ``port`` and ``timeout``;
    the section timeout is the storage deadline.
    """

    def __init__(self, settings_cls: type[BaseSettings], yaml_file: Path) -> None:
        super().__init__(settings_cls)
        raw = YamlConfigSettingsSource(settings_cls, yaml_file=yaml_file).yaml_data
        self._values = self._normalize(settings_cls, raw)

    @staticmethod
    def _normalize(settings_cls: type[BaseSettings], raw: dict[str, Any]) -> dict[str, Any]:
        keys: dict[str, str] = {}
        for name, info in settings_cls.model_fields.items():
            key = info.alias or name
            keys[name.lower()] = key
            keys[key.lower()] = key

        values: dict[str, Any] = {}
        for raw_key, value in raw.items():
            lowered = str(raw_key).lower()
            if lowered in _SECTION_KEYS and isinstance(value, dict):
                section = dict(value)
                timeout = section.pop("timeout", None)
                if timeout is not None:
                    values.setdefault("STORAGE_TIMEOUT", timeout)
                values["http"] = section
            elif lowered in keys:
                values[keys[lowered]] = value
        return values

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return self._values.get(field.alias or field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return dict(self._values)


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    path = _config_path()
    if path and not _is_yaml(path):
        return AppConfig(_env_file=path)  # type: ignore[call-arg]
    return AppConfig()  # type: ignore[call-arg]


__all__ = ["AppConfig", "HttpConfig", "YamlFileSource", "load_config", "parse_duration"]
