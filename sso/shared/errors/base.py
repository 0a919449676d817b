# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any


@dataclass(slots=True)
class AppError(Exception):
    """Error with a stable wire code, the HTTP status it maps to and optional context."""

    code: str
    status: HTTPStatus
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code}
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class DomainError(AppError):
    """Caller-facing error. Subclasses pin ``code`` and ``status`` as class attributes."""

    code = "domain_error"
    status = HTTPStatus.BAD_REQUEST

    def __init__(self, *, context: Mapping[str, Any] | None = None) -> None:
        cls = type(self)
        super().__init__(code=cls.code, status=cls.status, context=context)
