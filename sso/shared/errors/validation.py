# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from http import HTTPStatus
from typing import Any, NoReturn

from pydantic import ValidationError

from .base import AppError


class RequestValidationError(AppError):
    def __init__(self, *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(
            code="validation_error",
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            context=context,
        )


def format_pydantic_errors(exc: ValidationError) -> dict[str, Any]:
    """Field paths and error types only; rejected input values are never echoed back."""
    errors = []
    fields = set()

    for error in exc.errors(include_url=False, include_input=False):
        field_path = ".".join(str(part) for part in error.get("loc", ()) if part is not None)
        if field_path:
            fields.add(field_path)
        errors.append({"field": field_path or "unknown", "type": error.get("type", "value_error")})

    return {"fields": sorted(fields), "errors": errors}


def raise_validation_error(exc: ValidationError) -> NoReturn:
    raise RequestValidationError(context=format_pydantic_errors(exc)) from exc


__all__ = [
    "RequestValidationError",
    "format_pydantic_errors",
    "raise_validation_error",
]
