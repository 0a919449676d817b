# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from sso.shared.errors.base import AppError, DomainError


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED


class InvalidAppIdError(DomainError):
    code = "invalid_app_id"
    status = HTTPStatus.BAD_REQUEST


class UserAlreadyExistsError(DomainError):
    code = "user_already_exists"
    status = HTTPStatus.CONFLICT


class InvalidTokenError(DomainError):
    code = "invalid_token"
    status = HTTPStatus.UNAUTHORIZED


class InternalError(AppError):
    """Any failure that is not one of the caller-facing kinds.

    Only the operation name is kept in the context; the underlying
    exception is chained as ``__cause__``.
    """

    def __init__(self, op: str) -> None:
        super().__init__(
            code="internal_error",
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            context={"op": op},
        )

    @property
    def op(self) -> str:
        return str((self.context or {}).get("op", ""))
