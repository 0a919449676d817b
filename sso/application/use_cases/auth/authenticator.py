# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import TypeVar

from sso.domain.exceptions import StorageError, UserExistsError, UserNotFoundError
from sso.domain.users.exceptions import (
    InternalError,
    InvalidAppIdError,
    InvalidCredentialsError,
    UserAlreadyExistsError,
)
from sso.domain.users.repositories import (
    AppProvider,
    PasswordHasher,
    TokenIssuer,
    UserProvider,
    UserSaver,
)
from sso.shared.errors.base import DomainError
from sso.shared.logging import logger

T = TypeVar("T")

OP_LOGIN = "auth.login"
OP_REGISTER = "auth.register"
OP_IS_ADMIN = "auth.is_admin"

# (operation, storage error) -> caller error. Anything not listed is internal.
# A missing user during the admin check is reported as an invalid app id;
# existing clients match on that code.
ERROR_TABLE: Mapping[tuple[str, type[StorageError]], type[DomainError]] = MappingProxyType(
    {
        (OP_LOGIN, UserNotFoundError): InvalidCredentialsError,
        (OP_REGISTER, UserExistsError): UserAlreadyExistsError,
        (OP_IS_ADMIN, UserNotFoundError): InvalidAppIdError,
    }
)


def translate_error(op: str, exc: Exception) -> DomainError | InternalError:
    if isinstance(exc, StorageError):
        mapped = ERROR_TABLE.get((op, type(exc)))
        if mapped is not None:
            logger.warning(f"{op}: {exc} -> {mapped.code}")
            return mapped()
    logger.error(f"{op}: {type(exc).__name__} -> internal_error")
    return InternalError(op)


def _call(op: str, fn: Callable[..., T], *args: object) -> T:
    try:
        return fn(*args)
    except TimeoutError:
        raise
    except Exception as exc:
        raise translate_error(op, exc) from exc


class Authenticator:
    def __init__(
        self,
        *,
        user_saver: UserSaver,
        user_provider: UserProvider,
        app_provider: AppProvider,
        password_hasher: PasswordHasher,
        token_issuer: TokenIssuer,
    ) -> None:
        self._user_saver = user_saver
        self._user_provider = user_provider
        self._app_provider = app_provider
        self._password_hasher = password_hasher
        self._token_issuer = token_issuer

    def login(self, email: str, password: str, app_id: int) -> str:
        logger.info(f"{OP_LOGIN}: attempting to login user email={email}")

        user = _call(OP_LOGIN, self._user_provider.user, email)

        if not _call(OP_LOGIN, self._password_hasher.verify, password, user.password_hash):
            logger.info(f"{OP_LOGIN}: invalid password user_id={user.id}")
            raise InvalidCredentialsError()

        # A missing app is a caller or configuration bug, never a credential failure.
        app = _call(OP_LOGIN, self._app_provider.app, app_id)

        token = _call(OP_LOGIN, self._token_issuer.issue, user, app)

        logger.info(f"{OP_LOGIN}: user logged in successfully user_id={user.id} app_id={app.id}")
        return token

    def register_new_user(self, email: str, password: str) -> int:
        logger.info(f"{OP_REGISTER}: registering new user email={email}")

        password_hash = _call(OP_REGISTER, self._password_hasher.hash, password)
        user_id = _call(OP_REGISTER, self._user_saver.save_user, email, password_hash)

        logger.info(f"{OP_REGISTER}: user registered successfully user_id={user_id}")
        return user_id

    def is_admin(self, user_id: int) -> bool:
        logger.info(f"{OP_IS_ADMIN}: checking if user is admin user_id={user_id}")

        is_admin = bool(_call(OP_IS_ADMIN, self._user_provider.is_admin, user_id))

        logger.info(f"{OP_IS_ADMIN}: checked user_id={user_id} is_admin={is_admin}")
        return is_admin


__all__ = [
    "ERROR_TABLE",
    "OP_IS_ADMIN",
    "OP_LOGIN",
    "OP_REGISTER",
    "Authenticator",
    "translate_error",
]
