# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Session token issuing and verification.

Tokens are HS256 JWTs signed with the secret of the app they were issued
for. The claim set is fixed: ``uid``, ``app_id``, ``exp`` and ``email``.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import jwt

from sso.domain.exceptions import StorageError
from sso.domain.users.entities import App, TokenClaims, User
from sso.domain.users.exceptions import InvalidTokenError
from sso.domain.users.repositories import AppProvider, TokenIssuer
from sso.shared.logging import logger

ALGORITHM = "HS256"
REQUIRED_CLAIMS = ("uid", "app_id", "exp", "email")


def utcnow() -> datetime:
    return datetime.now(UTC)


class JwtTokenIssuer(TokenIssuer):
    def __init__(self, ttl: timedelta, *, clock: Callable[[], datetime] = utcnow) -> None:
        self._ttl = ttl
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, user: User, app: App) -> str:
        expires_at = self._clock() + self._ttl
        claims = {
            "uid": user.id,
            "app_id": app.id,
            "exp": int(expires_at.timestamp()),
            "email": user.email,
        }
        return jwt.encode(claims, app.secret, algorithm=ALGORITHM)


def parse_token(
    token: str,
    apps: AppProvider,
    *,
    clock: Callable[[], datetime] | None = None,
) -> TokenClaims:
    try:
        unverified = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError as exc:
        raise InvalidTokenError(context={"reason": "malformed"}) from exc

    app_id = unverified.get("app_id")
    if not isinstance(app_id, int) or isinstance(app_id, bool):
        raise InvalidTokenError(context={"reason": "missing_app_id"})

    try:
        app = apps.app(app_id)
    except StorageError as exc:
        logger.warning(f"tokens.parse: unknown app_id={app_id}")
        raise InvalidTokenError(context={"reason": "unknown_app"}) from exc

    # Expiry is checked below against the injectable clock.
    try:
        claims = jwt.decode(
            token,
            app.secret,
            algorithms=[ALGORITHM],
            options={"require": list(REQUIRED_CLAIMS), "verify_exp": False},
        )
    except jwt.PyJWTError as exc:
        raise InvalidTokenError(context={"reason": "bad_signature"}) from exc

    now = (clock or utcnow)()
    exp = claims["exp"]
    if not isinstance(exp, int | float) or now.timestamp() >= exp:
        raise InvalidTokenError(context={"reason": "expired"})

    return TokenClaims(
        user_id=int(claims["uid"]),
        app_id=int(claims["app_id"]),
        email=str(claims["email"]),
        expires_at=datetime.fromtimestamp(exp, UTC),
    )


__all__ = ["ALGORITHM", "JwtTokenIssuer", "parse_token", "utcnow"]
