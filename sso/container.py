# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Application dependency container."""

from __future__ import annotations

from collections.abc import Callable
from functools import cached_property

from sqlalchemy.orm import Session

from sso.application.services.password_hashing import WerkzeugPasswordHasher
from sso.application.services.tokens import JwtTokenIssuer
from sso.application.use_cases.auth.authenticator import Authenticator
from sso.infrastructure.db import SessionLocal
from sso.infrastructure.repositories.users.sqlalchemy_user_repository import SqlAlchemyStorage
from sso.interfaces.http.controllers.auth_controller import AuthController
from sso.shared.config import AppConfig, load_config


class Container:
    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        session_factory: Callable[[], Session] | None = None,
    ) -> None:
        self.config = config or load_config()
        self._session_factory = session_factory

    @cached_property
    def session_factory(self) -> Callable[[], Session]:
        return self._session_factory or SessionLocal

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    @cached_property
    def storage(self) -> SqlAlchemyStorage:
        return SqlAlchemyStorage(self.session_factory)

    @cached_property
    def token_issuer(self) -> JwtTokenIssuer:
        return JwtTokenIssuer(self.config.token_ttl)

    @cached_property
    def authenticator(self) -> Authenticator:
        return Authenticator(
            user_saver=self.storage,
            user_provider=self.storage,
            app_provider=self.storage,
            password_hasher=self.password_hasher,
            token_issuer=self.token_issuer,
        )

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(authenticator=self.authenticator)


__all__ = ["Container"]
