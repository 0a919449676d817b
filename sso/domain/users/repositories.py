# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import App, User


class UserSaver(Protocol):
    def save_user(self, email: str, password_hash: str) -> int: ...


class UserProvider(Protocol):
    def user(self, email: str) -> User: ...
    def is_admin(self, user_id: int) -> bool: ...


class AppProvider(Protocol):
    def app(self, app_id: int) -> App: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class TokenIssuer(Protocol):
    def issue(self, user: User, app: App) -> str: ...
