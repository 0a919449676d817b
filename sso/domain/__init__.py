# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .exceptions import AppNotFoundError, StorageError, UserExistsError, UserNotFoundError
from .users.entities import App, TokenClaims, User

__all__ = [
    "App",
    "AppNotFoundError",
    "StorageError",
    "TokenClaims",
    "User",
    "UserExistsError",
    "UserNotFoundError",
]
