# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(slots=True, frozen=True)
class User:

    id: int
    email: str
    password_hash: str = field(repr=False)


@dataclass(slots=True, frozen=True)
class App:

    id: int
    name: str
    secret: str = field(repr=False)


@dataclass(slots=True, frozen=True)
class TokenClaims:

    user_id: int
    app_id: int
    email: str
    expires_at: datetime
