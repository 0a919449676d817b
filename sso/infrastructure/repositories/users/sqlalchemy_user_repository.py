# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from sso.domain.exceptions import AppNotFoundError, UserExistsError, UserNotFoundError
from sso.domain.users.entities import App as DomainApp
from sso.domain.users.entities import User as DomainUser
from sso.domain.users.repositories import AppProvider, UserProvider, UserSaver
from sso.infrastructure.db.models import App, User
from sso.infrastructure.unit_of_work import unit_of_work_scope
from sso.shared.logging import logger

_EMAIL_COLUMN = f"{User.__tablename__}.email"
_BUSY_ERRORS = ("SQLITE_BUSY", "SQLITE_LOCKED")


def _is_email_conflict(exc: IntegrityError) -> bool:
    return _EMAIL_COLUMN in str(exc.orig)


def _is_busy(exc: OperationalError) -> bool:
    name = getattr(exc.orig, "sqlite_errorname", "") or ""
    return name.startswith(_BUSY_ERRORS) or "database is locked" in str(exc.orig)


@contextmanager
def _storage_scope(factory: Callable[[], Session], op: str) -> Iterator[Session]:
    """Unit of work whose busy-timeout expiry surfaces as ``TimeoutError``."""
    try:
        with unit_of_work_scope(factory) as session:
            yield session
    except OperationalError as exc:
        if _is_busy(exc):
            logger.warning(f"storage.{op}: busy timeout exceeded")
            raise TimeoutError(f"storage.{op}: database is busy") from exc
        raise


class SqlAlchemyStorage(UserSaver, UserProvider, AppProvider):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def save_user(self, email: str, password_hash: str) -> int:
        try:
            with _storage_scope(self._session_factory, "save_user") as session:
                row = User(email=email, pass_hash=password_hash)
                session.add(row)
                session.flush()
                return row.id
        except IntegrityError as exc:
            if _is_email_conflict(exc):
                raise UserExistsError() from exc
            raise

    def user(self, email: str) -> DomainUser:
        with _storage_scope(self._session_factory, "user") as session:
            row = session.scalars(select(User).where(User.email == email)).first()
            if row is None:
                raise UserNotFoundError()
            return DomainUser(id=row.id, email=row.email, password_hash=row.pass_hash)

    def is_admin(self, user_id: int) -> bool:
        with _storage_scope(self._session_factory, "is_admin") as session:
            row = session.execute(
                select(User.is_admin).where(User.id == user_id)
            ).first()
            if row is None:
                raise UserNotFoundError()
            return bool(row.is_admin)

    def app(self, app_id: int) -> DomainApp:
        with _storage_scope(self._session_factory, "app") as session:
            row = session.get(App, app_id)
            if row is None:
                raise AppNotFoundError()
            return DomainApp(id=row.id, name=row.name, secret=row.secret)


__all__ = ["SqlAlchemyStorage"]
