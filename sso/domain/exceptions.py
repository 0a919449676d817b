# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Errors raised by storage collaborators."""

from __future__ import annotations


class StorageError(Exception):
    pass


class UserExistsError(StorageError):
    def __init__(self, message: str = "user already exists") -> None:
        super().__init__(message)


class UserNotFoundError(StorageError):
    def __init__(self, message: str = "user not found") -> None:
        super().__init__(message)


class AppNotFoundError(StorageError):
    def __init__(self, message: str = "app not found") -> None:
        super().__init__(message)
