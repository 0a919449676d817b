# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .base import AppError, DomainError
from .validation import RequestValidationError, raise_validation_error

__all__ = [
    "AppError",
    "DomainError",
    "RequestValidationError",
    "raise_validation_error",
]
