# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import HTTPException

from sso.shared.config import load_config
from sso.shared.errors import AppError
from sso.shared.logging import logger


def _error_code(exc: HTTPException) -> str:
    return (exc.name or "http_error").lower().replace(" ", "_")


def configure_error_handling(app: Flask) -> None:
    """Render every error as ``{"error": code[, "context": ...]}`` JSON."""
    debug_mode = load_config().debug_logging

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError) -> tuple[Response, HTTPStatus]:
        where = f"{request.method} {request.path}"
        if exc.status >= HTTPStatus.INTERNAL_SERVER_ERROR:
            logger.error(f"{exc.code} on {where} context={dict(exc.context or {})}")
        else:
            logger.warning(f"{exc.code} on {where}")
        return jsonify(exc.to_dict()), exc.status

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException) -> tuple[Response, int]:
        return jsonify({"error": _error_code(exc)}), exc.code or HTTPStatus.INTERNAL_SERVER_ERROR

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception) -> tuple[Response, HTTPStatus]:
        if debug_mode:
            logger.exception(f"Unhandled exception: {request.method} {request.path}")
        else:
            logger.error(f"Error: {type(exc).__name__} on {request.method} {request.path}")
        return jsonify({"error": "internal_error"}), HTTPStatus.INTERNAL_SERVER_ERROR


__all__ = ["configure_error_handling"]
