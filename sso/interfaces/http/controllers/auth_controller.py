# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from sso.application.use_cases.auth.authenticator import Authenticator
from sso.interfaces.http.dto.auth import (
    IsAdminRequestDTO,
    IsAdminResponseDTO,
    LoginRequestDTO,
    LoginResponseDTO,
    RegisterRequestDTO,
    RegisterResponseDTO,
)
from sso.shared.errors.validation import raise_validation_error
from sso.shared.logging import logger


class AuthController:
    def __init__(self, *, authenticator: Authenticator) -> None:
        self._authenticator = authenticator

    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user_id = self._authenticator.register_new_user(dto.email, dto.password)

        logger.info(f"auth.register: ok user_id={user_id}")
        return jsonify(RegisterResponseDTO(user_id=user_id).model_dump()), 200

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        token = self._authenticator.login(dto.email, dto.password, dto.app_id)

        logger.info(f"auth.login: ok app_id={dto.app_id}")
        return jsonify(LoginResponseDTO(token=token).model_dump()), 200

    def is_admin(self, user_id: int) -> tuple[Response, int]:
        try:
            dto = IsAdminRequestDTO(user_id=user_id)
        except ValidationError as exc:
            raise_validation_error(exc)

        is_admin = self._authenticator.is_admin(dto.user_id)
        return jsonify(IsAdminResponseDTO(is_admin=is_admin).model_dump()), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule(
            "/users/<int:user_id>/is-admin", view_func=self.is_admin, methods=["GET"]
        )
        return bp
