from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class RegisterRequestDTO(BaseModel):
    email: str = Field(min_length=1, max_length=320)
    password: str = Field(min_length=1, max_length=1024)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        # Format is not checked here; only blank input is rejected.
        if not value.strip():
            raise ValueError("email is required")
        return value


class LoginRequestDTO(RegisterRequestDTO):
    app_id: int = Field(gt=0)


class IsAdminRequestDTO(BaseModel):
    user_id: int = Field(gt=0)


class RegisterResponseDTO(BaseModel):
    user_id: int


class LoginResponseDTO(BaseModel):
    token: str


class IsAdminResponseDTO(BaseModel):
    is_admin: bool
