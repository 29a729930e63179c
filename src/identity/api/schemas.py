"""Pydantic request/response schemas for the Identity API."""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- Request Schemas ---


class RegisterRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Jane Doe",
                    "email": "jane.doe@example.com",
                    "password": "s3cret-pass",
                    "password_confirm": "s3cret-pass",
                }
            ]
        }
    }

    name: str = Field("", max_length=255)
    email: str = Field("", max_length=254)
    password: str = Field("", max_length=4096)
    password_confirm: str = Field("", max_length=4096)


class LoginRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"email": "jane.doe@example.com", "password": "s3cret-pass"}]}}

    email: str = Field(..., max_length=254)
    password: str = Field(..., min_length=1, max_length=4096)


# --- Response Schemas ---


class CurrentUserResponse(BaseModel):
    user_id: str
    email: str
    name: str
    roles: list[str]
    is_admin: bool


class StatusResponse(BaseModel):
    status: str = "ok"
