"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    # Presence and type are checked by the auth service, not here.
    model_config = ConfigDict(extra="ignore")

    email: Any = None
    password: Any = None


class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    role: str


class LoginResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(..., serialization_alias="accessToken")
    user: UserResponse
