"""
Auth dependencies for protected FastAPI routes.

Token checks are stateless: the signature and expiry are verified, the
account table is not consulted.
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, Header

from core.config import get_settings
from core.errors import Unauthorized

from . import security
from .service import AuthService


@lru_cache
def get_auth_service() -> AuthService:
    return AuthService.from_settings(get_settings())


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        raise Unauthorized("Auth token is not supplied")

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        raise Unauthorized("Invalid Authorization header format.")

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        raise Unauthorized("Authorization must be: Bearer <token>.")
    return token


async def get_bearer_token(authorization: str | None = Header(default=None)) -> str:
    return _extract_bearer_token(authorization)


async def get_current_claims(
    access_token: str = Depends(get_bearer_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> dict:
    try:
        return auth_service.verify_token(access_token)
    except security.AuthSecurityError as exc:
        raise Unauthorized(str(exc)) from exc
