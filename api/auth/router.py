"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from . import dependencies, schemas
from .service import AuthService

router = APIRouter()


@router.post("/login")
async def login(
    request: schemas.LoginRequest | None = None,
    auth_service: AuthService = Depends(dependencies.get_auth_service),
) -> dict:
    body = request or schemas.LoginRequest()
    result = await auth_service.login(body.email, body.password)
    return result.model_dump(by_alias=True)


@router.get("/jwt_test")
async def jwt_test(claims: dict = Depends(dependencies.get_current_claims)) -> dict:
    return {"message": "Your token is valid.", "claims": claims}
