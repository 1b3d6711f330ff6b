"""
Message board API endpoints.

Every route sits behind the bearer-token gate.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from auth import dependencies as auth_dependencies
from core.config import Settings, get_settings

from . import schemas, service

router = APIRouter(prefix="/c/message", dependencies=[Depends(auth_dependencies.get_current_claims)])


@router.get("/offset")
async def get_offset_page(
    limit: str | None = Query(default=None),
    offset: str | None = Query(default=None),
    settings: Settings = Depends(get_settings),
) -> dict:
    return await service.offset_page(limit, offset, snapshot=settings.pagination_snapshot)


@router.get("/cursor")
async def get_cursor_page(
    limit: str | None = Query(default=None),
    cursor: str | None = Query(default=None),
    settings: Settings = Depends(get_settings),
) -> dict:
    return await service.cursor_page(limit, cursor, snapshot=settings.pagination_snapshot)


@router.post("", status_code=status.HTTP_201_CREATED, include_in_schema=False)
@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_message(request: schemas.CreateMessageRequest | None = None) -> dict:
    entry = await service.create_message((request or schemas.CreateMessageRequest()).model_dump())
    return {"entry": entry}


@router.delete("/{name}")
async def delete_message(name: str) -> dict:
    return {"entry": await service.delete_message(name)}
