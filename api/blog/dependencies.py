"""
Request-scoped wiring for blog routes.
"""

from __future__ import annotations

from typing import AsyncIterator

from fastapi import Depends, Request

from core.db import Database

from .repository import PostStore


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_post_store(database: Database = Depends(get_database)) -> AsyncIterator[PostStore]:
    # One pooled connection per request, released when the response is done.
    async with database.acquire() as session:
        yield PostStore(session)
