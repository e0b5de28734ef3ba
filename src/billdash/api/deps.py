# src/billdash/api/deps.py
from __future__ import annotations

from typing import Any, Mapping

from fastapi import Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from billdash.db.session import get_db
from billdash.page_cache import PageStore
from billdash.services.storage import SqlStorage


def get_page_cache(request: Request) -> PageStore:
    return request.app.state.page_cache


def get_storage(session: AsyncSession = Depends(get_db)) -> SqlStorage:
    return SqlStorage(session)


async def read_form(request: Request) -> Mapping[str, Any]:
    form = await request.form()
    return {k: v for k, v in form.items()}


def see_other(location: str) -> RedirectResponse:
    # 303 so the browser follows a POST with a GET
    return RedirectResponse(location, status_code=303)


def pop_flash(request: Request) -> str | None:
    return request.session.pop("flash", None)


def set_flash(request: Request, message: str) -> None:
    request.session["flash"] = message
