from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from billdash.api.deps import see_other
from billdash.api.templating import templates
from billdash.auth import require_user
from billdash.db.session import get_db
from billdash.services.queries import fetch_card_data, fetch_latest_invoices

router = APIRouter(tags=["dashboard"])


@router.get("/", include_in_schema=False)
async def root():
    return see_other("/dashboard")


@router.get("/dashboard")
async def overview(
    request: Request,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db),
):
    cards = await fetch_card_data(session)
    latest = await fetch_latest_invoices(session)
    return templates.TemplateResponse(
        request, "dashboard.html", {"user": user, "cards": cards, "latest": latest}
    )
