# src/billdash/api/routers/invoices.py
from __future__ import annotations

from typing import Any, Mapping

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse
from markupsafe import Markup
from sqlalchemy.ext.asyncio import AsyncSession

from billdash.api.deps import get_page_cache, get_storage, pop_flash, read_form, see_other, set_flash
from billdash.api.templating import templates
from billdash.auth import require_user
from billdash.db.session import get_db
from billdash.page_cache import PageStore
from billdash.services import Invalid, Saved, create_invoice, delete_invoice, update_invoice
from billdash.services.queries import (
    fetch_customers,
    fetch_filtered_invoices,
    fetch_invoice_by_id,
    fetch_invoices_pages,
)
from billdash.services.storage import SqlStorage
from billdash.utils import generate_pagination

router = APIRouter(prefix="/dashboard/invoices", tags=["invoices"])


async def _render_form(
    request: Request,
    session: AsyncSession,
    user: dict,
    values: Mapping[str, Any],
    state: dict,
    title: str,
    status_code: int = 200,
):
    # the customer dropdown is always rebuilt from the table
    customers = await fetch_customers(session)
    return templates.TemplateResponse(
        request,
        "invoices/form.html",
        {
            "user": user,
            "customers": customers,
            "values": values,
            "state": state,
            "action": request.url.path,
            "title": title,
        },
        status_code=status_code,
    )


def _form_status(result) -> int:
    return status.HTTP_422_UNPROCESSABLE_ENTITY if isinstance(result, Invalid) else status.HTTP_500_INTERNAL_SERVER_ERROR


@router.get("", response_class=HTMLResponse)
async def list_invoices(
    request: Request,
    query: str = "",
    page: int = Query(1, ge=1),
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db),
    cache: PageStore = Depends(get_page_cache),
):
    key = cache.key_for(request.url.path, request.url.query)
    table = await cache.get(key)
    if table is None:
        invoices = await fetch_filtered_invoices(session, query, page)
        total_pages = await fetch_invoices_pages(session, query)
        table = templates.get_template("invoices/_table.html").render(
            invoices=invoices,
            query=query,
            page=page,
            pages=generate_pagination(page, total_pages),
        )
        await cache.set(key, table)
    return templates.TemplateResponse(
        request,
        "invoices/list.html",
        {"user": user, "query": query, "table": Markup(table), "flash": pop_flash(request)},
    )


@router.get("/create", response_class=HTMLResponse)
async def create_page(
    request: Request,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db),
):
    return await _render_form(request, session, user, {}, {}, "Create Invoice")


@router.post("/create")
async def create(
    request: Request,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db),
    storage: SqlStorage = Depends(get_storage),
    cache: PageStore = Depends(get_page_cache),
):
    form = await read_form(request)
    result = await create_invoice(form, storage=storage, notifier=cache)
    if isinstance(result, Saved):
        return see_other(result.redirect_to)
    return await _render_form(
        request, session, user, form, result.state(), "Create Invoice", _form_status(result)
    )


@router.get("/{invoice_id}/edit", response_class=HTMLResponse)
async def edit_page(
    invoice_id: str,
    request: Request,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db),
):
    invoice = await fetch_invoice_by_id(session, invoice_id)
    if invoice is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")
    values = {"customerId": invoice.customer_id, "amount": str(invoice.amount), "status": invoice.status}
    return await _render_form(request, session, user, values, {}, "Edit Invoice")


@router.post("/{invoice_id}/edit")
async def edit(
    invoice_id: str,
    request: Request,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db),
    storage: SqlStorage = Depends(get_storage),
    cache: PageStore = Depends(get_page_cache),
):
    form = await read_form(request)
    result = await update_invoice(invoice_id, form, storage=storage, notifier=cache)
    if isinstance(result, Saved):
        return see_other(result.redirect_to)
    return await _render_form(
        request, session, user, form, result.state(), "Edit Invoice", _form_status(result)
    )


@router.post("/{invoice_id}/delete")
async def delete(
    invoice_id: str,
    request: Request,
    user: dict = Depends(require_user),
    storage: SqlStorage = Depends(get_storage),
    cache: PageStore = Depends(get_page_cache),
):
    result = await delete_invoice(invoice_id, storage=storage, notifier=cache)
    set_flash(request, result.state()["message"])
    return see_other(router.prefix)
