# src/billdash/api/routers/customers.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse
from markupsafe import Markup
from sqlalchemy.ext.asyncio import AsyncSession

from billdash.api.deps import get_page_cache, get_storage, pop_flash, read_form, see_other, set_flash
from billdash.api.templating import templates
from billdash.auth import require_user
from billdash.db.session import get_db
from billdash.page_cache import PageStore
from billdash.services import Invalid, Saved, create_customer, delete_customer, update_customer
from billdash.services.queries import fetch_customer_by_id, fetch_filtered_customers
from billdash.services.storage import SqlStorage

router = APIRouter(prefix="/dashboard/customers", tags=["customers"])


def _render_form(request: Request, user: dict, values, state, title: str, status_code: int = 200):
    return templates.TemplateResponse(
        request,
        "customers/form.html",
        {"user": user, "values": values, "state": state, "action": request.url.path, "title": title},
        status_code=status_code,
    )


def _form_status(result) -> int:
    return status.HTTP_422_UNPROCESSABLE_ENTITY if isinstance(result, Invalid) else status.HTTP_500_INTERNAL_SERVER_ERROR


@router.get("", response_class=HTMLResponse)
async def list_customers(
    request: Request,
    query: str = "",
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db),
    cache: PageStore = Depends(get_page_cache),
):
    key = cache.key_for(request.url.path, request.url.query)
    table = await cache.get(key)
    if table is None:
        customers = await fetch_filtered_customers(session, query)
        table = templates.get_template("customers/_table.html").render(customers=customers)
        await cache.set(key, table)
    return templates.TemplateResponse(
        request,
        "customers/list.html",
        {"user": user, "query": query, "table": Markup(table), "flash": pop_flash(request)},
    )


@router.get("/create", response_class=HTMLResponse)
async def create_page(request: Request, user: dict = Depends(require_user)):
    return _render_form(request, user, {}, {}, "Create Customer")


@router.post("/create")
async def create(
    request: Request,
    user: dict = Depends(require_user),
    storage: SqlStorage = Depends(get_storage),
    cache: PageStore = Depends(get_page_cache),
):
    form = await read_form(request)
    result = await create_customer(form, storage=storage, notifier=cache)
    if isinstance(result, Saved):
        return see_other(result.redirect_to)
    return _render_form(request, user, form, result.state(), "Create Customer", _form_status(result))


@router.get("/{customer_id}/edit", response_class=HTMLResponse)
async def edit_page(
    customer_id: str,
    request: Request,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db),
):
    customer = await fetch_customer_by_id(session, customer_id)
    if customer is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
    return _render_form(request, user, customer.model_dump(), {}, "Edit Customer")


@router.post("/{customer_id}/edit")
async def edit(
    customer_id: str,
    request: Request,
    user: dict = Depends(require_user),
    storage: SqlStorage = Depends(get_storage),
    cache: PageStore = Depends(get_page_cache),
):
    form = await read_form(request)
    result = await update_customer(customer_id, form, storage=storage, notifier=cache)
    if isinstance(result, Saved):
        return see_other(result.redirect_to)
    return _render_form(request, user, form, result.state(), "Edit Customer", _form_status(result))


@router.post("/{customer_id}/delete")
async def delete(
    customer_id: str,
    request: Request,
    user: dict = Depends(require_user),
    storage: SqlStorage = Depends(get_storage),
    cache: PageStore = Depends(get_page_cache),
):
    result = await delete_customer(customer_id, storage=storage, notifier=cache)
    set_flash(request, result.state()["message"])
    return see_other(router.prefix)
