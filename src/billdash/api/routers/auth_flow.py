# src/billdash/api/routers/auth_flow.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from billdash.api.deps import read_form, see_other
from billdash.api.templating import templates
from billdash.app_logger import get_logger
from billdash.auth import authenticate, get_identity_provider, IdentityProvider
from billdash.auth.deps import login_session, logout_session

log = get_logger("auth_flow")
router = APIRouter(tags=["auth"])

DEFAULT_LANDING = "/dashboard"


def _safe_next(target: str | None) -> str:
    # only same-site paths; "//host" would be protocol-relative
    if target and target.startswith("/") and not target.startswith("//"):
        return target
    return DEFAULT_LANDING


@router.get("/login")
async def login_page(request: Request, callbackUrl: str | None = None):
    return templates.TemplateResponse(
        request, "login.html", {"error": None, "email": "", "callback_url": _safe_next(callbackUrl)}
    )


@router.post("/login")
async def login(request: Request, provider: IdentityProvider = Depends(get_identity_provider)):
    form = await read_form(request)
    result = await authenticate(form, provider=provider)
    callback_url = _safe_next(form.get("callbackUrl"))
    if not result.ok:
        return templates.TemplateResponse(
            request,
            "login.html",
            {"error": result.error, "email": form.get("email", ""), "callback_url": callback_url},
            status_code=401,
        )

    login_session(request, form["email"].strip(), result.tokens)
    log.info("login ok; redirecting to %s", callback_url)
    return see_other(callback_url)


@router.post("/logout")
async def logout(request: Request):
    logout_session(request)
    return see_other("/login")
