# src/billdash/main.py
from __future__ import annotations

from contextlib import asynccontextmanager
from urllib.parse import quote

from fastapi import FastAPI, Request
from fastapi.routing import APIRoute
from starlette.middleware.sessions import SessionMiddleware

from billdash.api.deps import see_other
from billdash.api.routers.auth_flow import router as auth_router
from billdash.api.routers.customers import router as customers_router
from billdash.api.routers.dashboard import router as dashboard_router
from billdash.api.routers.health import router as health_router
from billdash.api.routers.invoices import router as invoices_router
from billdash.app_logger import get_logger, setup_logging
from billdash.core.config import Settings, settings as default_settings
from billdash.db.session import get_engine
from billdash.errors import LoginRequired
from billdash.page_cache import PageStore, build_page_cache

log = get_logger("main")


def generate_unique_id(route: APIRoute) -> str:
    methods = "_".join(sorted((route.methods or []), key=str.lower)).lower()
    path = route.path_format.replace("/", "_").replace("{", "").replace("}", "").strip("_")
    tag = (route.tags[0] if route.tags else "default").lower().replace(" ", "_")
    return f"{tag}__{methods}__{path}"


def create_app(cfg: Settings | None = None, *, page_cache: PageStore | None = None) -> FastAPI:
    cfg = cfg or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info(
            "[startup] mounted routes: %s",
            sorted(r.path for r in app.routes if isinstance(r, APIRoute)),
        )
        yield
        # only dispose an engine that was actually built
        if get_engine.cache_info().currsize:
            await get_engine().dispose()
        await app.state.page_cache.aclose()

    if not cfg.TESTING:
        setup_logging(cfg.LOG_LEVEL)

    app = FastAPI(
        title=cfg.APP_NAME,
        version=cfg.APP_VERSION,
        generate_unique_id_function=generate_unique_id,
        lifespan=lifespan,
    )
    app.state.page_cache = page_cache if page_cache is not None else build_page_cache(cfg)

    app.add_middleware(
        SessionMiddleware,
        secret_key=cfg.SESSION_SECRET,
        max_age=cfg.SESSION_MAX_AGE,
        session_cookie=cfg.SESSION_COOKIE_NAME,
        same_site=cfg.SESSION_SAMESITE,
        https_only=cfg.SESSION_HTTPS_ONLY,
    )

    @app.exception_handler(LoginRequired)
    async def login_required_handler(request: Request, exc: LoginRequired):
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        return see_other(f"/login?callbackUrl={quote(target, safe='')}")

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(dashboard_router)
    app.include_router(invoices_router)
    app.include_router(customers_router)
    return app
