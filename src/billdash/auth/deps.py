# src/billdash/auth/deps.py
from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Dict

from fastapi import Request

from billdash.app_logger import get_logger
from billdash.errors import LoginRequired

from .keycloak import IdentityProvider, KeycloakProvider
from .tokens import TokenSet

log = get_logger("auth.deps")

SESSION_USER_KEY = "user"


@lru_cache(maxsize=1)
def _keycloak() -> KeycloakProvider:
    return KeycloakProvider.from_settings()


def get_identity_provider() -> IdentityProvider:
    return _keycloak()


def login_session(request: Request, email: str, tokens: TokenSet) -> None:
    request.session[SESSION_USER_KEY] = {
        "email": email,
        "expires_at": tokens.session_expires_at.isoformat(),
    }


def logout_session(request: Request) -> None:
    request.session.clear()


async def require_user(request: Request) -> Dict[str, Any]:
    """Session gate for dashboard pages; raises ``LoginRequired`` when anonymous."""
    user = request.session.get(SESSION_USER_KEY)
    if not isinstance(user, dict) or not user.get("email"):
        raise LoginRequired()

    expires_at = user.get("expires_at")
    if expires_at:
        try:
            expired = datetime.fromisoformat(expires_at) <= datetime.now(timezone.utc)
        except ValueError:
            expired = True
        if expired:
            log.info("session expired for %s", user.get("email"))
            request.session.clear()
            raise LoginRequired()
    return user
