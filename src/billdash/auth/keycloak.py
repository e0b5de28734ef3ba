# src/billdash/auth/keycloak.py
from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

import httpx

from billdash.app_logger import get_logger
from billdash.core.config import Settings, settings as default_settings
from billdash.errors import AuthError

from .tokens import TokenSet

log = get_logger("auth.keycloak")

# Keycloak answers a bad username/password with 401, or 400 + invalid_grant
# (e.g. disabled account, "Account is not fully set up").
_CREDENTIAL_ERRORS = {"invalid_grant", "unauthorized_client"}


def _mask_email(email: Optional[str]) -> str:
    if not email:
        return ""
    try:
        user, domain = email.split("@", 1)
        head = user[:2]
        tail = user[-1:] if len(user) > 2 else ""
        return f"{head}***{tail}@{domain}"
    except ValueError:
        return "***"


class IdentityProvider(Protocol):
    async def sign_in(self, username: str, password: str) -> TokenSet:
        """Exchange credentials for tokens; raise ``AuthError`` on any provider failure."""
        ...


class KeycloakProvider:
    """Resource-owner password grant against a Keycloak realm."""

    def __init__(
        self,
        base_url: str,
        realm: str,
        client_id: str,
        client_secret: str | None = None,
        *,
        scope: str = "openid",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.realm = realm
        self.client_id = client_id
        self.client_secret = client_secret
        self.scope = scope
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, cfg: Settings | None = None) -> "KeycloakProvider":
        cfg = cfg or default_settings
        return cls(
            cfg.KEYCLOAK_BASE_URL,
            cfg.KEYCLOAK_REALM,
            cfg.KEYCLOAK_CLIENT_ID,
            cfg.KEYCLOAK_CLIENT_SECRET,
            scope=cfg.OIDC_SCOPE,
            timeout=cfg.KEYCLOAK_TIMEOUT,
        )

    @property
    def token_endpoint(self) -> str:
        return f"{self.base_url}/realms/{self.realm}/protocol/openid-connect/token"

    async def sign_in(self, username: str, password: str) -> TokenSet:
        data: Dict[str, Any] = {
            "grant_type": "password",
            "username": username,
            "password": password,
            "client_id": self.client_id,
            "scope": self.scope,
        }
        if self.client_secret:
            data["client_secret"] = self.client_secret

        log.debug("requesting tokens for %s", _mask_email(username))
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(self.token_endpoint, data=data)
        except httpx.HTTPError as e:
            raise AuthError(f"Keycloak unavailable: {e}", AuthError.PROVIDER_UNAVAILABLE) from e

        if resp.status_code == 200:
            try:
                return TokenSet.from_oidc_response(resp.json())
            except (ValueError, KeyError) as e:
                raise AuthError(f"Malformed token response: {e}") from e

        error = ""
        try:
            error = (resp.json() or {}).get("error", "")
        except ValueError:
            pass

        if resp.status_code == 401 or (resp.status_code == 400 and error in _CREDENTIAL_ERRORS):
            log.info("credentials rejected for %s (%s)", _mask_email(username), error or resp.status_code)
            raise AuthError("Invalid credentials", AuthError.CREDENTIALS_SIGNIN)

        log.warning("token exchange failed: %s %s", resp.status_code, resp.text[:300])
        raise AuthError(f"Token exchange failed: {resp.status_code}")
