# src/billdash/auth/actions.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from billdash.errors import AuthError

from .keycloak import IdentityProvider
from .tokens import TokenSet

INVALID_CREDENTIALS = "Invalid credentials."
SOMETHING_WENT_WRONG = "Something went wrong."


@dataclass(frozen=True)
class SignInResult:
    tokens: Optional[TokenSet] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _field(form: Mapping[str, Any], name: str) -> str:
    value = form.get(name)
    return value.strip() if isinstance(value, str) else ""


async def authenticate(form: Mapping[str, Any], *, provider: IdentityProvider) -> SignInResult:
    """Sign in with the ``email``/``password`` form fields.

    Provider failures become one of two user-facing messages; anything that
    is not an ``AuthError`` propagates.
    """
    email = _field(form, "email")
    password = form.get("password")
    try:
        if not email or not isinstance(password, str) or not password:
            raise AuthError("Missing credentials", AuthError.CREDENTIALS_SIGNIN)
        tokens = await provider.sign_in(email, password)
    except AuthError as e:
        if e.type == AuthError.CREDENTIALS_SIGNIN:
            return SignInResult(error=INVALID_CREDENTIALS)
        return SignInResult(error=SOMETHING_WENT_WRONG)
    return SignInResult(tokens=tokens)
