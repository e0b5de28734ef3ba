import datetime as dt

import httpx
import pytest

from billdash.auth import KeycloakProvider, TokenSet, authenticate
from billdash.errors import AuthError

from .conftest import TEST_EMAIL, TEST_PASSWORD, FakeProvider

pytestmark = pytest.mark.anyio

TOKEN_BODY = {
    "access_token": "abc",
    "expires_in": 300,
    "refresh_token": "def",
    "refresh_expires_in": 1800,
    "token_type": "Bearer",
}


# ---- authenticate --------------------------------------------------------------

async def test_valid_credentials(provider):
    result = await authenticate({"email": TEST_EMAIL, "password": TEST_PASSWORD}, provider=provider)

    assert result.ok
    assert result.tokens.access_token == "access"
    assert provider.calls == [(TEST_EMAIL, TEST_PASSWORD)]


async def test_wrong_password(provider):
    result = await authenticate({"email": TEST_EMAIL, "password": "wrong"}, provider=provider)
    assert not result.ok
    assert result.error == "Invalid credentials."


async def test_missing_fields_never_reach_provider(provider):
    result = await authenticate({"email": "  "}, provider=provider)
    assert result.error == "Invalid credentials."
    assert provider.calls == []


@pytest.mark.parametrize("kind", [AuthError.PROVIDER_ERROR, AuthError.PROVIDER_UNAVAILABLE])
async def test_other_auth_errors(kind):
    provider = FakeProvider(error=AuthError("boom", kind))
    result = await authenticate({"email": TEST_EMAIL, "password": TEST_PASSWORD}, provider=provider)
    assert result.error == "Something went wrong."


async def test_unexpected_errors_propagate():
    provider = FakeProvider(error=RuntimeError("bug"))
    with pytest.raises(RuntimeError):
        await authenticate({"email": TEST_EMAIL, "password": TEST_PASSWORD}, provider=provider)


# ---- Keycloak provider -----------------------------------------------------------

def _provider(handler) -> KeycloakProvider:
    return KeycloakProvider(
        "http://kc.local/", "billdash", "billdash-web", "s3cret", transport=httpx.MockTransport(handler)
    )


def test_token_endpoint():
    p = _provider(lambda request: httpx.Response(200))
    assert p.token_endpoint == "http://kc.local/realms/billdash/protocol/openid-connect/token"


async def test_sign_in_posts_password_grant():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = dict(httpx.QueryParams(request.content.decode()))
        return httpx.Response(200, json=TOKEN_BODY)

    tokens = await _provider(handler).sign_in(TEST_EMAIL, TEST_PASSWORD)

    assert isinstance(tokens, TokenSet)
    assert tokens.refresh_token == "def"
    assert seen["url"].endswith("/realms/billdash/protocol/openid-connect/token")
    assert seen["body"]["grant_type"] == "password"
    assert seen["body"]["username"] == TEST_EMAIL
    assert seen["body"]["client_secret"] == "s3cret"


async def test_session_expiry_follows_refresh_token():
    tokens = await _provider(lambda r: httpx.Response(200, json=TOKEN_BODY)).sign_in("a@b.c", "x")
    assert tokens.session_expires_at == tokens.refresh_expires_at
    assert tokens.session_expires_at > dt.datetime.now(dt.timezone.utc)


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(401, json={"error": "unauthorized"}),
        httpx.Response(400, json={"error": "invalid_grant", "error_description": "Invalid user credentials"}),
    ],
)
async def test_rejected_credentials(response):
    with pytest.raises(AuthError) as exc:
        await _provider(lambda r: response).sign_in("a@b.c", "x")
    assert exc.value.type == AuthError.CREDENTIALS_SIGNIN


async def test_server_error_is_provider_error():
    with pytest.raises(AuthError) as exc:
        await _provider(lambda r: httpx.Response(503, text="down")).sign_in("a@b.c", "x")
    assert exc.value.type == AuthError.PROVIDER_ERROR


async def test_malformed_token_body():
    with pytest.raises(AuthError) as exc:
        await _provider(lambda r: httpx.Response(200, json={"nope": 1})).sign_in("a@b.c", "x")
    assert exc.value.type == AuthError.PROVIDER_ERROR


async def test_connection_failure_is_unavailable():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(AuthError) as exc:
        await _provider(handler).sign_in("a@b.c", "x")
    assert exc.value.type == AuthError.PROVIDER_UNAVAILABLE
