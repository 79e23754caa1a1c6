"""Tests for the token endpoint client."""

import base64
from urllib.parse import parse_qs

import httpx
import pytest
import respx

from customer_auth import (
    ConfigurationError,
    CredentialSet,
    InvalidTokenResponseError,
    TokenExchangeError,
    TokenExchangeFailure,
    TokenExchangeSuccess,
    TokenExchanger,
)
from headers import USER_AGENT
from tests.conftest import APP_URL, CLIENT_ID, CLIENT_SECRET, TOKEN_ENDPOINT, make_config


def _form(request: httpx.Request) -> dict:
    return {key: values[0] for key, values in parse_qs(request.content.decode()).items()}


@pytest.mark.asyncio
@respx.mock
async def test_exchange_uses_basic_auth_by_default(token_payload) -> None:
    route = respx.post(TOKEN_ENDPOINT).mock(return_value=httpx.Response(200, json=token_payload))

    credentials = await TokenExchanger(make_config()).exchange("abc123")

    assert credentials == CredentialSet(access_token="T1", id_token="T2", refresh_token="T3", expires_in=3600)
    request = route.calls.last.request
    expected = base64.b64encode(f"{CLIENT_ID}:{CLIENT_SECRET}".encode()).decode()
    assert request.headers["Authorization"] == f"Basic {expected}"
    assert request.headers["Content-Type"].startswith("application/x-www-form-urlencoded")
    assert request.headers["User-Agent"] == USER_AGENT
    assert request.headers["Origin"] == APP_URL
    assert _form(request) == {
        "client_id": CLIENT_ID,
        "grant_type": "authorization_code",
        "redirect_uri": f"{APP_URL}/api/auth/callback",
        "code": "abc123",
    }


@pytest.mark.asyncio
@respx.mock
async def test_exchange_with_secret_in_body(token_payload) -> None:
    route = respx.post(TOKEN_ENDPOINT).mock(return_value=httpx.Response(200, json=token_payload))
    exchanger = TokenExchanger(make_config(token_endpoint_auth_method="client_secret_post"))

    await exchanger.exchange("abc123")

    request = route.calls.last.request
    assert "Authorization" not in request.headers
    assert _form(request)["client_secret"] == CLIENT_SECRET


@pytest.mark.asyncio
@respx.mock
async def test_request_tokens_returns_tagged_failure() -> None:
    respx.post(TOKEN_ENDPOINT).mock(
        return_value=httpx.Response(400, json={"error": "invalid_grant", "error_description": "used"})
    )

    result = await TokenExchanger(make_config()).request_tokens("abc123")

    assert isinstance(result, TokenExchangeFailure)
    assert result.status == 400
    assert result.error == "invalid_grant"
    assert "used" in result.body


@pytest.mark.asyncio
@respx.mock
async def test_request_tokens_returns_tagged_success(token_payload) -> None:
    respx.post(TOKEN_ENDPOINT).mock(return_value=httpx.Response(200, json=token_payload))

    result = await TokenExchanger(make_config()).request_tokens("abc123")

    assert isinstance(result, TokenExchangeSuccess)
    assert result.credentials.access_token == "T1"


@pytest.mark.asyncio
@respx.mock
async def test_exchange_raises_with_status_and_body() -> None:
    route = respx.post(TOKEN_ENDPOINT).mock(
        return_value=httpx.Response(401, json={"error": "invalid_client"})
    )

    with pytest.raises(TokenExchangeError) as exc_info:
        await TokenExchanger(make_config()).exchange("abc123")

    assert exc_info.value.status == 401
    assert exc_info.value.error == "invalid_client"
    assert "invalid_client" in exc_info.value.body
    assert exc_info.value.is_permanent
    # Single-use codes are never retried
    assert route.call_count == 1


@pytest.mark.asyncio
@respx.mock
async def test_timeout_is_a_token_exchange_error() -> None:
    respx.post(TOKEN_ENDPOINT).mock(side_effect=httpx.ConnectTimeout("too slow"))

    with pytest.raises(TokenExchangeError) as exc_info:
        await TokenExchanger(make_config()).exchange("abc123")

    assert exc_info.value.status is None
    assert "timeout" in exc_info.value.body


@pytest.mark.asyncio
@respx.mock
async def test_missing_id_token_is_invalid_token_response() -> None:
    respx.post(TOKEN_ENDPOINT).mock(
        return_value=httpx.Response(200, json={"access_token": "T1", "refresh_token": "T3"})
    )

    with pytest.raises(InvalidTokenResponseError, match="id_token"):
        await TokenExchanger(make_config()).exchange("abc123")


@pytest.mark.asyncio
@respx.mock
async def test_non_json_success_is_invalid_token_response() -> None:
    respx.post(TOKEN_ENDPOINT).mock(return_value=httpx.Response(200, text="<html>ok</html>"))

    with pytest.raises(InvalidTokenResponseError):
        await TokenExchanger(make_config()).exchange("abc123")


@pytest.mark.asyncio
async def test_empty_code_is_rejected_without_network() -> None:
    with pytest.raises(ValueError):
        await TokenExchanger(make_config()).exchange("")


@pytest.mark.asyncio
@respx.mock
async def test_refresh_carries_over_tokens_not_reissued() -> None:
    route = respx.post(TOKEN_ENDPOINT).mock(
        return_value=httpx.Response(200, json={"access_token": "T1b", "expires_in": 1800})
    )
    current = CredentialSet(access_token="T1", id_token="T2", refresh_token="T3", expires_in=0)

    refreshed = await TokenExchanger(make_config()).refresh(current)

    assert refreshed == CredentialSet(access_token="T1b", id_token="T2", refresh_token="T3", expires_in=1800)
    form = _form(route.calls.last.request)
    assert form["grant_type"] == "refresh_token"
    assert form["refresh_token"] == "T3"


def test_exchanger_requires_client_secret() -> None:
    with pytest.raises(ConfigurationError, match="CUSTOMER_ACCOUNT_API_CLIENT_SECRET"):
        TokenExchanger(make_config(client_secret=""))
