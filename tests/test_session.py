"""Tests for session resolution against the Customer Account API."""

import json

import httpx
import pytest
import respx

from customer_auth import (
    ConfigurationError,
    CredentialStore,
    SessionResolutionError,
    SessionResolver,
)
from tests.conftest import APP_URL, CUSTOMER_API_URL, make_config

CUSTOMER_NODE = {
    "id": "gid://shopify/Customer/7",
    "firstName": None,
    "lastName": "Hopper",
    "emailAddress": {"emailAddress": "grace@example.com"},
}


def test_authorization_header_is_raw_token_by_default() -> None:
    assert SessionResolver(make_config()).authorization_header("T1") == "T1"


def test_authorization_header_with_configured_scheme() -> None:
    resolver = SessionResolver(make_config(customer_api_auth_scheme="Bearer"))

    assert resolver.authorization_header("T1") == "Bearer T1"


@pytest.mark.asyncio
@respx.mock
async def test_fetch_customer_posts_graphql_query() -> None:
    route = respx.post(CUSTOMER_API_URL).mock(
        return_value=httpx.Response(200, json={"data": {"customer": CUSTOMER_NODE}})
    )

    customer = await SessionResolver(make_config()).fetch_customer("T1")

    assert customer.id == "gid://shopify/Customer/7"
    assert customer.emailAddress == "grace@example.com"
    assert customer.firstName is None
    request = route.calls.last.request
    assert request.headers["Authorization"] == "T1"
    assert request.headers["Origin"] == APP_URL
    assert "customer" in json.loads(request.content)["query"]


@pytest.mark.asyncio
@respx.mock
async def test_fetch_customer_raises_on_graphql_errors() -> None:
    respx.post(CUSTOMER_API_URL).mock(
        return_value=httpx.Response(200, json={"errors": [{"message": "expired"}]})
    )

    with pytest.raises(SessionResolutionError, match="expired"):
        await SessionResolver(make_config()).fetch_customer("T1")


@pytest.mark.asyncio
@respx.mock
async def test_resolve_fails_closed_on_transport_error() -> None:
    respx.post(CUSTOMER_API_URL).mock(side_effect=httpx.ConnectError("refused"))
    store = CredentialStore({"access_token": "T1"}, make_config())

    status = await SessionResolver(make_config()).resolve(store)

    assert status.authenticated is False
    assert status.customer is None


@pytest.mark.asyncio
@respx.mock
async def test_resolve_returns_customer() -> None:
    respx.post(CUSTOMER_API_URL).mock(
        return_value=httpx.Response(200, json={"data": {"customer": CUSTOMER_NODE}})
    )
    store = CredentialStore({"access_token": "T1"}, make_config())

    status = await SessionResolver(make_config()).resolve(store)

    assert status.authenticated is True
    assert status.customer.lastName == "Hopper"


def test_resolver_requires_api_url() -> None:
    with pytest.raises(ConfigurationError):
        SessionResolver(make_config(api_url=""))


@pytest.mark.asyncio
@respx.mock(assert_all_called=False)
async def test_non_ascii_token_fails_before_any_request() -> None:
    route = respx.post(CUSTOMER_API_URL).mock(
        return_value=httpx.Response(200, json={"data": {"customer": CUSTOMER_NODE}})
    )

    with pytest.raises(SessionResolutionError, match="non-ASCII"):
        await SessionResolver(make_config()).fetch_customer("cafÃ©")

    assert not route.called


@pytest.mark.asyncio
async def test_non_ascii_auth_scheme_is_a_resolution_error() -> None:
    resolver = SessionResolver(make_config(customer_api_auth_scheme="Träger"))

    with pytest.raises(SessionResolutionError, match="could not be built"):
        await resolver.fetch_customer("T1")
