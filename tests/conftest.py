"""Shared fixtures for the customer auth test suite."""

from typing import Dict

import httpx
import pytest
from fastapi.testclient import TestClient

from customer_auth import CustomerAuthConfig, CustomerAuthManager
from storefront import create_app

APP_URL = "https://shop.example.com"
PROVIDER = "https://provider.example.com"
AUTHORIZE_ENDPOINT = f"{PROVIDER}/oauth/authorize"
TOKEN_ENDPOINT = f"{PROVIDER}/oauth/token"
LOGOUT_ENDPOINT = f"{PROVIDER}/logout"
CUSTOMER_API_URL = f"{PROVIDER}/customer/api/2025-01/graphql"
CLIENT_ID = "client-123"
CLIENT_SECRET = "secret-456"


def make_config(**overrides) -> CustomerAuthConfig:
    """Build a complete test configuration with optional overrides."""
    values = dict(
        client_id=CLIENT_ID,
        client_secret=CLIENT_SECRET,
        api_url=CUSTOMER_API_URL,
        authorize_endpoint=AUTHORIZE_ENDPOINT,
        token_endpoint=TOKEN_ENDPOINT,
        logout_endpoint=LOGOUT_ENDPOINT,
        app_url=APP_URL,
    )
    values.update(overrides)
    return CustomerAuthConfig(**values)


def set_cookie_headers(response: httpx.Response) -> Dict[str, str]:
    """Map cookie name -> raw Set-Cookie header for a response."""
    headers = {}
    for header in response.headers.get_list("set-cookie"):
        name = header.split("=", 1)[0]
        headers[name] = header
    return headers


def cookie_value(header: str) -> str:
    return header.split(";", 1)[0].split("=", 1)[1].strip('"')


def max_age(header: str) -> int:
    for part in header.split(";"):
        key, _, value = part.strip().partition("=")
        if key.lower() == "max-age":
            return int(value)
    raise AssertionError(f"No Max-Age in {header!r}")


@pytest.fixture()
def auth_config() -> CustomerAuthConfig:
    return make_config()


@pytest.fixture()
def manager(auth_config: CustomerAuthConfig) -> CustomerAuthManager:
    return CustomerAuthManager(auth_config)


@pytest.fixture()
def client(manager: CustomerAuthManager) -> TestClient:
    """TestClient around a fully wired app."""
    return TestClient(create_app(manager=manager))


@pytest.fixture()
def token_payload() -> Dict[str, object]:
    return {
        "access_token": "T1",
        "id_token": "T2",
        "refresh_token": "T3",
        "expires_in": 3600,
    }
