"""Resolve the current customer from the stored access token

Resolution fails closed: any doubt about the identity provider's answer
means the visitor is treated as unauthenticated.
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from headers import GRAPHQL_REQUEST_HEADERS
from .config import CustomerAuthConfig
from .credential_store import ACCESS_TOKEN_COOKIE, CredentialStore
from .exceptions import ConfigurationError, SessionResolutionError
from .models import Customer, SessionStatus

logger = logging.getLogger(__name__)

CUSTOMER_QUERY = """
query GetCustomer {
  customer {
    id
    firstName
    lastName
    emailAddress {
      emailAddress
    }
  }
}
"""


class SessionResolver:
    """Maps an access token to a Customer via the Customer Account API"""

    def __init__(self, config: CustomerAuthConfig):
        if not config.api_url:
            raise ConfigurationError(
                "Cannot resolve sessions without CUSTOMER_ACCOUNT_API_URL",
                missing=["CUSTOMER_ACCOUNT_API_URL"],
            )
        self.config = config

    def authorization_header(self, access_token: str) -> str:
        """Header value in the format the identity API expects

        The Customer Account API wants the bare token; a scheme such as
        "Bearer" is only prepended when configured.
        """
        scheme = self.config.customer_api_auth_scheme.strip()
        return f"{scheme} {access_token}" if scheme else access_token

    async def fetch_customer(self, access_token: str) -> Customer:
        """Query the identity API for the customer owning the token

        Raises:
            SessionResolutionError: On transport errors, non-2xx responses,
                GraphQL errors, a malformed customer payload, or a token
                that cannot be sent as an ASCII header
        """
        if not access_token.isascii():
            raise SessionResolutionError("Access token contains non-ASCII characters")

        headers = dict(GRAPHQL_REQUEST_HEADERS)
        headers["Authorization"] = self.authorization_header(access_token)
        headers["Origin"] = self.config.auth_app_url

        try:
            async with httpx.AsyncClient(timeout=self.config.timeout) as client:
                response = await client.post(
                    self.config.api_url,
                    json={"query": CUSTOMER_QUERY},
                    headers=headers,
                )
        except httpx.TimeoutException as e:
            raise SessionResolutionError(f"Customer query timed out: {e!r}") from e
        except httpx.RequestError as e:
            raise SessionResolutionError(f"Customer query failed: {e!r}") from e
        except (UnicodeEncodeError, httpx.InvalidURL) as e:
            raise SessionResolutionError(f"Customer query could not be built: {e!r}") from e

        if not response.is_success:
            raise SessionResolutionError(
                f"Customer query failed with status {response.status_code}: {response.text}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise SessionResolutionError("Customer query returned invalid JSON") from e

        return self._parse_customer(payload)

    def _parse_customer(self, payload: Any) -> Customer:
        if not isinstance(payload, dict):
            raise SessionResolutionError("Customer query returned a non-object body")

        errors = payload.get("errors")
        if errors:
            raise SessionResolutionError(f"Customer query returned errors: {errors}")

        data = payload.get("data")
        node = data.get("customer") if isinstance(data, dict) else None
        if not isinstance(node, dict):
            raise SessionResolutionError("Customer query returned no customer")

        try:
            return Customer.from_graphql(node)
        except ValidationError as e:
            raise SessionResolutionError(f"Customer payload is malformed: {e}") from e

    async def resolve(self, store: CredentialStore) -> SessionStatus:
        """Report whether the visitor is authenticated and who they are

        Never raises: every failure resolves to unauthenticated.
        """
        access_token = store.read(ACCESS_TOKEN_COOKIE)
        if not access_token:
            logger.debug("No access token found, returning unauthenticated")
            return SessionStatus.unauthenticated()

        try:
            customer = await self.fetch_customer(access_token)
        except SessionResolutionError as e:
            logger.warning(f"Session resolution failed, treating as unauthenticated: {e}")
            return SessionStatus.unauthenticated()
        except Exception:
            logger.exception("Unexpected error resolving session, treating as unauthenticated")
            return SessionStatus.unauthenticated()

        logger.debug(f"Resolved customer {customer.id}")
        return SessionStatus.for_customer(customer)
