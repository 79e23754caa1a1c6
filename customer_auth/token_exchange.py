"""OAuth token endpoint calls for a confidential client

The authorization code is single use: a second exchange with the same code
is guaranteed to fail with invalid_grant, so nothing here retries.
"""

import base64
import json
import logging
from typing import Any, Dict, Optional

import httpx

from headers import TOKEN_REQUEST_HEADERS
from utils.redaction import mask_secret
from .config import CustomerAuthConfig
from .exceptions import ConfigurationError, InvalidTokenResponseError, TokenExchangeError
from .models import (
    CredentialSet,
    TokenExchangeFailure,
    TokenExchangeResult,
    TokenExchangeSuccess,
)

logger = logging.getLogger(__name__)

REQUIRED_TOKENS = ("access_token", "id_token", "refresh_token")


def basic_credentials(client_id: str, client_secret: str) -> str:
    """Authorization header value for HTTP Basic client authentication"""
    raw = f"{client_id}:{client_secret}".encode("utf-8")
    return f"Basic {base64.b64encode(raw).decode('ascii')}"


def _parse_error_code(body: str) -> Optional[str]:
    """Pull the OAuth ``error`` field out of an error body, if it is JSON"""
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, TypeError):
        return None
    if isinstance(payload, dict) and isinstance(payload.get("error"), str):
        return payload["error"]
    return None


def parse_token_payload(payload: Any, fallback: Optional[CredentialSet] = None) -> CredentialSet:
    """Validate a token endpoint body and build a CredentialSet

    Args:
        payload: Decoded JSON body
        fallback: Current credentials; their id/refresh tokens fill gaps in a
                  refresh response that omits them

    Raises:
        InvalidTokenResponseError: If a token is missing
    """
    if not isinstance(payload, dict):
        raise InvalidTokenResponseError("Token response is not a JSON object", body=str(payload))

    data = dict(payload)
    if fallback is not None:
        data.setdefault("id_token", fallback.id_token)
        data.setdefault("refresh_token", fallback.refresh_token)

    missing = [name for name in REQUIRED_TOKENS if not data.get(name)]
    if missing:
        raise InvalidTokenResponseError(
            f"Token response missing {', '.join(missing)}",
            body=json.dumps({key: ("<present>" if value else value) for key, value in payload.items()}),
        )

    try:
        expires_in = int(data.get("expires_in") or 0)
    except (TypeError, ValueError):
        expires_in = 0

    return CredentialSet(
        access_token=data["access_token"],
        id_token=data["id_token"],
        refresh_token=data["refresh_token"],
        expires_in=expires_in,
    )


class TokenExchanger:
    """Exchanges grants for a CredentialSet at the provider token endpoint"""

    def __init__(self, config: CustomerAuthConfig):
        missing = [
            name for name, value in (
                ("CUSTOMER_ACCOUNT_API_TOKEN_ENDPOINT", config.token_endpoint),
                ("CUSTOMER_ACCOUNT_API_CLIENT_ID", config.client_id),
                ("CUSTOMER_ACCOUNT_API_CLIENT_SECRET", config.client_secret),
            ) if not value
        ]
        if missing:
            raise ConfigurationError(
                f"Cannot exchange tokens without {', '.join(missing)}",
                missing=missing,
            )
        self.config = config

    def _build_request(self, form: Dict[str, str]) -> tuple[Dict[str, str], Dict[str, str]]:
        """Add client authentication to a token request

        Returns:
            Tuple of (form body, headers)
        """
        body = {"client_id": self.config.client_id, **form}
        headers = dict(TOKEN_REQUEST_HEADERS)
        headers["Origin"] = self.config.auth_app_url

        if self.config.token_endpoint_auth_method == "client_secret_post":
            body["client_secret"] = self.config.client_secret
        else:
            headers["Authorization"] = basic_credentials(self.config.client_id, self.config.client_secret)
        return body, headers

    async def _post(self, form: Dict[str, str], fallback: Optional[CredentialSet] = None) -> TokenExchangeResult:
        """POST a grant and classify the outcome

        Only 2xx JSON bodies with every token count as success.

        Raises:
            InvalidTokenResponseError: If a 2xx body is not JSON or lacks a token
        """
        body, headers = self._build_request(form)
        grant_type = form.get("grant_type")
        logger.info(f"Requesting tokens ({grant_type}) at {self.config.token_endpoint}")

        try:
            async with httpx.AsyncClient(timeout=self.config.timeout) as client:
                response = await client.post(self.config.token_endpoint, data=body, headers=headers)
        except httpx.TimeoutException as e:
            logger.error(f"Token request ({grant_type}) timed out: {e!r}")
            return TokenExchangeFailure(status=None, body=f"timeout: {e!r}")
        except httpx.RequestError as e:
            logger.error(f"Token request ({grant_type}) failed: {e!r}")
            return TokenExchangeFailure(status=None, body=f"request error: {e!r}")

        logger.debug(f"Token endpoint response status: {response.status_code}")

        if not response.is_success:
            error = _parse_error_code(response.text)
            logger.error(
                f"Token request ({grant_type}) failed with status {response.status_code}: {response.text}"
            )
            return TokenExchangeFailure(status=response.status_code, body=response.text, error=error)

        try:
            payload = response.json()
        except ValueError:
            raise InvalidTokenResponseError(
                "Token response is not valid JSON",
                status=response.status_code,
                body=response.text,
            )
        return TokenExchangeSuccess(credentials=parse_token_payload(payload, fallback=fallback))

    async def request_tokens(self, code: str) -> TokenExchangeResult:
        """Exchange an authorization code, returning a tagged result

        Args:
            code: Authorization code from the callback

        Returns:
            TokenExchangeSuccess or TokenExchangeFailure

        Raises:
            ValueError: If code is empty
            InvalidTokenResponseError: If a 2xx response carries an incomplete token set
        """
        if not code:
            raise ValueError("Authorization code is required")

        logger.info(f"Exchanging authorization code {mask_secret(code)}")
        return await self._post({
            "grant_type": "authorization_code",
            "redirect_uri": self.config.callback_redirect_uri,
            "code": code,
        })

    async def exchange(self, code: str) -> CredentialSet:
        """Exchange an authorization code for a CredentialSet

        Raises:
            TokenExchangeError: On non-2xx responses or transport failures
            InvalidTokenResponseError: On 2xx responses without a usable token set
        """
        result = await self.request_tokens(code)
        if isinstance(result, TokenExchangeFailure):
            if result.error == "invalid_grant":
                logger.warning("Authorization code rejected (invalid_grant); it may have been used already")
            raise TokenExchangeError(
                f"Token exchange failed: {result.status} - {result.body}",
                status=result.status,
                body=result.body,
                error=result.error,
            )

        logger.info("Authorization code exchanged for customer tokens")
        return result.credentials

    async def refresh(self, current: CredentialSet) -> CredentialSet:
        """Use the refresh grant to obtain a fresh token set

        Args:
            current: Stored credentials; id/refresh tokens are carried over when
                     the provider does not reissue them

        Raises:
            TokenExchangeError: If the provider rejects the refresh token
        """
        if not current.refresh_token:
            raise ValueError("Refresh token is required")

        logger.info("Attempting to refresh customer tokens...")
        result = await self._post(
            {"grant_type": "refresh_token", "refresh_token": current.refresh_token},
            fallback=current,
        )
        if isinstance(result, TokenExchangeFailure):
            raise TokenExchangeError(
                f"Token refresh failed: {result.status} - {result.body}",
                status=result.status,
                body=result.body,
                error=result.error,
            )

        logger.info("Successfully refreshed customer tokens")
        return result.credentials
