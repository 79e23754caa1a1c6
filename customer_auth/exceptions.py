"""Exceptions raised by the customer auth flow"""

from typing import List, Optional


class CustomerAuthError(Exception):
    """Base class for customer auth errors"""


class ConfigurationError(CustomerAuthError):
    """Required identity provider configuration is missing or invalid

    Raised at startup; the service must not start with a broken config.
    """

    def __init__(self, message: str, missing: Optional[List[str]] = None):
        super().__init__(message)
        self.missing = list(missing or [])


class TokenExchangeError(CustomerAuthError):
    """The token endpoint rejected a grant or could not be reached

    Attributes:
        status: HTTP status code, or None for transport failures (timeout, connection)
        body: Raw response body (or transport error text) for diagnosis
        error: OAuth error code from the body when present (e.g. invalid_grant)
    """

    def __init__(self, message: str, status: Optional[int] = None, body: str = "", error: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.body = body
        self.error = error

    @property
    def is_permanent(self) -> bool:
        """True when retrying with the same grant can never succeed"""
        return self.error in ("invalid_grant", "invalid_client", "unauthorized_client")


class InvalidTokenResponseError(TokenExchangeError):
    """The token endpoint answered 2xx but the token set is unusable"""


class SessionResolutionError(CustomerAuthError):
    """The current customer could not be resolved from the access token"""


class LogoutError(CustomerAuthError):
    """The provider-side logout could not be performed"""


class StateMismatchError(CustomerAuthError):
    """The callback state does not match the state issued at login"""
