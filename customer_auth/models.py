"""Data models for customer authentication"""

from dataclasses import dataclass, field
from typing import Any, Dict, NamedTuple, Optional, Union

from pydantic import BaseModel


@dataclass(frozen=True)
class CredentialSet:
    """Tokens issued by one token endpoint response

    Attributes:
        access_token: Credential for the Customer Account API (short lived)
        id_token: OpenID Connect ID token, required to log out at the provider
        refresh_token: Long-lived token for the refresh grant
        expires_in: Access token lifetime in seconds as reported by the provider
    """
    access_token: str
    id_token: str
    refresh_token: str
    expires_in: int


@dataclass(frozen=True)
class TokenExchangeSuccess:
    """Token endpoint answered 2xx with a complete token set"""
    credentials: CredentialSet


@dataclass(frozen=True)
class TokenExchangeFailure:
    """Token endpoint rejected the grant or was unreachable

    Attributes:
        status: HTTP status code, None when no response was received
        body: Response body, or the transport error text
        error: OAuth error code parsed from the body, if any
    """
    status: Optional[int]
    body: str
    error: Optional[str] = None


TokenExchangeResult = Union[TokenExchangeSuccess, TokenExchangeFailure]


class AuthorizationRequest(NamedTuple):
    """Authorization redirect data for one login attempt"""
    url: str
    state: str
    nonce: str


class Customer(BaseModel):
    """Authenticated customer as exposed to the storefront"""
    id: str
    emailAddress: str
    firstName: Optional[str] = None
    lastName: Optional[str] = None

    @classmethod
    def from_graphql(cls, node: Dict[str, Any]) -> "Customer":
        """Build from a Customer Account API ``customer`` node

        The API nests the address as ``emailAddress { emailAddress }``.
        """
        data = dict(node)
        email = data.get("emailAddress")
        if isinstance(email, dict):
            data["emailAddress"] = email.get("emailAddress")
        return cls.model_validate(data)


class SessionStatus(BaseModel):
    """Result of resolving the current session"""
    authenticated: bool
    customer: Optional[Customer] = None

    @classmethod
    def unauthenticated(cls) -> "SessionStatus":
        return cls(authenticated=False, customer=None)

    @classmethod
    def for_customer(cls, customer: Customer) -> "SessionStatus":
        return cls(authenticated=True, customer=customer)


@dataclass(frozen=True)
class AuthEvent:
    """Something that happened to a browser session"""
    kind: str
    detail: Dict[str, Any] = field(default_factory=dict)


LOGIN = "login"
LOGIN_FAILED = "login_failed"
LOGOUT = "logout"
REFRESH = "refresh"
