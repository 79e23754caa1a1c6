"""Authorization URL construction and state verification"""

import secrets
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from .config import CustomerAuthConfig
from .exceptions import ConfigurationError
from .models import AuthorizationRequest


def create_state() -> str:
    """Generate an unguessable anti-CSRF state value"""
    return secrets.token_urlsafe(32)


def create_nonce() -> str:
    """Generate a replay-protection nonce for the ID token"""
    return secrets.token_urlsafe(16)


def verify_state(expected: str, received: str) -> bool:
    """Compare the issued and returned state in constant time"""
    if not expected or not received:
        return False
    return secrets.compare_digest(expected.encode("utf-8"), received.encode("utf-8"))


class AuthorizationURLBuilder:
    """Builds identity provider authorize URLs for a confidential client"""

    def __init__(self, config: CustomerAuthConfig):
        missing = [
            name for name, value in (
                ("CUSTOMER_ACCOUNT_API_CLIENT_ID", config.client_id),
                ("CUSTOMER_ACCOUNT_API_AUTHORIZATION_ENDPOINT", config.authorize_endpoint),
                ("REDIRECT_URI", config.callback_redirect_uri),
            ) if not value
        ]
        if missing:
            raise ConfigurationError(
                f"Cannot build authorization URLs without {', '.join(missing)}",
                missing=missing,
            )
        self.config = config

    def build(self) -> AuthorizationRequest:
        """Construct the authorize URL for a new login attempt

        No PKCE parameters: the client authenticates with its secret at the
        token endpoint instead.

        Returns:
            AuthorizationRequest with the URL and the state/nonce it carries
        """
        state = create_state()
        nonce = create_nonce()

        params = {
            "client_id": self.config.client_id,
            "redirect_uri": self.config.callback_redirect_uri,
            "scope": self.config.scopes,
            "response_type": "code",
            "state": state,
            "nonce": nonce,
        }

        scheme, netloc, path, query, fragment = urlsplit(self.config.authorize_endpoint)
        existing = parse_qsl(query, keep_blank_values=True)
        query = urlencode(existing + list(params.items()))
        url = urlunsplit((scheme, netloc, path, query, fragment))

        return AuthorizationRequest(url=url, state=state, nonce=nonce)
