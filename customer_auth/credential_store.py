"""Cookie-backed custody of the customer's tokens"""

import logging
from typing import Dict, List, Mapping, Optional, Tuple

from starlette.responses import Response

from utils.redaction import mask_secret
from .config import CustomerAuthConfig
from .models import CredentialSet

logger = logging.getLogger(__name__)

ACCESS_TOKEN_COOKIE = "access_token"
ID_TOKEN_COOKIE = "id_token"
REFRESH_TOKEN_COOKIE = "refresh_token"
STATE_COOKIE = "oauth_state"

# Always written and cleared together
TOKEN_COOKIES = (ACCESS_TOKEN_COOKIE, ID_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE)

_CLEARED = None


class CredentialStore:
    """Secure cookie storage for one request/response cycle

    Reads come from the incoming request cookies. Writes are queued and
    flushed onto the outgoing response with ``apply`` so a handler can
    decide which response to send after touching the store.

    Every cookie is HttpOnly, Secure, SameSite=Lax and Path=/.
    """

    def __init__(self, cookies: Mapping[str, str], config: CustomerAuthConfig):
        self._cookies = dict(cookies)
        self.config = config
        # name -> (value or None when cleared, max_age)
        self._pending: Dict[str, Tuple[Optional[str], int]] = {}

    def read(self, name: str) -> Optional[str]:
        """Current value of a cookie, None when absent, empty or cleared"""
        if name in self._pending:
            value = self._pending[name][0]
        else:
            value = self._cookies.get(name)
        return value or None

    def store(self, name: str, value: str, ttl_seconds: int):
        """Queue a secure cookie with an explicit lifetime"""
        if not value:
            raise ValueError(f"Refusing to store an empty value in cookie {name}")
        if ttl_seconds <= 0:
            raise ValueError(f"Cookie {name} needs a positive lifetime, got {ttl_seconds}")
        self._pending[name] = (value, ttl_seconds)
        logger.debug(f"Queued cookie {name}={mask_secret(value)} (max-age {ttl_seconds}s)")

    def clear(self, name: str):
        """Queue an empty, immediately expiring cookie"""
        self._pending[name] = (_CLEARED, 0)

    def store_credentials(self, credentials: CredentialSet):
        """Queue all three token cookies from one token response

        Access and ID tokens share a lifetime capped by the provider's
        expires_in; neither may outlive the refresh token.
        """
        refresh_ttl = self.config.refresh_token_max_age
        access_ttl = self.config.access_token_max_age
        if credentials.expires_in and credentials.expires_in > 0:
            access_ttl = min(access_ttl, credentials.expires_in)
        access_ttl = min(access_ttl, refresh_ttl)

        self.store(ACCESS_TOKEN_COOKIE, credentials.access_token, access_ttl)
        # The ID token is only needed for logout, which must be possible while the access token lives
        self.store(ID_TOKEN_COOKIE, credentials.id_token, access_ttl)
        self.store(REFRESH_TOKEN_COOKIE, credentials.refresh_token, refresh_ttl)

    def clear_all(self):
        """Clear every token cookie; never a subset"""
        for name in TOKEN_COOKIES:
            self.clear(name)

    def save_state(self, state: str):
        self.store(STATE_COOKIE, state, self.config.state_max_age)

    def read_state(self) -> Optional[str]:
        return self.read(STATE_COOKIE)

    def has_credentials(self) -> bool:
        return self.read(ACCESS_TOKEN_COOKIE) is not None

    @property
    def pending_names(self) -> List[str]:
        return list(self._pending)

    def apply(self, response: Response) -> Response:
        """Write every queued cookie onto the response

        Returns:
            The same response, for chaining
        """
        domain = self.config.cookie_domain or None
        for name, (value, max_age) in self._pending.items():
            if value is _CLEARED:
                response.delete_cookie(
                    key=name,
                    path="/",
                    domain=domain,
                    secure=True,
                    httponly=True,
                    samesite="lax",
                )
            else:
                response.set_cookie(
                    key=name,
                    value=value,
                    max_age=max_age,
                    path="/",
                    domain=domain,
                    secure=True,
                    httponly=True,
                    samesite="lax",
                )
        self._pending.clear()
        return response
