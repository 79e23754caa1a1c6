"""Customer Account authentication package (confidential OAuth client)"""

from typing import Mapping

from .authorization import AuthorizationURLBuilder, create_nonce, create_state, verify_state
from .config import CustomerAuthConfig
from .credential_store import (
    ACCESS_TOKEN_COOKIE,
    ID_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    STATE_COOKIE,
    TOKEN_COOKIES,
    CredentialStore,
)
from .events import AuthEventEmitter
from .exceptions import (
    ConfigurationError,
    CustomerAuthError,
    InvalidTokenResponseError,
    LogoutError,
    SessionResolutionError,
    StateMismatchError,
    TokenExchangeError,
)
from .logout import SessionTerminator
from .models import (
    AuthEvent,
    AuthorizationRequest,
    CredentialSet,
    Customer,
    SessionStatus,
    TokenExchangeFailure,
    TokenExchangeResult,
    TokenExchangeSuccess,
)
from .session import SessionResolver
from .token_exchange import TokenExchanger


class CustomerAuthManager:
    """Customer login flow for one application instance

    This class wires together:
    - Authorization URL construction and state verification
    - Authorization code exchange and token refresh
    - Cookie custody of the token set
    - Session resolution against the Customer Account API
    - Local and provider-side logout
    - Session event notifications

    The configuration is validated on construction, so a misconfigured
    service fails at startup instead of on the first login.
    """

    def __init__(self, config: CustomerAuthConfig):
        self.config = config.validate()
        self.events = AuthEventEmitter()
        self.authorization = AuthorizationURLBuilder(self.config)
        self.exchanger = TokenExchanger(self.config)
        self.resolver = SessionResolver(self.config)
        self.terminator = SessionTerminator(self.config)

    @property
    def app_url(self) -> str:
        return self.config.auth_app_url

    def credential_store(self, cookies: Mapping[str, str]) -> CredentialStore:
        """Credential store bound to one request's cookies"""
        return CredentialStore(cookies, self.config)

    # Authorization
    def start_login(self, store: CredentialStore) -> AuthorizationRequest:
        """Build the authorize redirect and remember its state

        Returns:
            AuthorizationRequest whose URL the caller redirects to
        """
        request = self.authorization.build()
        store.save_state(request.state)
        return request

    def check_state(self, store: CredentialStore, received: str):
        """Verify the callback state against the one issued at login

        Raises:
            StateMismatchError: If verification is enabled and the values differ
        """
        if not self.config.verify_state:
            return
        if not verify_state(store.read_state() or "", received or ""):
            raise StateMismatchError("Callback state does not match the login state")

    # Token exchange
    async def complete_login(self, store: CredentialStore, code: str) -> CredentialSet:
        """Exchange the code, store all three tokens and retire the login state

        Raises:
            TokenExchangeError: If the provider rejects the code
            InvalidTokenResponseError: If the token set is incomplete
        """
        credentials = await self.exchanger.exchange(code)
        store.store_credentials(credentials)
        store.clear(STATE_COOKIE)
        return credentials

    async def refresh(self, store: CredentialStore) -> CredentialSet:
        """Refresh the stored token set

        Raises:
            TokenExchangeError: If no refresh token is stored or the provider rejects it
        """
        refresh_token = store.read(REFRESH_TOKEN_COOKIE)
        if not refresh_token:
            raise TokenExchangeError("No refresh token available for refresh")

        current = CredentialSet(
            access_token=store.read(ACCESS_TOKEN_COOKIE) or "",
            id_token=store.read(ID_TOKEN_COOKIE) or "",
            refresh_token=refresh_token,
            expires_in=0,
        )
        credentials = await self.exchanger.refresh(current)
        store.store_credentials(credentials)
        return credentials

    # Session
    async def resolve_session(self, store: CredentialStore) -> SessionStatus:
        return await self.resolver.resolve(store)

    def logout(self, store: CredentialStore) -> str:
        """Clear local credentials and return the redirect target"""
        return self.terminator.terminate(store)


__all__ = [
    "ACCESS_TOKEN_COOKIE",
    "AuthEvent",
    "AuthEventEmitter",
    "AuthorizationRequest",
    "AuthorizationURLBuilder",
    "ConfigurationError",
    "CredentialSet",
    "CredentialStore",
    "Customer",
    "CustomerAuthConfig",
    "CustomerAuthError",
    "CustomerAuthManager",
    "ID_TOKEN_COOKIE",
    "InvalidTokenResponseError",
    "LogoutError",
    "REFRESH_TOKEN_COOKIE",
    "STATE_COOKIE",
    "SessionResolutionError",
    "SessionResolver",
    "SessionStatus",
    "SessionTerminator",
    "StateMismatchError",
    "TOKEN_COOKIES",
    "TokenExchangeError",
    "TokenExchangeFailure",
    "TokenExchangeResult",
    "TokenExchangeSuccess",
    "TokenExchanger",
    "create_nonce",
    "create_state",
    "verify_state",
]
