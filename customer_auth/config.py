"""Customer auth configuration snapshot and validation"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import httpx

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CALLBACK_PATH = "/api/auth/callback"
TOKEN_AUTH_METHODS = ("client_secret_basic", "client_secret_post")


@dataclass(frozen=True)
class CustomerAuthConfig:
    """Identity provider and cookie settings for one application instance"""
    client_id: str
    client_secret: str
    api_url: str
    authorize_endpoint: str
    token_endpoint: str
    logout_endpoint: str
    app_url: str
    scopes: str = "openid email customer-account-api:full"
    env: str = "production"
    proxied_app_url: str = ""
    redirect_uri: str = ""
    token_endpoint_auth_method: str = "client_secret_basic"
    customer_api_auth_scheme: str = ""
    verify_state: bool = True
    access_token_max_age: int = 3600
    refresh_token_max_age: int = 604800
    state_max_age: int = 600
    cookie_domain: Optional[str] = None
    connect_timeout: float = 5.0
    request_timeout: float = 10.0

    @classmethod
    def from_settings(cls) -> "CustomerAuthConfig":
        """Snapshot the current values of the ``settings`` module"""
        import settings

        return cls(
            client_id=settings.CUSTOMER_ACCOUNT_API_CLIENT_ID,
            client_secret=settings.CUSTOMER_ACCOUNT_API_CLIENT_SECRET,
            api_url=settings.CUSTOMER_ACCOUNT_API_URL,
            authorize_endpoint=settings.CUSTOMER_ACCOUNT_API_AUTHORIZATION_ENDPOINT,
            token_endpoint=settings.CUSTOMER_ACCOUNT_API_TOKEN_ENDPOINT,
            logout_endpoint=settings.CUSTOMER_ACCOUNT_API_LOGOUT_ENDPOINT,
            app_url=settings.APP_URL,
            scopes=settings.CUSTOMER_ACCOUNT_API_SCOPES,
            env=settings.ENV,
            proxied_app_url=settings.PROXIED_LOCALHOST_APP_URL,
            redirect_uri=settings.REDIRECT_URI,
            token_endpoint_auth_method=settings.TOKEN_ENDPOINT_AUTH_METHOD,
            customer_api_auth_scheme=settings.CUSTOMER_API_AUTH_SCHEME,
            verify_state=settings.VERIFY_STATE,
            access_token_max_age=settings.ACCESS_TOKEN_MAX_AGE,
            refresh_token_max_age=settings.REFRESH_TOKEN_MAX_AGE,
            state_max_age=settings.STATE_MAX_AGE,
            cookie_domain=settings.COOKIE_DOMAIN or None,
            connect_timeout=settings.CONNECT_TIMEOUT,
            request_timeout=settings.REQUEST_TIMEOUT,
        )

    @property
    def in_dev(self) -> bool:
        return self.env.lower() == "dev"

    @property
    def auth_app_url(self) -> str:
        """Public app URL used for redirects inside the auth flow

        In dev the provider only accepts the tunnelled URL, never localhost.
        """
        if self.in_dev:
            return self.proxied_app_url.rstrip("/")
        return self.app_url.rstrip("/")

    @property
    def callback_redirect_uri(self) -> str:
        if self.redirect_uri:
            return self.redirect_uri
        return f"{self.auth_app_url}{CALLBACK_PATH}"

    @property
    def timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self.request_timeout, connect=self.connect_timeout)

    def required_fields(self) -> List[Tuple[str, str]]:
        """(environment variable, value) pairs that must be non-empty"""
        fields = [
            ("CUSTOMER_ACCOUNT_API_CLIENT_ID", self.client_id),
            ("CUSTOMER_ACCOUNT_API_CLIENT_SECRET", self.client_secret),
            ("CUSTOMER_ACCOUNT_API_URL", self.api_url),
            ("CUSTOMER_ACCOUNT_API_AUTHORIZATION_ENDPOINT", self.authorize_endpoint),
            ("CUSTOMER_ACCOUNT_API_TOKEN_ENDPOINT", self.token_endpoint),
            ("CUSTOMER_ACCOUNT_API_LOGOUT_ENDPOINT", self.logout_endpoint),
            ("CUSTOMER_ACCOUNT_API_SCOPES", self.scopes),
        ]
        if self.in_dev:
            fields.append(("PROXIED_LOCALHOST_APP_URL", self.proxied_app_url))
        else:
            fields.append(("APP_URL", self.app_url))
        return fields

    def missing_fields(self) -> List[str]:
        return [name for name, value in self.required_fields() if not (value or "").strip()]

    def validate(self) -> "CustomerAuthConfig":
        """Check the configuration eagerly

        Returns:
            self, so the call can be chained

        Raises:
            ConfigurationError: If a required value is missing or a setting is invalid
        """
        missing = self.missing_fields()
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}",
                missing=missing,
            )

        if self.token_endpoint_auth_method not in TOKEN_AUTH_METHODS:
            raise ConfigurationError(
                f"TOKEN_ENDPOINT_AUTH_METHOD must be one of {', '.join(TOKEN_AUTH_METHODS)}, "
                f"got {self.token_endpoint_auth_method!r}"
            )

        if self.access_token_max_age <= 0 or self.refresh_token_max_age <= 0 or self.state_max_age <= 0:
            raise ConfigurationError("Cookie max-age values must be positive")

        if self.access_token_max_age > self.refresh_token_max_age:
            raise ConfigurationError(
                f"ACCESS_TOKEN_MAX_AGE ({self.access_token_max_age}) must not exceed "
                f"REFRESH_TOKEN_MAX_AGE ({self.refresh_token_max_age})"
            )

        if self.connect_timeout <= 0 or self.request_timeout <= 0:
            raise ConfigurationError("CONNECT_TIMEOUT and REQUEST_TIMEOUT must be positive")

        if not self.auth_app_url.startswith("https://"):
            logger.warning(
                f"Auth app URL {self.auth_app_url} is not HTTPS; browsers drop Secure cookies on plain HTTP"
            )

        return self
