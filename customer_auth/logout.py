"""End the local session and the provider-side session together"""

import logging
from urllib.parse import quote

from .config import CustomerAuthConfig
from .credential_store import ID_TOKEN_COOKIE, CredentialStore
from .exceptions import ConfigurationError, LogoutError

logger = logging.getLogger(__name__)


class SessionTerminator:
    """Builds provider logout redirects and clears local credentials"""

    def __init__(self, config: CustomerAuthConfig):
        if not config.logout_endpoint:
            raise ConfigurationError(
                "Cannot log out without CUSTOMER_ACCOUNT_API_LOGOUT_ENDPOINT",
                missing=["CUSTOMER_ACCOUNT_API_LOGOUT_ENDPOINT"],
            )
        self.config = config

    @property
    def home_url(self) -> str:
        return self.config.auth_app_url

    def build_logout_url(self, id_token: str) -> str:
        """Provider logout URL that returns the browser to the app

        Raises:
            LogoutError: If no id_token is available for the hint
        """
        if not id_token:
            raise LogoutError("id_token is required for provider logout")

        separator = "&" if "?" in self.config.logout_endpoint else "?"
        return (
            f"{self.config.logout_endpoint}{separator}"
            f"id_token_hint={quote(id_token, safe='')}"
            f"&post_logout_redirect_uri={quote(self.home_url, safe=':/')}"
        )

    def terminate(self, store: CredentialStore) -> str:
        """Clear every local credential and pick the redirect target

        The id_token is read before the cookies are cleared; it is needed
        for the logout URL.

        Returns:
            Provider logout URL, or the app home URL for a local-only logout
        """
        id_token = store.read(ID_TOKEN_COOKIE)

        try:
            target = self.build_logout_url(id_token)
        except LogoutError as e:
            logger.warning(f"Local-only logout: {e}")
            target = self.home_url

        store.clear_all()
        logger.info("Cleared customer auth cookies")
        return target
