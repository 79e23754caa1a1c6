"""
FastAPI application factory.
"""
import logging
from typing import Optional

from fastapi import FastAPI

from customer_auth import CustomerAuthConfig, CustomerAuthManager
from .middleware import log_requests_middleware
from .endpoints import auth_router, health_router

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[CustomerAuthConfig] = None,
    manager: Optional[CustomerAuthManager] = None,
) -> FastAPI:
    """Create the storefront auth application

    The auth configuration is validated here, so a missing client id or
    endpoint fails at startup instead of on the first login.

    Args:
        config: Auth configuration; read from settings when omitted
        manager: Pre-built manager (takes precedence over config)

    Raises:
        ConfigurationError: If the auth configuration is incomplete
    """
    if manager is None:
        manager = CustomerAuthManager(config or CustomerAuthConfig.from_settings())

    app = FastAPI(title="Storefront Customer Auth", version="1.0.0")
    app.state.auth_manager = manager

    # Add middleware
    app.middleware("http")(log_requests_middleware)

    # Register routers
    app.include_router(health_router)
    app.include_router(auth_router)

    logger.debug("FastAPI application initialized with all routers and middleware")
    return app
