"""
Storefront Customer Auth - FastAPI service for customer login.

This package exposes the customer login, callback, logout, session and
refresh routes backed by the customer_auth package.
"""
from .app import create_app
from .server import StorefrontServer

__version__ = "1.0.0"

__all__ = [
    'StorefrontServer',
    'create_app',
]
