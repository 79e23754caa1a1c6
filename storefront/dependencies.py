"""
FastAPI dependencies shared by the endpoint routers.
"""
from fastapi import Request

from customer_auth import CustomerAuthManager


def get_auth_manager(request: Request) -> CustomerAuthManager:
    """The auth manager created for this application instance"""
    return request.app.state.auth_manager
