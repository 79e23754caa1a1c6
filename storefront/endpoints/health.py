"""
Liveness and configuration health endpoints.
"""
import time
from urllib.parse import urlsplit

from fastapi import APIRouter, Depends

from customer_auth import CustomerAuthManager
from ..dependencies import get_auth_manager

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(manager: CustomerAuthManager = Depends(get_auth_manager)):
    """Service health plus a secret-free summary of the identity provider setup"""
    config = manager.config
    return {
        "status": "healthy",
        "service": "storefront_auth",
        "provider": urlsplit(config.token_endpoint).netloc,
        "token_auth_method": config.token_endpoint_auth_method,
        "state_verification": config.verify_state,
        "timestamp": time.time(),
    }


@router.get("/healthz")
async def healthz_check():
    """Bare liveness probe for orchestrators"""
    return {"status": "ok", "timestamp": time.time()}
