"""
Customer authentication endpoints: login, callback, logout, me, refresh.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse

from customer_auth import (
    AuthEvent,
    CustomerAuthManager,
    InvalidTokenResponseError,
    SessionStatus,
    StateMismatchError,
    TokenExchangeError,
)
from customer_auth.models import LOGIN, LOGIN_FAILED, LOGOUT, REFRESH
from utils.redaction import mask_secret
from ..dependencies import get_auth_manager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

# Coarse error codes exposed to the browser; provider details stay in the logs
ERROR_NO_CODE = "no_code"
ERROR_INVALID_STATE = "invalid_state"
ERROR_INVALID_TOKENS = "invalid_tokens"
ERROR_AUTH_FAILED = "auth_failed"


def _error_redirect(manager: CustomerAuthManager, reason: str) -> RedirectResponse:
    return RedirectResponse(url=f"{manager.app_url}?error={reason}", status_code=302)


@router.get("/login")
async def login(request: Request, manager: CustomerAuthManager = Depends(get_auth_manager)):
    """Redirect the browser to the identity provider's authorize endpoint"""
    store = manager.credential_store(request.cookies)
    try:
        authorization = manager.start_login(store)
    except Exception:
        logger.exception("Auth initiation error")
        return JSONResponse({"error": "Authentication failed"}, status_code=500)

    logger.info(f"Login initiated (state {mask_secret(authorization.state, 8)})")
    return store.apply(RedirectResponse(url=authorization.url, status_code=302))


@router.get("/callback")
async def callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    error_description: Optional[str] = None,
    manager: CustomerAuthManager = Depends(get_auth_manager),
):
    """Exchange the authorization code and set the token cookies

    Every failure redirects back to the app with a coarse ``error`` code.
    """
    if error:
        logger.warning(f"Identity provider returned error '{error}': {error_description or ''}")

    if not code:
        manager.events.emit(AuthEvent(LOGIN_FAILED, {"reason": ERROR_NO_CODE}))
        return _error_redirect(manager, ERROR_NO_CODE)

    store = manager.credential_store(request.cookies)

    try:
        manager.check_state(store, state)
    except StateMismatchError as e:
        logger.warning(f"Rejecting callback: {e}")
        manager.events.emit(AuthEvent(LOGIN_FAILED, {"reason": ERROR_INVALID_STATE}))
        return _error_redirect(manager, ERROR_INVALID_STATE)

    try:
        await manager.complete_login(store, code)
    except InvalidTokenResponseError as e:
        logger.error(f"Missing required tokens: {e} {e.body}")
        manager.events.emit(AuthEvent(LOGIN_FAILED, {"reason": ERROR_INVALID_TOKENS}))
        return _error_redirect(manager, ERROR_INVALID_TOKENS)
    except TokenExchangeError as e:
        logger.error(f"Auth callback error: status={e.status} error={e.error} body={e.body}")
        manager.events.emit(AuthEvent(LOGIN_FAILED, {"reason": ERROR_AUTH_FAILED, "status": e.status}))
        return _error_redirect(manager, ERROR_AUTH_FAILED)

    redirect_url = f"{manager.app_url}/account"
    logger.info(f"Customer tokens stored, redirecting to {redirect_url}")
    manager.events.emit(AuthEvent(LOGIN))
    return store.apply(RedirectResponse(url=redirect_url, status_code=302))


@router.get("/logout")
async def logout(request: Request, manager: CustomerAuthManager = Depends(get_auth_manager)):
    """Clear the token cookies and redirect to the provider logout"""
    store = manager.credential_store(request.cookies)
    try:
        target = manager.logout(store)
    except Exception:
        logger.exception("Logout error")
        store.clear_all()
        return store.apply(JSONResponse({"error": "Logout failed"}, status_code=500))

    manager.events.emit(AuthEvent(LOGOUT, {"provider_logout": target != manager.app_url}))
    logger.info(f"Redirecting to logout URL: {target.split('?')[0]}")
    return store.apply(RedirectResponse(url=target, status_code=302))


@router.get("/me", response_model=SessionStatus)
async def me(request: Request, manager: CustomerAuthManager = Depends(get_auth_manager)):
    """Report the current session; failures read as unauthenticated"""
    store = manager.credential_store(request.cookies)
    return await manager.resolve_session(store)


@router.get("/refresh")
async def refresh(request: Request, manager: CustomerAuthManager = Depends(get_auth_manager)):
    """Renew the token set with the stored refresh token"""
    store = manager.credential_store(request.cookies)
    try:
        await manager.refresh(store)
    except TokenExchangeError as e:
        logger.warning(f"Token refresh failed (status={e.status} error={e.error}), clearing session")
        store.clear_all()
        return store.apply(JSONResponse({"refreshed": False}, status_code=401))

    manager.events.emit(AuthEvent(REFRESH))
    return store.apply(JSONResponse({"refreshed": True}))
