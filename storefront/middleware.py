"""
Request logging for the auth routes.
"""
import logging
import time
from typing import List

from fastapi import Request

from utils.redaction import redact_headers

logger = logging.getLogger(__name__)

AUTH_PATH_PREFIX = "/api/auth/"


def cookie_changes(set_cookie_headers: List[str]) -> List[str]:
    """Summarize Set-Cookie headers as ``name`` or ``-name`` (cleared), never values"""
    changes = []
    for header in set_cookie_headers:
        name, _, rest = header.partition("=")
        cleared = "max-age=0" in rest.lower().replace(" ", "")
        changes.append(f"-{name}" if cleared else name)
    return changes


async def log_requests_middleware(request: Request, call_next):
    """Log each auth request with its outcome and the cookies it touched"""
    start_time = time.perf_counter()
    response = await call_next(request)
    elapsed = time.perf_counter() - start_time

    if not request.url.path.startswith(AUTH_PATH_PREFIX):
        return response

    route = request.url.path[len(AUTH_PATH_PREFIX):]
    changes = cookie_changes(response.headers.getlist("set-cookie"))
    logger.info(
        f"auth/{route} -> {response.status_code} in {elapsed * 1000:.1f}ms"
        + (f" cookies=[{', '.join(changes)}]" if changes else "")
    )
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"auth/{route} request headers: {redact_headers(request.headers)}")

    return response
