"""HTTP headers and constants package for the storefront auth service"""

from .constants import (
    USER_AGENT,
    FORM_CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    TOKEN_REQUEST_HEADERS,
    GRAPHQL_REQUEST_HEADERS,
)

__all__ = [
    "USER_AGENT",
    "FORM_CONTENT_TYPE",
    "JSON_CONTENT_TYPE",
    "TOKEN_REQUEST_HEADERS",
    "GRAPHQL_REQUEST_HEADERS",
]
