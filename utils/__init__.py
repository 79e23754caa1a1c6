"""Shared utilities package for the storefront auth service"""

from .redaction import mask_secret, redact_headers

__all__ = [
    "mask_secret",
    "redact_headers",
]
