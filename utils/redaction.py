"""Helpers for keeping secrets out of log output"""

from typing import Dict, Mapping, Optional

SENSITIVE_HEADERS = ('authorization', 'cookie', 'set-cookie')


def mask_secret(value: Optional[str], visible: int = 6) -> str:
    """Show only the first few characters of a secret

    Args:
        value: Token, code or other secret
        visible: Number of leading characters to keep

    Returns:
        Masked string safe for logs
    """
    if not value:
        return "<empty>"
    if len(value) <= visible:
        return "***"
    return f"{value[:visible]}..."


def redact_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    """Copy of headers with credentials replaced by [REDACTED]"""
    return {
        name: "[REDACTED]" if name.lower() in SENSITIVE_HEADERS else value
        for name, value in headers.items()
    }
