"""CLI package for Storefront Customer Auth

This package provides the command-line interface for validating the
identity provider configuration and running the auth service.
"""

from cli.main import main

__all__ = [
    "main",
]
