"""Authentication module."""

from calmirror.auth.google import (
    CredentialsError,
    authorize,
    get_valid_credentials,
)

__all__ = [
    "CredentialsError",
    "authorize",
    "get_valid_credentials",
]
