"""
Auth module.

Sign-up, sign-in and the per-request session provider.
"""

from ideahub.auth.session import (
    AuthError,
    AuthSession,
    SupabaseAuth,
    SessionProvider,
    MIN_PASSWORD_LENGTH,
)

__all__ = [
    "AuthError",
    "AuthSession",
    "SupabaseAuth",
    "SessionProvider",
    "MIN_PASSWORD_LENGTH",
]
