"""Supabase-backed authentication."""

from tariffwise.infrastructure.auth.supabase_auth import AuthError, AuthService

__all__ = ["AuthError", "AuthService"]
