"""
Supabase authentication for the dashboard.

The auth provider issues the access token that the tariff backend expects as a
bearer token. Roles come from the user's metadata or, failing that, from the
`user_profiles` table.
"""

from __future__ import annotations

from typing import Any

from supabase import Client, create_client

from tariffwise.utils.config import supabase_anon_key, supabase_url
from tariffwise.utils.logger import get_logger

logger = get_logger()

DEFAULT_ROLE = "user"
ADMIN_ROLE = "admin"
PROFILES_TABLE = "user_profiles"


class AuthError(RuntimeError):
    """Raised when the auth provider rejects a request or cannot be reached."""


def get_client() -> Client:
    return create_client(supabase_url(), supabase_anon_key())


def _field(obj: Any, name: str, default: Any = None) -> Any:
    """Read a field from a supabase model object or a plain dict."""
    if obj is None:
        return default
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def metadata_role(user: Any) -> str | None:
    role = (_field(user, "app_metadata") or {}).get("role") or (_field(user, "user_metadata") or {}).get("role")
    return str(role).lower() if role else None


def display_name(user: Any) -> str:
    """Full name from metadata, else the local part of the email, else "User"."""
    full_name = (_field(user, "user_metadata") or {}).get("full_name")
    if full_name:
        return str(full_name)
    email = _field(user, "email") or ""
    local_part = email.split("@")[0] if email else ""
    return local_part or "User"


def is_admin(user: dict[str, Any] | None) -> bool:
    return bool(user) and user.get("role") == ADMIN_ROLE


class AuthService:
    """Thin wrapper over `supabase.auth` that returns plain user dicts for the UI."""

    def __init__(self, client: Client | None = None) -> None:
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_client()
        return self._client

    def sign_in(self, email: str, password: str) -> dict[str, Any]:
        if not email or not password:
            raise AuthError("Please enter your email and password")
        try:
            response = self.client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            logger.warning("Sign-in failed for %s: %s", email, e)
            raise AuthError(f"Login failed: {e}") from e
        user = _field(response, "user")
        if user is None:
            raise AuthError("Login failed: no user returned")
        logger.info("User signed in: %s", email)
        return self.build_user(user)

    def sign_up(self, email: str, password: str, full_name: str = "") -> dict[str, Any] | None:
        """
        Register a new account.

        Returns the signed-in user, or None when the project requires email
        confirmation and no session was issued yet.
        """
        if not email or not password:
            raise AuthError("Please enter your email and password")
        credentials: dict[str, Any] = {"email": email, "password": password}
        if full_name:
            credentials["options"] = {"data": {"full_name": full_name}}
        try:
            response = self.client.auth.sign_up(credentials)
        except Exception as e:
            logger.warning("Sign-up failed for %s: %s", email, e)
            raise AuthError(f"Sign up failed: {e}") from e
        user = _field(response, "user")
        if user is None:
            raise AuthError("Sign up failed: no user returned")
        if _field(response, "session") is None:
            logger.info("User signed up, awaiting email confirmation: %s", email)
            return None
        logger.info("User signed up: %s", email)
        return self.build_user(user)

    def sign_out(self) -> None:
        try:
            self.client.auth.sign_out()
        except Exception as e:
            # Local state is cleared by the caller either way.
            logger.warning("Sign-out failed: %s", e)

    def session(self) -> Any:
        try:
            return self.client.auth.get_session()
        except Exception as e:
            logger.warning("Could not read auth session: %s", e)
            return None

    def access_token(self) -> str:
        """Bearer token for the backend, or "" without a session."""
        return _field(self.session(), "access_token") or ""

    def current_user(self) -> dict[str, Any] | None:
        user = _field(self.session(), "user")
        return self.build_user(user) if user is not None else None

    def fetch_profile_role(self, user_id: str) -> str | None:
        try:
            result = (
                self.client
                .table(PROFILES_TABLE)
                .select("role")
                .eq("user_id", user_id)
                .single()
                .execute()
            )
        except Exception as e:
            logger.warning("Could not load profile role for %s: %s", user_id, e)
            return None
        data = _field(result, "data") or {}
        return data.get("role") if isinstance(data, dict) else None

    def resolve_role(self, user: Any) -> str:
        role = metadata_role(user)
        if role:
            return role
        profile_role = self.fetch_profile_role(_field(user, "id"))
        return (profile_role or DEFAULT_ROLE).lower()

    def build_user(self, user: Any) -> dict[str, Any]:
        return {
            "id": _field(user, "id"),
            "email": _field(user, "email") or "",
            "role": self.resolve_role(user),
            "name": display_name(user),
        }
