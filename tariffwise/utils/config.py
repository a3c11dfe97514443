"""Load and validate environment variables. Uses python-dotenv.

Callers should use the accessor functions below rather than reading `os.environ`
directly, so the `.env` file is always honoured.
"""

from pathlib import Path

from dotenv import load_dotenv
import os

DEFAULT_API_BASE_URL = "http://localhost:8080/api"


def _project_root() -> Path:
    """Resolve project root (the directory holding app.py)."""
    return Path(__file__).resolve().parent.parent.parent


def load_config() -> None:
    """
    Load .env from project root. Idempotent; safe to call multiple times.
    Uses override=True so .env values take precedence over existing env vars.
    """
    env_path = _project_root() / ".env"
    load_dotenv(env_path, override=True)


def get_required(key: str) -> str:
    """
    Get required env var. Raises if missing or empty.

    Raises:
        ValueError: If key is missing or empty after trimming.
    """
    load_config()
    val = os.getenv(key, "").strip()
    if not val:
        raise ValueError(
            f"Missing required environment variable: {key}. "
            "Set it in .env or export it."
        )
    return val


def get_optional(key: str, default: str = "") -> str:
    """Get optional env var; return default if missing or empty."""
    load_config()
    val = os.getenv(key, "").strip()
    return val if val else default


def get_optional_int(key: str, default: int) -> int:
    """Get optional env var as int; return default if missing or invalid."""
    raw = get_optional(key)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_optional_float(key: str, default: float) -> float:
    raw = get_optional(key)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# --- Public config accessors ---

def api_base_url() -> str:
    """Optional: tariff backend base URL. Default http://localhost:8080/api."""
    return get_optional("API_BASE_URL", DEFAULT_API_BASE_URL)


def supabase_url() -> str:
    """Required: Supabase project URL used for sign-in and sessions."""
    return get_required("SUPABASE_URL")


def supabase_anon_key() -> str:
    """Required: Supabase anon (public) key."""
    return get_required("SUPABASE_ANON_KEY")


def request_timeout() -> float:
    """Optional: HTTP timeout in seconds for backend calls. Default 30."""
    return get_optional_float("REQUEST_TIMEOUT_SECONDS", 30.0)


def log_level() -> str:
    return get_optional("LOG_LEVEL", "INFO").upper()


def log_file() -> Path | None:
    """Optional: path of a log file. Relative paths resolve from the project root."""
    val = get_optional("LOG_FILE", "")
    if not val:
        return None
    path = Path(val)
    return path if path.is_absolute() else _project_root() / path


def app_title() -> str:
    return get_optional("APP_TITLE", "TariffWise")


def project_root() -> Path:
    """Project root directory."""
    return _project_root()


def get_api_url(endpoint: str, base_url: str | None = None) -> str:
    """
    Build a full backend URL for an endpoint.

    The endpoint may start with "/"; the base URL is forced to end in "/api".

    >>> get_api_url("/countries", "http://localhost:8080")
    'http://localhost:8080/api/countries'
    """
    clean_endpoint = endpoint[1:] if endpoint.startswith("/") else endpoint
    base = (base_url or api_base_url()).rstrip("/")
    if not base.endswith("/api"):
        base = f"{base}/api"
    return f"{base}/{clean_endpoint}"
