"""Configuration loading utilities."""

import json
import os
import secrets
from pathlib import Path

DEFAULT_MODELS = [
    "claude-sonnet-4-20250514",
    "claude-3-7-sonnet-20250219",
    "claude-3-5-haiku-20241022",
]

JWT_SECRET_FILE = Path(__file__).parent / "data" / ".jwt-secret"


def load_config(config_path: str | None = None) -> dict:
    """Load configuration from config.json."""
    if config_path is None:
        config_path = Path(__file__).parent / "config.json"
    else:
        config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        config = json.load(f)

    return config


def get_anthropic_api_key() -> str:
    """Get Anthropic API key from environment."""
    key = os.environ.get("ANTHROPIC_API_KEY")
    if not key:
        raise ValueError(
            "ANTHROPIC_API_KEY environment variable not set. "
            "Set it with: export ANTHROPIC_API_KEY=your-key"
        )
    return key


def get_jwt_secret() -> str:
    """Get the session token signing secret.

    Uses JWT_SECRET from the environment when set; otherwise generates a
    secret on first use and keeps it in data/.jwt-secret.
    """
    key = os.environ.get("JWT_SECRET")
    if key:
        return key

    if JWT_SECRET_FILE.exists():
        return JWT_SECRET_FILE.read_text().strip()

    JWT_SECRET_FILE.parent.mkdir(parents=True, exist_ok=True)
    key = secrets.token_urlsafe(48)
    JWT_SECRET_FILE.write_text(key)
    return key


def get_model_candidates(config: dict) -> list[str]:
    """Get the ordered list of models tried for ATS scoring."""
    models = config.get("ats", {}).get("models")
    return list(models) if models else list(DEFAULT_MODELS)


def get_ats_max_tokens(config: dict) -> int:
    return int(config.get("ats", {}).get("max_tokens", 2048))


def get_min_resume_text_chars(config: dict) -> int:
    """Minimum amount of extracted text for an uploaded resume to be scored."""
    return int(config.get("ats", {}).get("min_resume_text_chars", 50))


def get_max_upload_bytes(config: dict) -> int:
    """Upload size cap for resume PDFs (defaults to 5 MB)."""
    return int(config.get("ats", {}).get("max_upload_bytes", 5 * 1024 * 1024))


def get_token_expiry_days(config: dict) -> int:
    return int(config.get("auth", {}).get("token_expiry_days", 7))


def get_identity_provider(config: dict) -> dict:
    """Get identity provider settings (name and userinfo URL)."""
    provider = config.get("auth", {}).get("identity_provider", {})
    return {
        "name": provider.get("name", "external"),
        "userinfo_url": provider.get("userinfo_url", ""),
    }


def get_cors_origins(config: dict) -> list[str]:
    return config.get("app", {}).get("cors_origins", [])


def get_emphasis_keywords(config: dict) -> tuple[list[str] | None, list[str]]:
    """Get keyword emphasis overrides.

    Returns:
        Tuple of (replacement keyword list or None for the built-in table,
        extra keywords appended to whichever table is used).
    """
    emphasis = config.get("emphasis", {})
    return emphasis.get("keywords"), emphasis.get("extra_keywords", [])


def get_users_file(config: dict) -> str:
    return config.get("storage", {}).get("users_file", "users.json")
