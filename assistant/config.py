"""App configuration — environment variable loading with typed defaults.

Loads settings from .env file (via python-dotenv) and os.environ.
Real environment variables take precedence over .env file values.

Model name env vars (e.g. HOSTED_MODEL=CLAUDE_SONNET) are resolved to
actual API model IDs at load time via MODEL_MAP from assistant.models.

Credentials are NOT part of Settings — they are looked up by the
configuration resolver through its ordered credential providers.

Usage:
    from assistant.config import get_settings
    settings = get_settings()
    print(settings.hosted_model)  # "claude-sonnet-4-6"
"""

from __future__ import annotations

import os
import socket
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from assistant.models import ANTHROPIC_API_URL, MODEL_MAP

# Only load .env from the project root — don't traverse parent directories.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
_DOTENV_PATH = PROJECT_ROOT / ".env"

_VALID_BACKENDS = ("anthropic", "mock")
_VALID_TIERS = ("", "local", "hosted")
_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class Settings:
    """Typed configuration for the dashboard assistant.

    All fields have sensible defaults for local development.
    Model fields store resolved API model IDs (not family names).
    ``debug_mode`` is None when unset, meaning "on for the local tier".
    """

    # App
    log_level: str
    debug_mode: bool | None

    # Environment / tier detection
    hostname: str
    tier_override: str
    local_hosts: list[str]
    hosted_host_patterns: list[str]

    # Model
    model_backend: str
    local_model: str
    hosted_model: str
    api_url: str
    request_timeout: float

    # Feature flags
    model_enabled: bool
    fallback_enabled: bool
    strict_credentials: bool

    # Limits
    requests_per_minute: int
    requests_per_hour: int
    cache_capacity: int


def _resolve_model(env_var: str, value: str) -> str:
    """Resolves a family-name string to an actual model ID via MODEL_MAP.

    Args:
        env_var: Name of the environment variable (for error messages).
        value: The family-name value from the environment (e.g. "CLAUDE_HAIKU").

    Returns:
        The resolved model ID string.

    Raises:
        ValueError: If the value doesn't match any key in MODEL_MAP.
    """
    if value in MODEL_MAP:
        return MODEL_MAP[value]
    valid = ", ".join(sorted(MODEL_MAP.keys()))
    raise ValueError(
        f"Invalid value for {env_var}: {value!r}. "
        f"Valid options: {valid}"
    )


def _split_csv(value: str) -> list[str]:
    """Splits a comma-separated string into a list of stripped, non-empty values."""
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_bool(env_var: str, value: str) -> bool:
    """Parses a boolean flag. Accepts 1/0, true/false, yes/no, on/off."""
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean for {env_var}: {value!r}")


def _parse_choice(env_var: str, value: str, choices: tuple[str, ...]) -> str:
    lowered = value.strip().lower()
    if lowered in choices:
        return lowered
    valid = ", ".join(repr(c) for c in choices)
    raise ValueError(f"Invalid value for {env_var}: {value!r}. Valid options: {valid}")


def _positive_int(env_var: str, value: str) -> int:
    parsed = int(value)
    if parsed < 1:
        raise ValueError(f"{env_var} must be at least 1, got {parsed}")
    return parsed


def _load_settings() -> Settings:
    """Loads configuration from .env file and environment variables.

    Returns:
        A fully resolved Settings instance.
    """
    load_dotenv(_DOTENV_PATH)

    debug_raw = os.environ.get("DEBUG_MODE", "")

    return Settings(
        # App
        log_level=os.environ.get("LOG_LEVEL", "info"),
        debug_mode=_parse_bool("DEBUG_MODE", debug_raw) if debug_raw.strip() else None,
        # Environment / tier detection
        hostname=os.environ.get("ASSISTANT_HOSTNAME", "") or socket.gethostname(),
        tier_override=_parse_choice(
            "ASSISTANT_TIER", os.environ.get("ASSISTANT_TIER", ""), _VALID_TIERS,
        ),
        local_hosts=_split_csv(os.environ.get("LOCAL_HOSTS", "localhost,127.0.0.1")),
        hosted_host_patterns=_split_csv(
            os.environ.get("HOSTED_HOST_PATTERNS", "github.io,githubusercontent.com")
        ),
        # Model
        model_backend=_parse_choice(
            "MODEL_BACKEND", os.environ.get("MODEL_BACKEND", "anthropic"), _VALID_BACKENDS,
        ),
        local_model=_resolve_model(
            "LOCAL_MODEL", os.environ.get("LOCAL_MODEL", "CLAUDE_HAIKU"),
        ),
        hosted_model=_resolve_model(
            "HOSTED_MODEL", os.environ.get("HOSTED_MODEL", "CLAUDE_SONNET"),
        ),
        api_url=os.environ.get("API_URL", ANTHROPIC_API_URL),
        request_timeout=float(os.environ.get("REQUEST_TIMEOUT", "30.0")),
        # Feature flags
        model_enabled=_parse_bool("MODEL_ENABLED", os.environ.get("MODEL_ENABLED", "true")),
        fallback_enabled=_parse_bool(
            "FALLBACK_ENABLED", os.environ.get("FALLBACK_ENABLED", "true"),
        ),
        strict_credentials=_parse_bool(
            "STRICT_CREDENTIALS", os.environ.get("STRICT_CREDENTIALS", "false"),
        ),
        # Limits
        requests_per_minute=_positive_int(
            "REQUESTS_PER_MINUTE", os.environ.get("REQUESTS_PER_MINUTE", "20"),
        ),
        requests_per_hour=_positive_int(
            "REQUESTS_PER_HOUR", os.environ.get("REQUESTS_PER_HOUR", "100"),
        ),
        cache_capacity=_positive_int(
            "CACHE_CAPACITY", os.environ.get("CACHE_CAPACITY", "50"),
        ),
    )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Returns the singleton Settings instance. Loads .env on first call."""
    global _settings
    if _settings is None:
        _settings = _load_settings()
    return _settings
