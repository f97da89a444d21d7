"""Shared test fixtures for the assistant test suite.

Factory-pattern fixtures that return callables accepting **overrides.

Fixtures:
    mock_client: Factory for MockClient instances
    make_settings: Factory for Settings with test defaults
    make_config: Factory for ModelConfig (credential attached by default)
    make_snapshot: Factory for CatalogSnapshot instances
    clean_env: Removes credential/config env vars for the test
"""

import dataclasses

import pytest

from assistant.ai.providers.mock import MockClient
from assistant.config import Settings
from assistant.models import CLAUDE_HAIKU, CLAUDE_SONNET, DeploymentTier, resolve_tier
from assistant.schemas import CatalogSnapshot

VALID_KEY = "sk-ant-REDACTED"

_ENV_VARS = [
    "CLAUDE_API_KEY", "ANTHROPIC_API_KEY",
    "LOG_LEVEL", "DEBUG_MODE", "ASSISTANT_HOSTNAME", "ASSISTANT_TIER",
    "LOCAL_HOSTS", "HOSTED_HOST_PATTERNS", "MODEL_BACKEND", "LOCAL_MODEL",
    "HOSTED_MODEL", "API_URL", "REQUEST_TIMEOUT", "MODEL_ENABLED",
    "FALLBACK_ENABLED", "STRICT_CREDENTIALS", "REQUESTS_PER_MINUTE",
    "REQUESTS_PER_HOUR", "CACHE_CAPACITY",
]


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Removes all assistant-related env vars so defaults are tested cleanly."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)


# ---------------------------------------------------------------------------
# MockClient factory
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_client():
    """Returns a factory function for creating MockClient instances."""

    def _make(**kwargs) -> MockClient:
        return MockClient(**kwargs)

    return _make


# ---------------------------------------------------------------------------
# Settings factory
# ---------------------------------------------------------------------------


@pytest.fixture
def make_settings():
    """Returns a factory for Settings with deterministic test defaults."""

    def _make(**overrides) -> Settings:
        defaults = {
            "log_level": "info",
            "debug_mode": False,
            "hostname": "localhost",
            "tier_override": "",
            "local_hosts": ["localhost", "127.0.0.1"],
            "hosted_host_patterns": ["github.io", "githubusercontent.com"],
            "model_backend": "anthropic",
            "local_model": CLAUDE_HAIKU,
            "hosted_model": CLAUDE_SONNET,
            "api_url": "https://api.anthropic.com",
            "request_timeout": 30.0,
            "model_enabled": True,
            "fallback_enabled": True,
            "strict_credentials": False,
            "requests_per_minute": 20,
            "requests_per_hour": 100,
            "cache_capacity": 50,
        }
        defaults.update(overrides)
        return Settings(**defaults)

    return _make


# ---------------------------------------------------------------------------
# ModelConfig factory
# ---------------------------------------------------------------------------


@pytest.fixture
def make_config():
    """Returns a factory for ModelConfig. Attaches VALID_KEY unless overridden."""

    def _make(tier: DeploymentTier = DeploymentTier.LOCAL, **overrides):
        overrides.setdefault("credential", VALID_KEY)
        return dataclasses.replace(resolve_tier(tier), **overrides)

    return _make


# ---------------------------------------------------------------------------
# CatalogSnapshot factory
# ---------------------------------------------------------------------------


def _default_resources() -> list[dict]:
    return [
        {
            "tags": ["budgeting", "data"],
            "fileType": "PDF",
            "programsUsed": ["Excel"],
            "authors": ["Ada Lovelace"],
        },
        {
            "tags": ["data", "procurement"],
            "fileType": "Video",
            "programsUsed": ["Tableau", "Excel"],
            "authors": ["Grace Hopper"],
        },
    ]


@pytest.fixture
def make_snapshot():
    """Returns a factory for CatalogSnapshot built from dashboard-shaped dicts."""

    def _make(**overrides) -> CatalogSnapshot:
        data = {
            "resources": _default_resources(),
            "programs": [{"name": "Data Academy"}, {"name": "Leadership"}],
        }
        data.update(overrides)
        return CatalogSnapshot.model_validate(data)

    return _make
