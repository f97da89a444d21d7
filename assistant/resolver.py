"""Configuration resolver — deployment tier and credential resolution.

Turns environment signals (host name, an injected runtime credential) plus
Settings into the ModelConfig the orchestrator runs with. The tier is decided
once per resolver; a later resolve() call re-reads only the credential and
returns a new ModelConfig. An orchestrator keeps the config it was built
with, so a session that started without a key stays in fallback mode.

Credentials come from an ordered list of provider callables — the first one
returning a non-empty value wins:

    1. the injected runtime value (EnvironmentSignals.injected_credential)
    2. CLAUDE_API_KEY
    3. ANTHROPIC_API_KEY

A malformed credential (wrong prefix) disables the model path with a warning.
With ``strict_credentials`` enabled it raises ConfigurationError instead.
"""

from __future__ import annotations

import dataclasses
import logging
import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from assistant.config import Settings
from assistant.models import DeploymentTier, ModelConfig, resolve_tier

logger = logging.getLogger(__name__)

CREDENTIAL_PREFIX = "sk-ant-"
_PREVIEW_CHARS = 12

CredentialProvider = Callable[[], "str | None"]


class ConfigurationError(Exception):
    """Raised when the model configuration is unusable.

    Non-fatal for the assistant as a whole: the orchestrator routes to the
    fallback responder instead of surfacing it.
    """


@dataclass(frozen=True)
class EnvironmentSignals:
    """Environment-observable inputs to configuration resolution."""

    hostname: str
    injected_credential: str | None = None

    @classmethod
    def from_settings(
        cls, settings: Settings, injected_credential: str | None = None,
    ) -> EnvironmentSignals:
        return cls(hostname=settings.hostname, injected_credential=injected_credential)


def env_credential(var_name: str) -> CredentialProvider:
    """Returns a provider that reads a credential from an environment variable."""

    def _read() -> str | None:
        return os.environ.get(var_name) or None

    return _read


def default_credential_providers(signals: EnvironmentSignals) -> list[CredentialProvider]:
    """Injected value first, then process-level environment variables."""
    return [
        lambda: signals.injected_credential,
        env_credential("CLAUDE_API_KEY"),
        env_credential("ANTHROPIC_API_KEY"),
    ]


def detect_tier(hostname: str, settings: Settings) -> DeploymentTier:
    """Derives the deployment tier from the host name.

    An explicit ``tier_override`` wins. Otherwise hosted-pattern hosts are
    hosted, exact local names are local, and anything unknown is treated as
    hosted.
    """
    if settings.tier_override:
        return DeploymentTier(settings.tier_override)

    host = hostname.strip().lower()
    if any(pattern.lower() in host for pattern in settings.hosted_host_patterns):
        return DeploymentTier.HOSTED
    if host in (name.lower() for name in settings.local_hosts):
        return DeploymentTier.LOCAL
    return DeploymentTier.HOSTED


def is_valid_credential(value: str) -> bool:
    return value.startswith(CREDENTIAL_PREFIX)


def credential_preview(value: str | None) -> str:
    """Safe-to-log preview of a credential."""
    if not value:
        return "None"
    return f"{value[:_PREVIEW_CHARS]}..."


class ConfigResolver:
    """Resolves the ModelConfig for this process.

    Args:
        settings: Loaded application settings.
        credential_providers: Optional fixed provider list. When omitted, the
            default order is built from each call's EnvironmentSignals.
    """

    def __init__(
        self,
        settings: Settings,
        credential_providers: Sequence[CredentialProvider] | None = None,
    ) -> None:
        self._settings = settings
        self._credential_providers = (
            list(credential_providers) if credential_providers is not None else None
        )
        self._tier: DeploymentTier | None = None

    @property
    def tier(self) -> DeploymentTier | None:
        """The resolved tier, or None before the first resolve()."""
        return self._tier

    def resolve(self, signals: EnvironmentSignals) -> ModelConfig:
        """Resolves tier, model and credential into a ModelConfig.

        Args:
            signals: Host name and optional injected credential.

        Returns:
            The tier's ModelConfig with the credential attached (or None).

        Raises:
            ConfigurationError: Only with strict_credentials, when the found
                credential is malformed.
        """
        if self._tier is None:
            self._tier = detect_tier(signals.hostname, self._settings)
        tier = self._tier

        base = resolve_tier(tier)
        model_id = (
            self._settings.local_model
            if tier is DeploymentTier.LOCAL
            else self._settings.hosted_model
        )
        if self._settings.model_enabled:
            credential = self._find_credential(signals)
        else:
            logger.debug("Model path disabled by MODEL_ENABLED flag")
            credential = None

        config = dataclasses.replace(
            base,
            model_id=model_id,
            api_url=self._settings.api_url,
            credential=credential,
        )

        logger.info(
            "Assistant configuration resolved: tier=%s model=%s has_credential=%s key=%s",
            tier.value,
            config.model_id,
            config.has_credential,
            credential_preview(config.credential),
        )
        return config

    def _find_credential(self, signals: EnvironmentSignals) -> str | None:
        providers = (
            self._credential_providers
            if self._credential_providers is not None
            else default_credential_providers(signals)
        )

        value: str | None = None
        for provider in providers:
            candidate = provider()
            if candidate and candidate.strip():
                value = candidate.strip()
                break

        if value is None:
            return None

        if not is_valid_credential(value):
            if self._settings.strict_credentials:
                raise ConfigurationError(
                    f"Credential does not start with {CREDENTIAL_PREFIX!r}"
                )
            logger.warning(
                "Invalid credential format detected (key=%s); using fallback mode",
                credential_preview(value),
            )
            return None

        return value
