"""Assistant assembly — settings, logging, resolution and wiring.

Builds a ready-to-use AssistantOrchestrator for the dashboard host:
- Configures logging from settings (DEBUG when debug mode is on)
- Resolves tier, model and credential via ConfigResolver
- Creates the model client only when a usable credential was found
- Sizes the rate limiter and cache from settings

Usage:
    from assistant.app import create_assistant
    assistant = create_assistant()
    result = await assistant.submit("How do I find PDFs?", snapshot, user)

Tier 3 orchestration module: imports from config, resolver, ai/*.
"""

from __future__ import annotations

import logging

from assistant.ai.orchestrator import AssistantOrchestrator
from assistant.ai.providers.base import ModelClient
from assistant.cache import ResponseCache
from assistant.config import Settings, get_settings
from assistant.models import DeploymentTier, ModelConfig
from assistant.ratelimit import RateLimiter
from assistant.resolver import ConfigResolver, EnvironmentSignals

logger = logging.getLogger("assistant")


def create_client(model_config: ModelConfig, settings: Settings) -> ModelClient:
    """Routes settings to the correct concrete client instance.

    The mock backend still needs a resolved credential (any key with the
    right prefix) so that "no credential, no model call" holds everywhere.

    Args:
        model_config: The resolved config (must carry a credential for the
            anthropic backend).
        settings: Application settings (backend choice, timeout).

    Returns:
        A concrete ModelClient (AnthropicClient or MockClient).

    Raises:
        ValueError: If the backend name is not recognized, or the anthropic
            backend is requested without a credential.
    """
    # Local imports to avoid pulling SDK dependencies at module load time.
    if settings.model_backend == "mock":
        from assistant.ai.providers.mock import MockClient

        return MockClient()

    if settings.model_backend == "anthropic":
        if not model_config.has_credential:
            raise ValueError("Anthropic client requires a credential")
        from assistant.ai.providers.anthropic import AnthropicClient

        return AnthropicClient(
            api_key=model_config.credential,
            base_url=model_config.api_url,
            timeout=settings.request_timeout,
        )

    raise ValueError(
        f"Unknown model backend: {settings.model_backend!r}. "
        f"Expected 'anthropic' or 'mock'."
    )


def _apply_debug_mode(settings: Settings, tier: DeploymentTier) -> None:
    """DEBUG for the assistant loggers when enabled, or by default on the local tier."""
    debug = settings.debug_mode
    if debug is None:
        debug = tier is DeploymentTier.LOCAL
    if debug:
        logger.setLevel(logging.DEBUG)


def create_assistant(
    settings: Settings | None = None,
    signals: EnvironmentSignals | None = None,
    resolver: ConfigResolver | None = None,
) -> AssistantOrchestrator:
    """Creates a fully wired AssistantOrchestrator.

    Never fails for a missing or malformed credential: the orchestrator is
    returned with the model path disabled and answers from the fallback
    responder.

    Args:
        settings: Application settings. Defaults to get_settings().
        signals: Environment signals. Defaults to the settings' host name
            with no injected credential.
        resolver: Resolver to use (e.g. one with custom credential providers).

    Returns:
        The orchestrator for this session.

    Raises:
        ConfigurationError: Only with STRICT_CREDENTIALS and a malformed key.
    """
    settings = settings or get_settings()
    signals = signals or EnvironmentSignals.from_settings(settings)
    resolver = resolver or ConfigResolver(settings)

    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
    model_config = resolver.resolve(signals)
    _apply_debug_mode(settings, model_config.tier)

    client: ModelClient | None = None
    if model_config.has_credential:
        client = create_client(model_config, settings)
        logger.info("Model client ready: backend=%s", settings.model_backend)
    else:
        logger.warning("No usable credential found - using fallback mode")

    return AssistantOrchestrator(
        model_config,
        client=client,
        rate_limiter=RateLimiter.from_settings(settings),
        cache=ResponseCache(settings.cache_capacity),
        fallback_enabled=settings.fallback_enabled,
    )
