"""Assistant orchestrator — one user message in, one AssistantResult out.

Sequences the pipeline for every chat message:

    IDLE -> SANITIZING -> CACHE_CHECK -> RATE_CHECK -> INVOKING -> DONE

with ERRORED reachable from any step. Text that is empty after sanitizing
is answered by the fallback responder right away. A cache hit finishes at
CACHE_CHECK without touching the rate limiter. The credential check runs
between CACHE_CHECK and RATE_CHECK, ahead of INVOKING, so a session without
a usable model path goes to the fallback responder without spending rate
budget. Rate denial and every ClientError also end in the fallback
responder; anything unexpected ends in a generic apology.

This is the single catch boundary: submit() never raises.

Consumed by:
- The chat UI host — ``await orchestrator.submit(text, snapshot, user)``

Tier 3 orchestration module: wires sanitizer, cache, rate limiter, context
builder, model client and fallback responder.
"""

from __future__ import annotations

import logging
import time
from enum import Enum

from assistant.ai.context import ContextBuilder
from assistant.ai.fallback import FallbackResponder
from assistant.ai.providers.base import ClientError, ModelClient
from assistant.ai.sanitizer import sanitize
from assistant.ai.usage import log_model_call
from assistant.cache import ResponseCache, cache_key
from assistant.models import ModelConfig
from assistant.ratelimit import MINUTE_MS, RateLimiter, RateLimitError, RateWindow
from assistant.resolver import ConfigurationError
from assistant.schemas import AssistantResult, CatalogSnapshot, CurrentUser, ResultSource

logger = logging.getLogger(__name__)

RATE_LIMIT_NOTICE = (
    "I'm receiving a lot of questions right now, so please try again shortly. "
    "In the meantime, here is what I can tell you:"
)
UNAVAILABLE_MESSAGE = (
    "The assistant is unavailable right now. Please try again later."
)
ERROR_MESSAGE = (
    "Sorry, something went wrong while answering. Please try again."
)

_DEFAULT_REQUESTS_PER_MINUTE = 20
_DEFAULT_CACHE_CAPACITY = 50


class State(str, Enum):
    IDLE = "idle"
    SANITIZING = "sanitizing"
    CACHE_CHECK = "cache_check"
    RATE_CHECK = "rate_check"
    INVOKING = "invoking"
    DONE = "done"
    ERRORED = "errored"


class AssistantOrchestrator:
    """Turns a raw chat message plus catalog state into an AssistantResult.

    All collaborators are injected; configuration is an explicit value, so
    several orchestrators with different tiers can coexist (e.g. in tests).
    Cache and rate limiter are per instance.

    Args:
        model_config: Resolved config. Without a credential the model path
            is never attempted.
        client: Upstream client. None disables the model path.
        rate_limiter: Gate for upstream calls. Defaults to 20/minute.
        cache: Answer cache. Defaults to 50 entries.
        context_builder: Builds the system instruction.
        fallback: Deterministic responder.
        fallback_enabled: When False, fallback outcomes become source=error.
    """

    def __init__(
        self,
        model_config: ModelConfig,
        *,
        client: ModelClient | None = None,
        rate_limiter: RateLimiter | None = None,
        cache: ResponseCache | None = None,
        context_builder: ContextBuilder | None = None,
        fallback: FallbackResponder | None = None,
        fallback_enabled: bool = True,
    ) -> None:
        self._config = model_config
        self._client = client
        self._rate_limiter = rate_limiter or RateLimiter(
            [RateWindow(limit=_DEFAULT_REQUESTS_PER_MINUTE, window_ms=MINUTE_MS)]
        )
        self._cache = cache if cache is not None else ResponseCache(_DEFAULT_CACHE_CAPACITY)
        self._context_builder = context_builder or ContextBuilder()
        self._fallback = fallback or FallbackResponder()
        self._fallback_enabled = fallback_enabled

    @property
    def model_config(self) -> ModelConfig:
        return self._config

    @property
    def model_available(self) -> bool:
        """Whether an upstream call may be attempted at all."""
        return self._client is not None and self._config.has_credential

    # -------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------

    async def submit(
        self,
        raw_text: str,
        snapshot: CatalogSnapshot | None = None,
        user: CurrentUser | None = None,
    ) -> AssistantResult:
        """Answers one chat message.

        Args:
            raw_text: The message exactly as typed.
            snapshot: Current catalog view for the prompt context.
            user: The signed-in user, if any.

        Returns:
            Exactly one AssistantResult with a non-empty message.
        """
        state = State.IDLE
        try:
            state = self._enter(State.SANITIZING)
            clean_text = sanitize(raw_text)
            if not clean_text:
                return self._done(self._fallback_result(clean_text, "empty_input"))
            key = cache_key(clean_text)

            state = self._enter(State.CACHE_CHECK)
            cached = self._cache.get(key)
            if cached is not None:
                logger.debug("Cache hit for question (%d chars)", len(clean_text))
                return self._done(
                    AssistantResult(message=cached, source=ResultSource.MODEL, cached=True)
                )

            try:
                self._require_model_path()
            except ConfigurationError as exc:
                logger.debug("Model path unavailable: %s", exc)
                return self._done(self._fallback_result(clean_text, "model_unavailable"))

            state = self._enter(State.RATE_CHECK)
            try:
                self._rate_limiter.acquire()
            except RateLimitError as exc:
                logger.warning("Rate limited, using fallback (retry in %.0fs)", exc.retry_after)
                return self._done(
                    self._fallback_result(clean_text, "rate_limited", notice=RATE_LIMIT_NOTICE)
                )

            state = self._enter(State.INVOKING)
            context_text = self._context_builder.build(snapshot, user)
            start = time.monotonic()
            try:
                reply = await self._client.invoke(
                    context_text=context_text,
                    user_text=clean_text,
                    model_config=self._config,
                )
            except ClientError as exc:
                logger.warning(
                    "Upstream model call failed: kind=%s status=%s",
                    exc.kind.value,
                    exc.status_code,
                )
                return self._done(self._fallback_result(clean_text, exc.kind.value))
            latency_ms = (time.monotonic() - start) * 1000

            result = AssistantResult(message=reply.text, source=ResultSource.MODEL)
            self._cache.put(key, reply.text)
            log_model_call(
                model_id=self._config.model_id,
                tier=self._config.tier.value,
                prompt_tokens=reply.usage.prompt_tokens if reply.usage else 0,
                completion_tokens=reply.usage.completion_tokens if reply.usage else 0,
                latency_ms=latency_ms,
                answer_chars=len(reply.text),
            )
            return self._done(result)

        except Exception:
            logger.exception("Unexpected error while answering (state=%s)", state.value)
            self._enter(State.ERRORED)
            return self._done(
                AssistantResult(message=ERROR_MESSAGE, source=ResultSource.ERROR, reason="unexpected")
            )

    # -------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------

    def _require_model_path(self) -> None:
        if not self._config.has_credential:
            raise ConfigurationError("No usable credential")
        if self._client is None:
            raise ConfigurationError("No model client configured")

    def _fallback_result(
        self,
        clean_text: str,
        reason: str,
        notice: str | None = None,
    ) -> AssistantResult:
        if not self._fallback_enabled:
            return AssistantResult(
                message=UNAVAILABLE_MESSAGE, source=ResultSource.ERROR, reason=reason,
            )
        answer = self._fallback.respond(clean_text)
        if notice:
            answer = f"{notice}\n\n{answer}"
        return AssistantResult(message=answer, source=ResultSource.FALLBACK, reason=reason)

    @staticmethod
    def _enter(state: State) -> State:
        logger.debug("Orchestrator -> %s", state.value)
        return state

    def _done(self, result: AssistantResult) -> AssistantResult:
        self._enter(State.DONE)
        logger.debug(
            "Answered: source=%s cached=%s reason=%s",
            result.source.value,
            result.cached,
            result.reason,
        )
        return result
