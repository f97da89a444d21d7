"""Mock model client for testing and development.

Deterministic, zero-cost ModelClient implementation that returns a
configurable canned answer. Used by:
- The orchestrator tests (via conftest.mock_client fixture)
- Development mode without an API key (MODEL_BACKEND=mock)
- Reference implementation of the ModelClient contract

Tier 2 service — imports only from base.py (Tier 1).
"""

from assistant.ai.providers.base import (
    ModelClient,
    ModelConfig,
    ModelReply,
    UsageInfo,
    truncate_answer,
)

_DEFAULT_RESPONSE = "Hello from MockClient"
_DEFAULT_USAGE = UsageInfo(prompt_tokens=10, completion_tokens=5)


class MockClient(ModelClient):
    """Deterministic model client.

    Every invoke() is recorded in ``calls`` before the configured error (if
    any) is raised, so tests can count attempted upstream calls.

    Args:
        response: Text returned by invoke(). Truncated like a real answer.
        usage: Token usage attached to the reply. Defaults to 10/5.
        error: If set, invoke() raises this after recording the call.
    """

    def __init__(
        self,
        response: str = _DEFAULT_RESPONSE,
        usage: UsageInfo | None = None,
        error: Exception | None = None,
    ) -> None:
        self.response = response
        self.usage = usage or _DEFAULT_USAGE
        self.error = error
        self.calls: list[dict] = []

    async def invoke(
        self,
        *,
        context_text: str,
        user_text: str,
        model_config: ModelConfig,
    ) -> ModelReply:
        """Records the call and returns the canned answer (or raises)."""
        self.calls.append({
            "context_text": context_text,
            "user_text": user_text,
            "model_config": model_config,
        })
        if self.error is not None:
            raise self.error
        return ModelReply(text=truncate_answer(self.response), usage=self.usage)
