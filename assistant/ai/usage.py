"""Per-call usage log for the upstream model.

Every answered (non-cached) question produces one INFO record on the
``assistant.ai.usage`` logger. The numbers ride along in ``extra`` so a JSON
formatter on the host side can ship them as fields; the message text is a
short summary for people tailing the console.

Tier 2 service: imports only stdlib.
"""

import logging

logger = logging.getLogger("assistant.ai.usage")


def log_model_call(
    *,
    model_id: str,
    tier: str,
    prompt_tokens: int,
    completion_tokens: int,
    latency_ms: float,
    answer_chars: int,
) -> None:
    """Records token counts, latency and answer size for one model call.

    Args:
        model_id: Model that served the answer.
        tier: "local" or "hosted".
        prompt_tokens: Input tokens billed for the call.
        completion_tokens: Output tokens billed for the call.
        latency_ms: Time spent waiting on the upstream service.
        answer_chars: Characters handed back to the chat panel.
    """
    logger.info(
        "Model call: %s tier=%s tokens_in=%d tokens_out=%d latency=%.0fms chars=%d",
        model_id,
        tier,
        prompt_tokens,
        completion_tokens,
        latency_ms,
        answer_chars,
        extra={
            "model_id": model_id,
            "tier": tier,
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "latency_ms": latency_ms,
            "answer_chars": answer_chars,
        },
    )
