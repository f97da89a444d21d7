"""Anthropic Claude client using the anthropic SDK.

Implements the ModelClient contract against Anthropic's Messages API. The
SDK carries the credential and API-version headers; this module only shapes
the request body and maps SDK exceptions onto ClientErrorKind.

Single attempt per call: the SDK's own retries are disabled
(``max_retries=0``) and nothing here loops. Timeouts surface as TRANSPORT.

Tier 2 service — imports from base.py (Tier 1) + anthropic SDK.
"""

import logging

import anthropic

from assistant.ai.providers.base import (
    MAX_ANSWER_CHARS,
    ClientError,
    ClientErrorKind,
    ModelClient,
    ModelConfig,
    ModelReply,
    UsageInfo,
    truncate_answer,
)

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 30.0  # seconds


def _classify(exc: anthropic.APIError) -> ClientError:
    """Maps an SDK exception onto a ClientError.

    - 401/403 -> UNAUTHORIZED
    - 429 -> RATE_LIMITED_UPSTREAM
    - response failed schema validation -> MALFORMED_RESPONSE
    - connection errors, timeouts and every other status -> TRANSPORT
    """
    if isinstance(exc, anthropic.APIResponseValidationError):
        return ClientError(
            ClientErrorKind.MALFORMED_RESPONSE,
            "Response did not match the expected schema",
            status_code=exc.status_code,
        )
    if isinstance(exc, (anthropic.AuthenticationError, anthropic.PermissionDeniedError)):
        return ClientError(
            ClientErrorKind.UNAUTHORIZED, "Credential rejected", status_code=exc.status_code,
        )
    if isinstance(exc, anthropic.RateLimitError):
        return ClientError(
            ClientErrorKind.RATE_LIMITED_UPSTREAM,
            "Upstream rate limit",
            status_code=exc.status_code,
        )
    if isinstance(exc, anthropic.APIStatusError):
        return ClientError(
            ClientErrorKind.TRANSPORT,
            f"Upstream returned status {exc.status_code}",
            status_code=exc.status_code,
        )
    if isinstance(exc, anthropic.APITimeoutError):
        return ClientError(ClientErrorKind.TRANSPORT, "Request timed out")
    return ClientError(ClientErrorKind.TRANSPORT, "Connection failed")


def _extract_answer(response) -> str:
    """Returns the first content block's text or raises MALFORMED_RESPONSE."""
    content = getattr(response, "content", None)
    if not content:
        raise ClientError(ClientErrorKind.MALFORMED_RESPONSE, "Response has no content blocks")

    text = getattr(content[0], "text", None)
    if not isinstance(text, str) or not text.strip():
        raise ClientError(
            ClientErrorKind.MALFORMED_RESPONSE, "First content block has no text",
        )
    return text


class AnthropicClient(ModelClient):
    """Anthropic Claude client using the anthropic SDK.

    Args:
        api_key: Anthropic API key (already validated by the resolver).
        base_url: API base URL; the SDK appends /v1/messages.
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> None:
        self._client = anthropic.AsyncAnthropic(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )

    async def invoke(
        self,
        *,
        context_text: str,
        user_text: str,
        model_config: ModelConfig,
    ) -> ModelReply:
        """Sends one Messages API request.

        Args:
            context_text: Sent as the ``system`` instruction.
            user_text: Sent as the single user message.
            model_config: Model ID, max tokens and temperature.

        Returns:
            ModelReply with the (possibly truncated) first text block and usage.

        Raises:
            ClientError: Classified SDK failure or malformed response.
        """
        try:
            response = await self._client.messages.create(
                model=model_config.model_id,
                max_tokens=model_config.max_tokens,
                temperature=model_config.temperature,
                system=context_text,
                messages=[{"role": "user", "content": user_text}],
            )
        except anthropic.APIError as exc:
            error = _classify(exc)
            logger.debug(
                "Anthropic call failed: kind=%s status=%s",
                error.kind.value,
                error.status_code,
            )
            raise error from exc

        text = _extract_answer(response)
        if len(text) > MAX_ANSWER_CHARS:
            logger.info("Truncating %d-char answer to %d", len(text), MAX_ANSWER_CHARS)
            text = truncate_answer(text)

        usage = None
        raw_usage = getattr(response, "usage", None)
        if raw_usage is not None:
            usage = UsageInfo(
                prompt_tokens=raw_usage.input_tokens,
                completion_tokens=raw_usage.output_tokens,
            )

        return ModelReply(text=text, usage=usage)
