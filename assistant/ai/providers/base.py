"""Base model client interface, reply and error types.

Defines the contract every upstream client implementation (Anthropic, Mock)
must satisfy. One invoke() is exactly one attempt: retry policy, if any,
belongs to the caller.

Tier 1 leaf — imports only stdlib and assistant.models (also Tier 1).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from assistant.models import ModelConfig

# Longest answer passed through unchanged; longer answers are cut and suffixed.
MAX_ANSWER_CHARS = 5000
TRUNCATION_NOTICE = "\n\n[Response truncated]"


@dataclass(frozen=True)
class UsageInfo:
    """Token usage from a completed upstream call."""

    prompt_tokens: int
    completion_tokens: int


@dataclass(frozen=True)
class ModelReply:
    """A successful upstream answer."""

    text: str
    usage: UsageInfo | None = None


class ClientErrorKind(str, Enum):
    UNAUTHORIZED = "unauthorized"
    RATE_LIMITED_UPSTREAM = "rate_limited_upstream"
    TRANSPORT = "transport"
    MALFORMED_RESPONSE = "malformed_response"


class ClientError(Exception):
    """Normalized upstream failure.

    Attributes:
        kind: Which class of failure occurred.
        status_code: HTTP status when the service answered, else None.
    """

    def __init__(
        self,
        kind: ClientErrorKind,
        message: str = "",
        status_code: int | None = None,
    ) -> None:
        super().__init__(message or kind.value)
        self.kind = kind
        self.status_code = status_code


def truncate_answer(text: str, limit: int = MAX_ANSWER_CHARS) -> str:
    """Cuts an over-long answer to ``limit`` characters plus a notice."""
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_NOTICE


class ModelClient(ABC):
    """Abstract base for upstream model clients.

    Concrete implementations (AnthropicClient, MockClient) turn one
    (context, question) pair into one answer or one ClientError.
    """

    @abstractmethod
    async def invoke(
        self,
        *,
        context_text: str,
        user_text: str,
        model_config: ModelConfig,
    ) -> ModelReply:
        """Sends one request and returns the answer.

        Args:
            context_text: System-level instruction (catalog briefing).
            user_text: The sanitized user question.
            model_config: Model ID, token budget and temperature to use.

        Returns:
            The answer text (at most MAX_ANSWER_CHARS plus notice) and usage.

        Raises:
            ClientError: On any upstream or transport failure.
        """
