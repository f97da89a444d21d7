"""Model ID registry — single source of truth for AI model identifiers.

Every upstream call resolves its model ID through this module. The rest of
the codebase imports family-name constants from here — no raw model ID
strings anywhere else.

Two-layer abstraction:
  Layer 1: Deployment tier ("local", "hosted") decides which defaults apply
  Layer 2: TIER_MAP resolves tier → ModelConfig (model, token budget, temperature)

To swap a model: change a TIER_MAP value below, or set LOCAL_MODEL /
HOSTED_MODEL to a family name from MODEL_MAP.
"""

from dataclasses import dataclass, field
from enum import Enum

# ---------------------------------------------------------------------------
# Model IDs (update when the provider releases new versions)
# ---------------------------------------------------------------------------

CLAUDE_HAIKU: str = "claude-haiku-4-5-20251001"
CLAUDE_SONNET: str = "claude-sonnet-4-6"
CLAUDE_OPUS: str = "claude-opus-4-6"

# SDK base URL; the Messages endpoint path (/v1/messages) is appended by the SDK.
ANTHROPIC_API_URL: str = "https://api.anthropic.com"

_DEFAULT_TEMPERATURE = 0.7


class DeploymentTier(str, Enum):
    """Where the assistant is running. Decides model and token budget."""

    LOCAL = "local"
    HOSTED = "hosted"


# ---------------------------------------------------------------------------
# ModelConfig — everything the upstream client needs for one call
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ModelConfig:
    """Bundles the tier-specific model settings and the resolved credential.

    Tier 1 leaf — no project imports. Defaults live in TIER_MAP below; the
    resolver attaches the credential with ``dataclasses.replace``.

    A config with ``credential=None`` must never be used for an upstream call.
    """

    tier: DeploymentTier
    model_id: str
    max_tokens: int
    temperature: float = _DEFAULT_TEMPERATURE
    api_url: str = ANTHROPIC_API_URL
    credential: str | None = field(default=None, repr=False)

    @property
    def has_credential(self) -> bool:
        return bool(self.credential)


# ---------------------------------------------------------------------------
# Tier → ModelConfig defaults
# ---------------------------------------------------------------------------
# Local runs use the faster, cheaper model with a smaller budget.

TIER_MAP: dict[DeploymentTier, ModelConfig] = {
    DeploymentTier.LOCAL: ModelConfig(
        tier=DeploymentTier.LOCAL, model_id=CLAUDE_HAIKU, max_tokens=500,
    ),
    DeploymentTier.HOSTED: ModelConfig(
        tier=DeploymentTier.HOSTED, model_id=CLAUDE_SONNET, max_tokens=1000,
    ),
}


def resolve_tier(tier: DeploymentTier | str) -> ModelConfig:
    """Resolves a deployment tier to its default ModelConfig.

    Args:
        tier: A DeploymentTier or its string value ("local", "hosted").

    Returns:
        The default ModelConfig for the tier (no credential attached).

    Raises:
        ValueError: If the tier name is not a known DeploymentTier.
    """
    return TIER_MAP[DeploymentTier(tier)]


# ---------------------------------------------------------------------------
# Lookup map — env var value → actual model ID
# ---------------------------------------------------------------------------
# Keys match the constant names exactly (case-sensitive).
MODEL_MAP: dict[str, str] = {
    "CLAUDE_HAIKU": CLAUDE_HAIKU,
    "CLAUDE_SONNET": CLAUDE_SONNET,
    "CLAUDE_OPUS": CLAUDE_OPUS,
}
