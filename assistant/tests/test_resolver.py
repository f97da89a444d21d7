"""Tests for assistant.resolver — tier detection and credential resolution."""

import logging

import pytest

from assistant.models import CLAUDE_HAIKU, CLAUDE_OPUS, CLAUDE_SONNET, DeploymentTier
from assistant.resolver import (
    ConfigResolver,
    ConfigurationError,
    EnvironmentSignals,
    credential_preview,
    default_credential_providers,
    detect_tier,
    env_credential,
    is_valid_credential,
)

_KEY = "sk-ant-api03-resolver-test"
_OTHER_KEY = "sk-ant-REDACTED"


# ---------------------------------------------------------------------------
# Tier detection
# ---------------------------------------------------------------------------


class TestDetectTier:

    @pytest.mark.parametrize("hostname", ["localhost", "127.0.0.1", "LOCALHOST"])
    def test_local_hosts(self, make_settings, hostname: str) -> None:
        assert detect_tier(hostname, make_settings()) is DeploymentTier.LOCAL

    @pytest.mark.parametrize("hostname", [
        "org.github.io", "raw.githubusercontent.com",
    ])
    def test_hosted_patterns(self, make_settings, hostname: str) -> None:
        assert detect_tier(hostname, make_settings()) is DeploymentTier.HOSTED

    def test_unknown_host_defaults_to_hosted(self, make_settings) -> None:
        assert detect_tier("dashboard.example.org", make_settings()) is DeploymentTier.HOSTED

    def test_override_wins(self, make_settings) -> None:
        settings = make_settings(tier_override="local")
        assert detect_tier("org.github.io", settings) is DeploymentTier.LOCAL


# ---------------------------------------------------------------------------
# Credential helpers
# ---------------------------------------------------------------------------


class TestCredentialHelpers:

    def test_valid_prefix(self) -> None:
        assert is_valid_credential(_KEY) is True
        assert is_valid_credential("sk-live-123") is False

    def test_preview_truncates(self) -> None:
        assert credential_preview(_KEY) == "sk-ant-api03..."
        assert credential_preview(None) == "None"

    def test_env_credential_reads_lazily(self, monkeypatch: pytest.MonkeyPatch) -> None:
        provider = env_credential("CLAUDE_API_KEY")
        monkeypatch.delenv("CLAUDE_API_KEY", raising=False)
        assert provider() is None
        monkeypatch.setenv("CLAUDE_API_KEY", _KEY)
        assert provider() == _KEY

    def test_default_order_injected_first(self) -> None:
        signals = EnvironmentSignals(hostname="localhost", injected_credential=_KEY)
        providers = default_credential_providers(signals)
        assert providers[0]() == _KEY
        assert len(providers) == 3


# ---------------------------------------------------------------------------
# ConfigResolver
# ---------------------------------------------------------------------------


@pytest.mark.usefixtures("clean_env")
class TestResolve:

    def test_local_tier_config(self, make_settings) -> None:
        resolver = ConfigResolver(make_settings())
        config = resolver.resolve(EnvironmentSignals("localhost", _KEY))
        assert config.tier is DeploymentTier.LOCAL
        assert config.model_id == CLAUDE_HAIKU
        assert config.max_tokens == 500
        assert config.credential == _KEY

    def test_hosted_tier_config(self, make_settings) -> None:
        resolver = ConfigResolver(make_settings())
        config = resolver.resolve(EnvironmentSignals("org.github.io", _KEY))
        assert config.tier is DeploymentTier.HOSTED
        assert config.model_id == CLAUDE_SONNET
        assert config.max_tokens == 1000

    def test_model_override_from_settings(self, make_settings) -> None:
        resolver = ConfigResolver(make_settings(hosted_model=CLAUDE_OPUS))
        config = resolver.resolve(EnvironmentSignals("org.github.io", _KEY))
        assert config.model_id == CLAUDE_OPUS

    def test_api_url_from_settings(self, make_settings) -> None:
        resolver = ConfigResolver(make_settings(api_url="https://proxy.internal"))
        config = resolver.resolve(EnvironmentSignals("localhost", _KEY))
        assert config.api_url == "https://proxy.internal"

    def test_no_credential_anywhere(self, make_settings) -> None:
        config = ConfigResolver(make_settings()).resolve(EnvironmentSignals("localhost"))
        assert config.credential is None
        assert config.has_credential is False

    def test_injected_beats_environment(
        self, make_settings, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("CLAUDE_API_KEY", _OTHER_KEY)
        config = ConfigResolver(make_settings()).resolve(
            EnvironmentSignals("localhost", _KEY)
        )
        assert config.credential == _KEY

    def test_environment_used_when_not_injected(
        self, make_settings, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("ANTHROPIC_API_KEY", _OTHER_KEY)
        config = ConfigResolver(make_settings()).resolve(EnvironmentSignals("localhost"))
        assert config.credential == _OTHER_KEY

    def test_claude_key_beats_anthropic_key(
        self, make_settings, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("CLAUDE_API_KEY", _KEY)
        monkeypatch.setenv("ANTHROPIC_API_KEY", _OTHER_KEY)
        config = ConfigResolver(make_settings()).resolve(EnvironmentSignals("localhost"))
        assert config.credential == _KEY

    def test_blank_injected_value_skipped(
        self, make_settings, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("CLAUDE_API_KEY", _OTHER_KEY)
        config = ConfigResolver(make_settings()).resolve(
            EnvironmentSignals("localhost", "   ")
        )
        assert config.credential == _OTHER_KEY

    def test_custom_providers_in_order(self, make_settings) -> None:
        resolver = ConfigResolver(
            make_settings(),
            credential_providers=[lambda: None, lambda: _OTHER_KEY, lambda: _KEY],
        )
        config = resolver.resolve(EnvironmentSignals("localhost", _KEY))
        assert config.credential == _OTHER_KEY

    def test_malformed_credential_treated_as_absent(
        self, make_settings, caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="assistant.resolver"):
            config = ConfigResolver(make_settings()).resolve(
                EnvironmentSignals("localhost", "not-a-real-key")
            )
        assert config.credential is None
        assert "Invalid credential format" in caplog.text

    def test_malformed_credential_strict_raises(self, make_settings) -> None:
        resolver = ConfigResolver(make_settings(strict_credentials=True))
        with pytest.raises(ConfigurationError):
            resolver.resolve(EnvironmentSignals("localhost", "not-a-real-key"))

    def test_model_disabled_flag_drops_credential(self, make_settings) -> None:
        resolver = ConfigResolver(make_settings(model_enabled=False))
        config = resolver.resolve(EnvironmentSignals("localhost", _KEY))
        assert config.credential is None

    def test_model_disabled_skips_strict_check(self, make_settings) -> None:
        resolver = ConfigResolver(
            make_settings(model_enabled=False, strict_credentials=True),
        )
        config = resolver.resolve(EnvironmentSignals("localhost", "not-a-real-key"))
        assert config.credential is None


@pytest.mark.usefixtures("clean_env")
class TestResolveOnDemand:
    """Tier is fixed after first resolution; each resolve() re-reads the credential."""

    def test_tier_fixed_after_first_resolve(self, make_settings) -> None:
        resolver = ConfigResolver(make_settings())
        first = resolver.resolve(EnvironmentSignals("localhost"))
        second = resolver.resolve(EnvironmentSignals("org.github.io"))
        assert first.tier is DeploymentTier.LOCAL
        assert second.tier is DeploymentTier.LOCAL
        assert resolver.tier is DeploymentTier.LOCAL

    def test_second_resolve_rereads_credential(self, make_settings) -> None:
        resolver = ConfigResolver(make_settings())
        assert resolver.resolve(EnvironmentSignals("localhost")).credential is None
        assert resolver.resolve(EnvironmentSignals("localhost", _KEY)).credential == _KEY

    def test_tier_none_before_resolve(self, make_settings) -> None:
        assert ConfigResolver(make_settings()).tier is None


@pytest.mark.usefixtures("clean_env")
class TestDiagnosticLog:

    def test_one_summary_line(
        self, make_settings, caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.INFO, logger="assistant.resolver"):
            ConfigResolver(make_settings()).resolve(EnvironmentSignals("localhost", _KEY))
        summaries = [r for r in caplog.records if "configuration resolved" in r.getMessage()]
        assert len(summaries) == 1
        message = summaries[0].getMessage()
        assert "tier=local" in message
        assert "has_credential=True" in message

    def test_full_key_never_logged(
        self, make_settings, caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.DEBUG):
            ConfigResolver(make_settings()).resolve(EnvironmentSignals("localhost", _KEY))
        assert _KEY not in caplog.text
