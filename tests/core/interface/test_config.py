"""Tests for handler configuration and per-model defaults."""

import pytest

from claude_bridge.core.interface.config import API_KEY_ENV_VAR, HandlerConfig, resolve_api_key
from claude_bridge.core.interface.errors import ConfigurationError, InputError
from claude_bridge.core.interface.model_defaults import (
    DEFAULT_MAX_TOKENS,
    LEGACY_NO_IMAGE_MODELS,
    get_default_max_tokens,
    supports_images,
)


class TestResolveApiKey:
    def test_explicit_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(API_KEY_ENV_VAR, "env-key")
        assert resolve_api_key("explicit-key") == "explicit-key"

    def test_env_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(API_KEY_ENV_VAR, "env-key")
        assert resolve_api_key() == "env-key"

    def test_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(API_KEY_ENV_VAR, raising=False)
        with pytest.raises(ConfigurationError, match="ANTHROPIC_API_KEY") as exc_info:
            resolve_api_key(None)
        assert exc_info.value.env_var == API_KEY_ENV_VAR

    def test_empty_env_is_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(API_KEY_ENV_VAR, "")
        with pytest.raises(ConfigurationError):
            resolve_api_key()


class TestHandlerConfig:
    def test_defaults(self) -> None:
        config = HandlerConfig()
        assert config.api_key is None
        assert config.base_url is None
        assert config.timeout is None
        assert config.max_retries is None


class TestModelDefaults:
    def test_opus_default(self) -> None:
        assert get_default_max_tokens("claude-3-opus-20240229") == 4096

    def test_sonnet_35_default(self) -> None:
        assert get_default_max_tokens("claude-3-5-sonnet-20241022") == 8192

    def test_unknown_model(self) -> None:
        with pytest.raises(InputError, match="unknown-model"):
            get_default_max_tokens("unknown-model")

    def test_legacy_models_have_defaults(self) -> None:
        for model in LEGACY_NO_IMAGE_MODELS:
            assert model in DEFAULT_MAX_TOKENS

    def test_supports_images(self) -> None:
        assert supports_images("claude-3-haiku-20240307")
        assert not supports_images("claude-2.1")
