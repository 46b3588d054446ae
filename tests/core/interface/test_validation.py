"""Tests for request validation (legacy image support and detail warnings)."""

import logging
from typing import Any

import pytest

from claude_bridge.core.interface.errors import InputError
from claude_bridge.core.interface.models import ChatCompletionRequest
from claude_bridge.core.interface.validation import IMAGE_DETAIL_WARNING, validate_inputs

_LOGGER = "claude_bridge.core.interface.validation"


def _image(detail: str | None = None) -> dict[str, Any]:
    image_url: dict[str, Any] = {"url": "data:image/png;base64,aGVsbG8="}
    if detail is not None:
        image_url["detail"] = detail
    return {"type": "image_url", "image_url": image_url}


def _request(model: str, *parts: dict[str, Any]) -> ChatCompletionRequest:
    return ChatCompletionRequest.model_validate(
        {
            "model": model,
            "messages": [
                {"role": "system", "content": "You can see images."},
                {"role": "user", "content": [{"type": "text", "text": "Describe"}, *parts]},
            ],
        }
    )


class TestLegacyModels:
    @pytest.mark.parametrize("model", ["claude-instant-1.2", "claude-2.0", "claude-2.1"])
    def test_image_rejected(self, model: str) -> None:
        with pytest.raises(InputError, match=f"Model '{model}' does not support images"):
            validate_inputs(_request(model, _image()))

    def test_text_only_allowed(self) -> None:
        validate_inputs(_request("claude-2.1"))

    def test_error_suggests_upgrade(self) -> None:
        with pytest.raises(InputError, match="Claude version 3 or later"):
            validate_inputs(_request("claude-2.0", _image("auto")))

    def test_rejection_skips_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger=_LOGGER):
            with pytest.raises(InputError):
                validate_inputs(_request("claude-2.1", _image("low")))
        assert IMAGE_DETAIL_WARNING not in caplog.text


class TestImageDetailWarning:
    def test_single_warning_for_many_parts(self, caplog: pytest.LogCaptureFixture) -> None:
        request = ChatCompletionRequest.model_validate(
            {
                "model": "claude-3-opus-20240229",
                "messages": [
                    {"role": "user", "content": [_image("low"), _image("low")]},
                    {"role": "assistant", "content": "Two images."},
                    {"role": "user", "content": [_image("high"), _image("low")]},
                ],
            }
        )
        with caplog.at_level(logging.WARNING, logger=_LOGGER):
            validate_inputs(request)

        warnings = [r for r in caplog.records if r.name == _LOGGER]
        assert len(warnings) == 1
        assert warnings[0].getMessage() == IMAGE_DETAIL_WARNING

    @pytest.mark.parametrize("detail", [None, "auto"])
    def test_no_warning_for_default_detail(
        self, detail: str | None, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger=_LOGGER):
            validate_inputs(_request("claude-3-opus-20240229", _image(detail)))
        assert not [r for r in caplog.records if r.name == _LOGGER]

    def test_unrecognized_detail_warns_and_proceeds(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger=_LOGGER):
            validate_inputs(_request("claude-3-opus-20240229", _image("original")))
        warnings = [r for r in caplog.records if r.name == _LOGGER]
        assert [r.getMessage() for r in warnings] == [IMAGE_DETAIL_WARNING]

    def test_any_model_name_accepted(self) -> None:
        validate_inputs(_request("some-future-model", _image()))
