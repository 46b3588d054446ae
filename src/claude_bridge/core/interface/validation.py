"""Input validation for Anthropic-compatible requests.

Anthropic accepts any model name and any request feature, so the handler
does not run a generic model or feature-flag check. This module holds the
only check it does run: image input against legacy models, plus a warning
for the ``detail`` hint that Anthropic ignores.
"""

import logging

from claude_bridge.core.interface.errors import InputError
from claude_bridge.core.interface.model_defaults import supports_images
from claude_bridge.core.interface.models import ChatCompletionRequest

logger = logging.getLogger(__name__)

IMAGE_DETAIL_WARNING = (
    "Anthropic does not support the 'detail' field for images. "
    "The default image quality will be used."
)


def validate_inputs(request: ChatCompletionRequest) -> None:
    """Reject image input for legacy models and warn about image detail hints.

    The warning is logged at most once per request, after the whole message
    list has been scanned.

    Raises:
        InputError: If the request targets a model that cannot accept images
            and any message contains an image part.
    """
    log_detail_warning = False

    for message in request.messages:
        for part in message.image_parts:
            if part.image_url.detail is not None and part.image_url.detail != "auto":
                log_detail_warning = True

            if not supports_images(request.model):
                raise InputError(
                    f"Model '{request.model}' does not support images. Remove any images "
                    "from the prompt or use Claude version 3 or later."
                )

    if log_detail_warning:
        logger.warning(IMAGE_DETAIL_WARNING)
