"""Static model data.

Contains the default ``max_tokens`` per model (the Messages API has no
default of its own) and the legacy models that reject image input.
"""

from claude_bridge.core.interface.errors import InputError

# ---------------------------------------------------------------------------
# Default max_tokens per model
# ---------------------------------------------------------------------------

DEFAULT_MAX_TOKENS: dict[str, int] = {
    # Claude 3.7 / 3.5
    "claude-3-7-sonnet-20250219": 8192,
    "claude-3-7-sonnet-latest": 8192,
    "claude-3-5-sonnet-20241022": 8192,
    "claude-3-5-sonnet-20240620": 8192,
    "claude-3-5-sonnet-latest": 8192,
    "claude-3-5-haiku-20241022": 8192,
    "claude-3-5-haiku-latest": 8192,
    # Claude 3
    "claude-3-opus-20240229": 4096,
    "claude-3-opus-latest": 4096,
    "claude-3-sonnet-20240229": 4096,
    "claude-3-haiku-20240307": 4096,
    # Legacy
    "claude-2.1": 4096,
    "claude-2.0": 4096,
    "claude-instant-1.2": 4096,
}

LEGACY_NO_IMAGE_MODELS: frozenset[str] = frozenset(
    {"claude-instant-1.2", "claude-2.0", "claude-2.1"}
)


def get_default_max_tokens(model: str) -> int:
    """Return the default ``max_tokens`` for *model*.

    Raises:
        InputError: If the model has no known default. The provider requires
            an explicit value, so there is nothing to fall back to.
    """
    try:
        return DEFAULT_MAX_TOKENS[model]
    except KeyError:
        raise InputError(
            f"No default max_tokens is known for model '{model}'. "
            "Supply 'max_tokens' explicitly."
        ) from None


def supports_images(model: str) -> bool:
    """Return whether *model* accepts image content."""
    return model not in LEGACY_NO_IMAGE_MODELS
