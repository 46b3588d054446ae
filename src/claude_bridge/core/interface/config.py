"""Handler configuration — API key, endpoint and client options."""

import os

from pydantic import BaseModel

from claude_bridge.core.interface.errors import ConfigurationError

API_KEY_ENV_VAR = "ANTHROPIC_API_KEY"


class HandlerConfig(BaseModel):
    """Options used to build the Anthropic client for each request.

    Every field is optional. ``api_key`` falls back to the
    ``ANTHROPIC_API_KEY`` environment variable; the remaining fields are
    forwarded to ``anthropic.AsyncAnthropic`` only when set.
    """

    api_key: str | None = None
    base_url: str | None = None
    timeout: float | None = None
    max_retries: int | None = None


def resolve_api_key(explicit: str | None = None) -> str:
    """Return *explicit* or the key from the environment.

    Raises:
        ConfigurationError: If neither source provides a key.
    """
    api_key = explicit or os.environ.get(API_KEY_ENV_VAR)
    if not api_key:
        raise ConfigurationError(
            f"No Anthropic API key detected. Please define an '{API_KEY_ENV_VAR}' "
            "environment variable or supply the API key using the 'api_key' parameter.",
            env_var=API_KEY_ENV_VAR,
        )
    return api_key
