"""Provider-native request for Anthropic's Messages API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProviderRequest(BaseModel):
    """Parameters for ``client.messages.create``.

    Built from a :class:`~claude_bridge.core.interface.models.ChatCompletionRequest`
    by the transpiler. ``max_tokens`` is required because the Messages API
    has no default; ``temperature`` is already on the provider's 0-1 scale.
    """

    model_config = ConfigDict(frozen=True)

    model: str
    max_tokens: int = Field(ge=0)
    messages: list[dict[str, Any]]
    system: str | None = None
    stop_sequences: list[str] | None = None
    temperature: float | None = None
    top_p: float | None = None
    stream: bool | None = None
    tools: list[dict[str, Any]] | None = None
    tool_choice: dict[str, Any] | None = None

    def to_params(self) -> dict[str, Any]:
        """Return keyword arguments for the SDK, omitting unset fields."""
        return self.model_dump(exclude_none=True)
