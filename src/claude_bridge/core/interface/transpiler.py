"""Transpiler protocol — converts between the standardized and provider schemas.

A concrete transpiler implements both directions: standardized request ->
provider request, and provider response -> standardized response.
"""

from typing import Any, Protocol

from claude_bridge.core.interface.models import ChatCompletion, ChatCompletionRequest, ToolChoice
from claude_bridge.core.interface.provider import ProviderRequest


class Transpiler(Protocol):
    """Protocol for provider-specific request/response transpilers."""

    async def to_provider(self, request: ChatCompletionRequest) -> ProviderRequest:
        """Convert a standardized request into the provider request.

        Asynchronous because image references may have to be downloaded.
        """
        ...

    def from_provider(
        self,
        message: Any,
        created: int,
        tool_choice: ToolChoice | None = None,
    ) -> ChatCompletion:
        """Convert the provider's non-streaming response into a ChatCompletion."""
        ...
