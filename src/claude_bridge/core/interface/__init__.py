"""Standardized chat-completion interface served by Anthropic."""

from claude_bridge.core.interface.config import HandlerConfig, resolve_api_key
from claude_bridge.core.interface.errors import (
    CompletionError,
    ConfigurationError,
    InputError,
)
from claude_bridge.core.interface.handler import AnthropicCompatibleHandler
from claude_bridge.core.interface.models import (
    ChatCompletion,
    ChatCompletionChunk,
    ChatCompletionRequest,
    ChatMessage,
    ContentPart,
    ImageContentPart,
    NamedToolChoice,
    TextContentPart,
    ToolCall,
    ToolChoice,
    ToolDefinition,
)
from claude_bridge.core.interface.provider import ProviderRequest
from claude_bridge.core.interface.transpiler import Transpiler
from claude_bridge.core.interface.validation import validate_inputs

__all__ = [
    "AnthropicCompatibleHandler",
    "ChatCompletion",
    "ChatCompletionChunk",
    "ChatCompletionRequest",
    "ChatMessage",
    "CompletionError",
    "ConfigurationError",
    "ContentPart",
    "HandlerConfig",
    "ImageContentPart",
    "InputError",
    "NamedToolChoice",
    "ProviderRequest",
    "TextContentPart",
    "ToolCall",
    "ToolChoice",
    "ToolDefinition",
    "Transpiler",
    "resolve_api_key",
    "validate_inputs",
]
