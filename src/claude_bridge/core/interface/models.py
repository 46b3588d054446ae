"""Standardized (OpenAI-compatible) chat-completion schema.

These are the caller-facing request and response types. They are kept
separate from the provider-native request in ``provider.py``: the two shapes
do not correspond field for field (system prompt extraction, stop sequence
shape, temperature scale), so conversion between them is explicit.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Content Parts: text and image building blocks of a message
# ---------------------------------------------------------------------------


class TextContentPart(BaseModel):
    """Plain text content part."""

    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str


class ImageURL(BaseModel):
    """Image reference: an ``http(s)`` URL or a ``data:`` URL."""

    model_config = ConfigDict(frozen=True)

    url: str
    detail: str | None = None


class ImageContentPart(BaseModel):
    """Image content part."""

    model_config = ConfigDict(frozen=True)

    type: Literal["image_url"] = "image_url"
    image_url: ImageURL


ContentPart = Annotated[TextContentPart | ImageContentPart, Field(discriminator="type")]


# ---------------------------------------------------------------------------
# Tool Calling: declarations, directives and invocations
# ---------------------------------------------------------------------------


class FunctionCall(BaseModel):
    """Function name and JSON-encoded arguments of a tool call."""

    model_config = ConfigDict(frozen=True)

    name: str
    arguments: str = "{}"


class ToolCall(BaseModel):
    """A tool invocation emitted by an assistant message."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: Literal["function"] = "function"
    function: FunctionCall


class FunctionDefinition(BaseModel):
    """JSON-schema description of a callable function."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str | None = None
    parameters: dict[str, Any] | None = None


class ToolDefinition(BaseModel):
    """A tool the model may call."""

    model_config = ConfigDict(frozen=True)

    type: Literal["function"] = "function"
    function: FunctionDefinition


class ToolChoiceFunction(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str


class NamedToolChoice(BaseModel):
    """Forces the model to call one specific function."""

    model_config = ConfigDict(frozen=True)

    type: Literal["function"] = "function"
    function: ToolChoiceFunction


ToolChoice = Literal["auto", "none", "required"] | NamedToolChoice


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------


class ChatMessage(BaseModel):
    """A single message in the conversation.

    Roles:
    - system: instructions, extracted into the provider's system prompt
    - user: human input (string or content parts)
    - assistant: prior model output (may include tool_calls)
    - tool: tool execution result (must include tool_call_id)
    """

    model_config = ConfigDict(frozen=True)

    role: Literal["system", "user", "assistant", "tool"]
    content: str | list[ContentPart] | None = None
    name: str | None = None
    tool_calls: list[ToolCall] | None = None
    tool_call_id: str | None = None

    @property
    def text(self) -> str:
        """Concatenated text of the message, ignoring non-text parts."""
        if self.content is None:
            return ""
        if isinstance(self.content, str):
            return self.content
        return "".join(part.text for part in self.content if isinstance(part, TextContentPart))

    @property
    def image_parts(self) -> list[ImageContentPart]:
        """All image parts of the message, in order."""
        if not isinstance(self.content, list):
            return []
        return [part for part in self.content if isinstance(part, ImageContentPart)]


class ChatCompletionRequest(BaseModel):
    """A chat-completion request in the standardized schema.

    Immutable once validated. ``stream``, ``temperature`` and ``top_p`` are
    kept exactly as sent: only a boolean ``True`` selects streaming, and a
    sampling value that is not a number is omitted from the provider call
    rather than coerced.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    model: str
    messages: list[ChatMessage]
    max_tokens: int | None = Field(default=None, ge=0)
    stop: str | list[str] | None = None
    temperature: Any = None
    top_p: Any = None
    stream: Any = None
    tools: list[ToolDefinition] | None = None
    tool_choice: ToolChoice | None = None


# ---------------------------------------------------------------------------
# Non-streaming response
# ---------------------------------------------------------------------------

FinishReason = Literal["stop", "length", "tool_calls", "content_filter"]


class CompletionUsage(BaseModel):
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class ResponseMessage(BaseModel):
    """The assistant message of a completion choice."""

    role: Literal["assistant"] = "assistant"
    content: str | None = None
    tool_calls: list[ToolCall] | None = None


class Choice(BaseModel):
    index: int
    message: ResponseMessage
    finish_reason: FinishReason
    logprobs: None = None


class ChatCompletion(BaseModel):
    """A complete (non-streaming) chat-completion response."""

    id: str
    object: Literal["chat.completion"] = "chat.completion"
    created: int
    model: str
    choices: list[Choice]
    usage: CompletionUsage | None = None


# ---------------------------------------------------------------------------
# Streaming response
# ---------------------------------------------------------------------------


class ChunkFunctionCall(BaseModel):
    name: str | None = None
    arguments: str | None = None


class ChunkToolCall(BaseModel):
    """Incremental tool-call delta; ``index`` identifies the call across chunks."""

    index: int
    id: str | None = None
    type: Literal["function"] | None = None
    function: ChunkFunctionCall


class ChoiceDelta(BaseModel):
    role: Literal["assistant"] | None = None
    content: str | None = None
    tool_calls: list[ChunkToolCall] | None = None


class ChunkChoice(BaseModel):
    index: int = 0
    delta: ChoiceDelta
    finish_reason: FinishReason | None = None
    logprobs: None = None


class ChatCompletionChunk(BaseModel):
    """One incremental event of a streaming completion."""

    id: str
    object: Literal["chat.completion.chunk"] = "chat.completion.chunk"
    created: int
    model: str
    choices: list[ChunkChoice]
    usage: CompletionUsage | None = None
