"""Anthropic transpiler — maps standardized requests onto the Messages API.

Key differences from the standardized schema:
- System messages are a separate top-level ``system`` string, not messages.
- Messages must strictly alternate between user and assistant roles, so
  consecutive same-role messages are merged.
- Tool results are user messages carrying ``tool_result`` blocks; assistant
  tool calls are ``tool_use`` blocks with decoded JSON input.
- Images must be base64 sources.
- ``stop`` is always a list (``stop_sequences``) and temperature runs 0-1.
- ``tool_choice`` is a discriminated object (``auto`` / ``any`` / ``tool``).
"""

import json
import logging
from typing import Any

from claude_bridge.core.interface.errors import InputError
from claude_bridge.core.interface.images import HttpImageResolver, ImageResolver
from claude_bridge.core.interface.model_defaults import get_default_max_tokens
from claude_bridge.core.interface.models import (
    ChatCompletion,
    ChatCompletionRequest,
    ChatMessage,
    Choice,
    CompletionUsage,
    ContentPart,
    FinishReason,
    FunctionCall,
    ImageContentPart,
    NamedToolChoice,
    ResponseMessage,
    ToolCall,
    ToolChoice,
    ToolDefinition,
)
from claude_bridge.core.interface.provider import ProviderRequest

logger = logging.getLogger(__name__)

_EMPTY_SCHEMA: dict[str, Any] = {"type": "object", "properties": {}}

_STOP_REASONS: dict[str, FinishReason] = {
    "end_turn": "stop",
    "stop_sequence": "stop",
    "max_tokens": "length",
    "tool_use": "tool_calls",
    "refusal": "content_filter",
}


class AnthropicTranspiler:
    """Converts between the standardized schema and Anthropic's Messages API."""

    def __init__(self, image_resolver: ImageResolver | None = None) -> None:
        self.image_resolver: ImageResolver = image_resolver or HttpImageResolver()

    async def to_provider(self, request: ChatCompletionRequest) -> ProviderRequest:
        """Build the provider request for *request*.

        Raises:
            InputError: If ``max_tokens`` is absent and the model has no known
                default, or a message cannot be converted.
        """
        max_tokens = (
            request.max_tokens
            if request.max_tokens is not None
            else get_default_max_tokens(request.model)
        )
        top_p = request.top_p if is_number(request.top_p) else None
        messages, system = await convert_messages(request.messages, self.image_resolver)
        tools, tool_choice = convert_tool_params(request.tool_choice, request.tools)

        return ProviderRequest(
            model=request.model,
            max_tokens=max_tokens,
            messages=messages,
            system=system,
            stop_sequences=convert_stop_sequences(request.stop),
            temperature=convert_temperature(request.temperature),
            top_p=top_p,
            stream=True if request.stream is True else None,
            tools=tools,
            tool_choice=tool_choice,
        )

    def from_provider(
        self,
        message: Any,
        created: int,
        tool_choice: ToolChoice | None = None,
    ) -> ChatCompletion:
        """Convert a non-streaming Messages API response into a ChatCompletion.

        Anthropic returns a single candidate, so the result has one choice.
        *tool_choice* is the caller's original directive, used to reconcile
        the finish reason.
        """
        text_parts: list[str] = []
        tool_calls: list[ToolCall] = []

        for block in field(message, "content") or []:
            block_type = field(block, "type")
            if block_type == "text":
                text_parts.append(field(block, "text") or "")
            elif block_type == "tool_use":
                tool_calls.append(
                    ToolCall(
                        id=field(block, "id"),
                        function=FunctionCall(
                            name=field(block, "name"),
                            arguments=json.dumps(field(block, "input") or {}),
                        ),
                    )
                )

        stop_reason = field(message, "stop_reason")
        choice = Choice(
            index=0,
            message=ResponseMessage(
                content="".join(text_parts) if text_parts else None,
                tool_calls=tool_calls or None,
            ),
            finish_reason=reconcile_finish_reason(stop_reason, tool_choice, bool(tool_calls)),
        )

        return ChatCompletion(
            id=field(message, "id"),
            created=created,
            model=field(message, "model"),
            choices=[choice],
            usage=convert_usage(field(message, "usage")),
        )


# ---------------------------------------------------------------------------
# Parameter conversions
# ---------------------------------------------------------------------------


def convert_stop_sequences(stop: str | list[str] | None) -> list[str] | None:
    """Normalize a single stop string or a list of them into a list."""
    if stop is None:
        return None
    if isinstance(stop, str):
        return [stop]
    return list(stop)


def is_number(value: Any) -> bool:
    """Whether *value* is a real number (booleans excluded)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def convert_temperature(temperature: Any) -> float | None:
    """Rescale temperature from the 0-2 range to Anthropic's 0-1 range."""
    if not is_number(temperature):
        return None
    return temperature / 2


def convert_tool_params(
    tool_choice: ToolChoice | None,
    tools: list[ToolDefinition] | None,
) -> tuple[list[dict[str, Any]] | None, dict[str, Any] | None]:
    """Convert tool declarations and the tool-choice directive.

    ``"none"`` drops the tools entirely, since the provider has no way to
    declare tools while forbidding their use.
    """
    if not tools or tool_choice == "none":
        return None, None

    converted = [
        {
            "name": tool.function.name,
            "description": tool.function.description or "",
            "input_schema": tool.function.parameters or dict(_EMPTY_SCHEMA),
        }
        for tool in tools
    ]

    provider_choice: dict[str, Any]
    if tool_choice == "required":
        provider_choice = {"type": "any"}
    elif isinstance(tool_choice, NamedToolChoice):
        provider_choice = {"type": "tool", "name": tool_choice.function.name}
    else:
        provider_choice = {"type": "auto"}

    return converted, provider_choice


def convert_usage(usage: Any) -> CompletionUsage | None:
    if usage is None:
        return None
    prompt_tokens = field(usage, "input_tokens") or 0
    completion_tokens = field(usage, "output_tokens") or 0
    return CompletionUsage(
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=prompt_tokens + completion_tokens,
    )


# ---------------------------------------------------------------------------
# Finish reasons
# ---------------------------------------------------------------------------


def map_stop_reason(stop_reason: str | None) -> FinishReason:
    """Map an Anthropic ``stop_reason`` to the standardized finish reason."""
    if stop_reason is None:
        return "stop"
    mapped = _STOP_REASONS.get(stop_reason)
    if mapped is None:
        logger.debug("Unknown stop_reason %r, reporting 'stop'", stop_reason)
        return "stop"
    return mapped


def is_forced_tool_choice(tool_choice: ToolChoice | None) -> bool:
    """Whether the caller required a tool call (any tool or a named one)."""
    return tool_choice == "required" or isinstance(tool_choice, NamedToolChoice)


def reconcile_finish_reason(
    stop_reason: str | None,
    tool_choice: ToolChoice | None,
    has_tool_calls: bool = False,
) -> FinishReason:
    """Finish reason for a non-streaming response.

    With a forced tool choice, a response carrying tool calls reports
    ``tool_calls`` even when the provider stopped with a generic reason
    (``end_turn``, ``stop_sequence``, an unknown value). ``length`` and
    ``content_filter`` are kept. ``"none"`` and ``"auto"`` use the plain
    mapping.
    """
    finish_reason = map_stop_reason(stop_reason)
    if finish_reason == "stop" and has_tool_calls and is_forced_tool_choice(tool_choice):
        return "tool_calls"
    return finish_reason


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


async def convert_messages(
    messages: list[ChatMessage],
    image_resolver: ImageResolver,
) -> tuple[list[dict[str, Any]], str | None]:
    """Split *messages* into provider messages and a system prompt.

    Every system-role message is removed and its text joined into the system
    prompt; the remaining messages keep their relative order.
    """
    system_parts: list[str] = []
    raw_messages: list[dict[str, Any]] = []

    for msg in messages:
        if msg.role == "system":
            system_parts.append(msg.text)
            continue
        converted = await _message_to_anthropic(msg, image_resolver)
        if converted is not None:
            raw_messages.append(converted)

    system = "\n\n".join(system_parts) if system_parts else None
    return _merge_consecutive_roles(raw_messages), system


async def _message_to_anthropic(
    msg: ChatMessage, image_resolver: ImageResolver
) -> dict[str, Any] | None:
    """Convert a single non-system message, or return None if it is empty."""
    if msg.role == "tool":
        if not msg.tool_call_id:
            raise InputError("Tool messages must include 'tool_call_id'.")
        return {
            "role": "user",
            "content": [
                {
                    "type": "tool_result",
                    "tool_use_id": msg.tool_call_id,
                    "content": msg.text,
                }
            ],
        }

    if msg.role == "assistant" and msg.tool_calls:
        blocks = await _content_to_blocks(msg.content, image_resolver)
        for tc in msg.tool_calls:
            blocks.append(
                {
                    "type": "tool_use",
                    "id": tc.id,
                    "name": tc.function.name,
                    "input": _parse_arguments(tc.function.name, tc.function.arguments),
                }
            )
        return {"role": "assistant", "content": blocks}

    if msg.content is None or msg.content == "":
        logger.debug("Skipping empty %s message", msg.role)
        return None

    if isinstance(msg.content, str):
        return {"role": msg.role, "content": msg.content}

    return {"role": msg.role, "content": await _content_to_blocks(msg.content, image_resolver)}


async def _content_to_blocks(
    content: str | list[ContentPart] | None, image_resolver: ImageResolver
) -> list[dict[str, Any]]:
    if content is None:
        return []
    if isinstance(content, str):
        return [{"type": "text", "text": content}] if content else []

    blocks: list[dict[str, Any]] = []
    for part in content:
        if isinstance(part, ImageContentPart):
            source = await image_resolver.resolve(part.image_url.url)
            blocks.append({"type": "image", "source": source})
        else:
            blocks.append({"type": "text", "text": part.text})
    return blocks


def _parse_arguments(name: str, raw: str) -> dict[str, Any]:
    """Decode JSON tool-call arguments into the ``tool_use`` input object."""
    if not raw:
        return {}
    try:
        result = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InputError(f"Tool call '{name}' has invalid JSON arguments: {exc}") from exc
    if not isinstance(result, dict):
        raise InputError(f"Tool call '{name}' arguments must be a JSON object.")
    return result


def _merge_consecutive_roles(
    messages: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Merge consecutive messages with the same role.

    Anthropic requires strict user/assistant alternation. When multiple
    consecutive messages share a role, their content is merged into one message.
    """
    merged: list[dict[str, Any]] = []
    for msg in messages:
        if merged and merged[-1]["role"] == msg["role"]:
            merged[-1] = {
                "role": msg["role"],
                "content": _merge_content(merged[-1]["content"], msg["content"]),
            }
        else:
            merged.append(msg)
    return merged


def _merge_content(
    existing: str | list[dict[str, Any]], new: str | list[dict[str, Any]]
) -> list[dict[str, Any]]:
    """Merge two content values (str or list of blocks) into a single list."""
    result: list[dict[str, Any]] = []
    for item in (existing, new):
        if isinstance(item, str):
            result.append({"type": "text", "text": item})
        else:
            result.extend(item)
    return result


def field(obj: Any, key: str, default: Any = None) -> Any:
    """Get *key* from a dict or an attribute-style SDK object."""
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)
