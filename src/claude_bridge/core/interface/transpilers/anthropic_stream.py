"""Streaming adapter — Anthropic stream events to completion chunks.

Anthropic streams a ``message_start`` event, then per content block a
``content_block_start`` / ``content_block_delta``... / ``content_block_stop``
sequence, then ``message_delta`` (stop reason and output usage) and
``message_stop``. Each meaningful event becomes one
:class:`~claude_bridge.core.interface.models.ChatCompletionChunk`; nothing is
buffered.
"""

import logging
from collections.abc import AsyncIterable, AsyncIterator
from typing import Any

from claude_bridge.core.interface.models import (
    ChatCompletionChunk,
    ChoiceDelta,
    ChunkChoice,
    ChunkFunctionCall,
    ChunkToolCall,
    CompletionUsage,
    FinishReason,
)
from claude_bridge.core.interface.transpilers.anthropic import field, map_stop_reason

logger = logging.getLogger(__name__)


async def stream_chunks(
    events: AsyncIterable[Any],
    created: int,
) -> AsyncIterator[ChatCompletionChunk]:
    """Yield a chunk for each content-bearing event of *events*.

    Every chunk carries *created* and the id of the provider message. The
    iterator ends when *events* ends and cannot be restarted. Releasing the
    underlying connection on early exit is up to the SDK stream.
    """
    completion_id = ""
    model = ""
    prompt_tokens = 0
    # content block index -> tool call index
    tool_indices: dict[int, int] = {}

    def chunk(
        delta: ChoiceDelta,
        finish_reason: FinishReason | None = None,
        usage: CompletionUsage | None = None,
    ) -> ChatCompletionChunk:
        return ChatCompletionChunk(
            id=completion_id,
            created=created,
            model=model,
            choices=[ChunkChoice(delta=delta, finish_reason=finish_reason)],
            usage=usage,
        )

    async for event in events:
        event_type = field(event, "type")

        if event_type == "message_start":
            message = field(event, "message")
            completion_id = field(message, "id") or ""
            model = field(message, "model") or ""
            prompt_tokens = field(field(message, "usage"), "input_tokens") or 0
            yield chunk(ChoiceDelta(role="assistant", content=""))

        elif event_type == "content_block_start":
            block = field(event, "content_block")
            block_type = field(block, "type")
            if block_type == "text":
                text = field(block, "text")
                if text:
                    yield chunk(ChoiceDelta(content=text))
            elif block_type == "tool_use":
                tool_index = len(tool_indices)
                tool_indices[field(event, "index")] = tool_index
                yield chunk(
                    ChoiceDelta(
                        tool_calls=[
                            ChunkToolCall(
                                index=tool_index,
                                id=field(block, "id"),
                                type="function",
                                function=ChunkFunctionCall(
                                    name=field(block, "name"), arguments=""
                                ),
                            )
                        ]
                    )
                )

        elif event_type == "content_block_delta":
            delta = field(event, "delta")
            delta_type = field(delta, "type")
            if delta_type == "text_delta":
                yield chunk(ChoiceDelta(content=field(delta, "text") or ""))
            elif delta_type == "input_json_delta":
                partial_json = field(delta, "partial_json")
                tool_index = tool_indices.get(field(event, "index"))
                if partial_json and tool_index is not None:
                    yield chunk(
                        ChoiceDelta(
                            tool_calls=[
                                ChunkToolCall(
                                    index=tool_index,
                                    function=ChunkFunctionCall(arguments=partial_json),
                                )
                            ]
                        )
                    )

        elif event_type == "message_delta":
            stop_reason = field(field(event, "delta"), "stop_reason")
            completion_tokens = field(field(event, "usage"), "output_tokens") or 0
            yield chunk(
                ChoiceDelta(),
                finish_reason=map_stop_reason(stop_reason),
                usage=CompletionUsage(
                    prompt_tokens=prompt_tokens,
                    completion_tokens=completion_tokens,
                    total_tokens=prompt_tokens + completion_tokens,
                ),
            )

        else:
            logger.debug("Ignoring stream event %r", event_type)
