"""Tests for the streaming adapter (Anthropic events -> completion chunks)."""

from collections.abc import AsyncIterator
from types import SimpleNamespace
from typing import Any

from claude_bridge.core.interface.models import ChatCompletionChunk
from claude_bridge.core.interface.transpilers.anthropic_stream import stream_chunks

CREATED = 1_712_345_678


def _ns(**kwargs: Any) -> SimpleNamespace:
    return SimpleNamespace(**kwargs)


def message_start(input_tokens: int = 9) -> SimpleNamespace:
    return _ns(
        type="message_start",
        message=_ns(
            id="msg_stream",
            model="claude-3-opus-20240229",
            usage=_ns(input_tokens=input_tokens, output_tokens=1),
        ),
    )


def text_block_start(index: int, text: str = "") -> SimpleNamespace:
    return _ns(type="content_block_start", index=index, content_block=_ns(type="text", text=text))


def text_delta(index: int, text: str) -> SimpleNamespace:
    return _ns(type="content_block_delta", index=index, delta=_ns(type="text_delta", text=text))


def tool_block_start(index: int, tool_id: str, name: str) -> SimpleNamespace:
    return _ns(
        type="content_block_start",
        index=index,
        content_block=_ns(type="tool_use", id=tool_id, name=name, input={}),
    )


def json_delta(index: int, partial: str) -> SimpleNamespace:
    return _ns(
        type="content_block_delta",
        index=index,
        delta=_ns(type="input_json_delta", partial_json=partial),
    )


def block_stop(index: int) -> SimpleNamespace:
    return _ns(type="content_block_stop", index=index)


def message_delta(stop_reason: str, output_tokens: int = 15) -> SimpleNamespace:
    return _ns(
        type="message_delta",
        delta=_ns(stop_reason=stop_reason, stop_sequence=None),
        usage=_ns(output_tokens=output_tokens),
    )


async def _events(*events: SimpleNamespace) -> AsyncIterator[SimpleNamespace]:
    for event in events:
        yield event


async def _collect(*events: SimpleNamespace) -> list[ChatCompletionChunk]:
    return [chunk async for chunk in stream_chunks(_events(*events), CREATED)]


class TestTextStream:
    async def test_text_sequence(self) -> None:
        chunks = await _collect(
            message_start(),
            text_block_start(0),
            _ns(type="ping"),
            text_delta(0, "Hel"),
            text_delta(0, "lo"),
            block_stop(0),
            message_delta("end_turn"),
            _ns(type="message_stop"),
        )

        assert len(chunks) == 4
        assert chunks[0].choices[0].delta.role == "assistant"
        assert chunks[0].choices[0].delta.content == ""
        assert "".join(c.choices[0].delta.content or "" for c in chunks) == "Hello"

        terminal = chunks[-1]
        assert terminal.choices[0].finish_reason == "stop"
        assert terminal.usage is not None
        assert terminal.usage.prompt_tokens == 9
        assert terminal.usage.completion_tokens == 15
        assert terminal.usage.total_tokens == 24

    async def test_shared_id_and_timestamp(self) -> None:
        chunks = await _collect(
            message_start(), text_delta(0, "a"), text_delta(0, "b"), message_delta("end_turn")
        )
        assert {c.id for c in chunks} == {"msg_stream"}
        assert {c.created for c in chunks} == {CREATED}
        assert {c.model for c in chunks} == {"claude-3-opus-20240229"}
        assert all(c.object == "chat.completion.chunk" for c in chunks)

    async def test_only_terminal_chunk_has_finish_reason(self) -> None:
        chunks = await _collect(message_start(), text_delta(0, "x"), message_delta("max_tokens"))
        assert [c.choices[0].finish_reason for c in chunks] == [None, None, "length"]

    async def test_initial_block_text_emitted(self) -> None:
        chunks = await _collect(message_start(), text_block_start(0, "Hi"))
        assert chunks[1].choices[0].delta.content == "Hi"

    async def test_empty_source(self) -> None:
        assert await _collect() == []


class TestToolStream:
    async def test_tool_call_deltas(self) -> None:
        chunks = await _collect(
            message_start(),
            text_block_start(0),
            text_delta(0, "Checking."),
            block_stop(0),
            tool_block_start(1, "toolu_1", "get_weather"),
            json_delta(1, ""),
            json_delta(1, '{"city": '),
            json_delta(1, '"Paris"}'),
            block_stop(1),
            tool_block_start(2, "toolu_2", "get_time"),
            json_delta(2, "{}"),
            message_delta("tool_use"),
        )

        tool_chunks = [c for c in chunks if c.choices[0].delta.tool_calls]
        assert len(tool_chunks) == 5

        start = tool_chunks[0].choices[0].delta.tool_calls
        assert start is not None
        assert start[0].index == 0
        assert start[0].id == "toolu_1"
        assert start[0].type == "function"
        assert start[0].function.name == "get_weather"
        assert start[0].function.arguments == ""

        args = "".join(
            c.choices[0].delta.tool_calls[0].function.arguments or ""  # type: ignore[index]
            for c in tool_chunks[1:3]
        )
        assert args == '{"city": "Paris"}'
        assert tool_chunks[1].choices[0].delta.tool_calls[0].id is None  # type: ignore[index]

        second = tool_chunks[3].choices[0].delta.tool_calls
        assert second is not None
        assert second[0].index == 1
        assert second[0].function.name == "get_time"

        assert chunks[-1].choices[0].finish_reason == "tool_calls"


class TestLaziness:
    async def test_chunks_produced_incrementally(self) -> None:
        consumed: list[str] = []

        async def source() -> AsyncIterator[SimpleNamespace]:
            for event in (message_start(), text_delta(0, "a"), message_delta("end_turn")):
                consumed.append(event.type)
                yield event

        stream = stream_chunks(source(), CREATED)
        first = await stream.__anext__()

        assert first.choices[0].delta.role == "assistant"
        assert consumed == ["message_start"]
        await stream.aclose()
