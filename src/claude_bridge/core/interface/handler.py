"""AnthropicCompatibleHandler — standardized chat completions served by Anthropic.

Runs each request through validation, parameter mapping, dispatch and
response adaptation::

    handler = AnthropicCompatibleHandler(HandlerConfig(api_key="sk-ant-..."))
    completion = await handler.create(
        {"model": "claude-3-opus-20240229", "messages": [{"role": "user", "content": "hi"}]}
    )

    async for chunk in await handler.create({..., "stream": True}):
        ...

The handler does not run a generic model-name or feature-flag check:
Anthropic accepts any model identifier and every request feature, so
:func:`~claude_bridge.core.interface.validation.validate_inputs` is the only
validation applied.
"""

import logging
from collections.abc import AsyncIterator, Callable
from typing import Any

from anthropic import AsyncAnthropic
from opentelemetry.trace import Span

from claude_bridge.core.interface.config import HandlerConfig, resolve_api_key
from claude_bridge.core.interface.models import (
    ChatCompletion,
    ChatCompletionChunk,
    ChatCompletionRequest,
    CompletionUsage,
    NamedToolChoice,
)
from claude_bridge.core.interface.transpiler import Transpiler
from claude_bridge.core.interface.transpilers.anthropic import AnthropicTranspiler
from claude_bridge.core.interface.transpilers.anthropic_stream import stream_chunks
from claude_bridge.core.interface.validation import validate_inputs
from claude_bridge.utils.telemetry import (
    ATTR_FINISH_REASON,
    ATTR_MESSAGE_COUNT,
    ATTR_MODEL,
    ATTR_PROVIDER,
    ATTR_STREAM,
    ATTR_TOKENS_COMPLETION,
    ATTR_TOKENS_PROMPT,
    ATTR_TOKENS_TOTAL,
    ATTR_TOOL_CHOICE,
    get_tracer,
)
from claude_bridge.utils.timestamp import get_timestamp

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

ClientFactory = Callable[[str], Any]

CompletionResult = ChatCompletion | AsyncIterator[ChatCompletionChunk]


class AnthropicCompatibleHandler:
    """Serves standardized chat-completion requests through Anthropic.

    Args:
        config: Client options. Defaults to an empty config, which reads the
            API key from ``ANTHROPIC_API_KEY``.
        transpiler: Request/response converter. Defaults to
            :class:`AnthropicTranspiler`.
        client_factory: Builds the provider client from the resolved API key.
            Defaults to ``anthropic.AsyncAnthropic``.
    """

    def __init__(
        self,
        config: HandlerConfig | None = None,
        *,
        transpiler: Transpiler | None = None,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self.config = config or HandlerConfig()
        self.transpiler: Transpiler = transpiler or AnthropicTranspiler()
        self._client_factory = client_factory or self._default_client

    async def create(self, request: ChatCompletionRequest | dict[str, Any]) -> CompletionResult:
        """Run one chat completion.

        Returns a :class:`ChatCompletion`, or an async iterator of
        :class:`ChatCompletionChunk` when ``stream`` is exactly ``True``.

        Raises:
            InputError: The request cannot be served (images on a legacy
                model, no max_tokens default, unresolvable image).
            ConfigurationError: No API key is available.
            anthropic.APIError: Any failure of the provider call, unmodified.
        """
        if not isinstance(request, ChatCompletionRequest):
            request = ChatCompletionRequest.model_validate(request)

        validate_inputs(request)
        api_key = resolve_api_key(self.config.api_key)

        stream = request.stream is True
        provider_request = await self.transpiler.to_provider(request)
        params = provider_request.to_params()
        client = self._client_factory(api_key)

        logger.debug("Anthropic payload keys: %s", sorted(params))

        if stream:
            # The span outlives this call; _traced_chunks ends it.
            span = _tracer.start_span("completion.create")
            _set_request_attributes(span, request, params, stream)
            try:
                created = get_timestamp()
                events = await client.messages.create(**params)
            except Exception as exc:
                span.record_exception(exc)
                span.end()
                raise
            return _traced_chunks(stream_chunks(events, created), span)

        with _tracer.start_as_current_span("completion.create") as span:
            _set_request_attributes(span, request, params, stream)

            created = get_timestamp()
            message = await client.messages.create(**params)
            completion = self.transpiler.from_provider(message, created, request.tool_choice)

            _set_result_attributes(span, completion.usage, completion.choices[0].finish_reason)
            return completion

    def _default_client(self, api_key: str) -> AsyncAnthropic:
        kwargs: dict[str, Any] = {"api_key": api_key}
        if self.config.base_url:
            kwargs["base_url"] = self.config.base_url
        if self.config.timeout is not None:
            kwargs["timeout"] = self.config.timeout
        if self.config.max_retries is not None:
            kwargs["max_retries"] = self.config.max_retries
        return AsyncAnthropic(**kwargs)


async def _traced_chunks(
    chunks: AsyncIterator[ChatCompletionChunk], span: Span
) -> AsyncIterator[ChatCompletionChunk]:
    """Yield *chunks* unchanged, recording the terminal chunk on *span*.

    The span ends when the stream is exhausted, fails, or is closed early.
    """
    try:
        async for chunk in chunks:
            finish_reason = chunk.choices[0].finish_reason if chunk.choices else None
            if finish_reason is not None:
                _set_result_attributes(span, chunk.usage, finish_reason)
            yield chunk
    except Exception as exc:
        span.record_exception(exc)
        raise
    finally:
        span.end()


def _set_request_attributes(
    span: Span, request: ChatCompletionRequest, params: dict[str, Any], stream: bool
) -> None:
    span.set_attribute(ATTR_MODEL, request.model)
    span.set_attribute(ATTR_PROVIDER, "anthropic")
    span.set_attribute(ATTR_STREAM, stream)
    span.set_attribute(ATTR_MESSAGE_COUNT, len(params["messages"]))
    span.set_attribute(ATTR_TOOL_CHOICE, _describe_tool_choice(request))


def _set_result_attributes(
    span: Span, usage: CompletionUsage | None, finish_reason: str
) -> None:
    if usage is not None:
        span.set_attribute(ATTR_TOKENS_PROMPT, usage.prompt_tokens)
        span.set_attribute(ATTR_TOKENS_COMPLETION, usage.completion_tokens)
        span.set_attribute(ATTR_TOKENS_TOTAL, usage.total_tokens)
    span.set_attribute(ATTR_FINISH_REASON, finish_reason)


def _describe_tool_choice(request: ChatCompletionRequest) -> str:
    if isinstance(request.tool_choice, NamedToolChoice):
        return f"function:{request.tool_choice.function.name}"
    return request.tool_choice or "unset"
