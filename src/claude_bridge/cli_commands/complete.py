"""``claude-bridge complete`` — run one chat completion from the command line."""

from __future__ import annotations

import asyncio
import sys
from typing import Any

import click

from claude_bridge.cli_commands._output import (
    console,
    enable_verbose_logging,
    print_chunk,
    print_completion,
)

DEFAULT_MODEL = "claude-3-5-sonnet-20241022"


@click.command()
@click.argument("prompt")
@click.option("--model", "-m", default=DEFAULT_MODEL, show_default=True, help="Model identifier.")
@click.option("--system", "-s", default=None, help="System prompt.")
@click.option("--max-tokens", type=int, default=None, help="Maximum tokens to generate.")
@click.option("--temperature", type=float, default=None, help="Temperature on the 0-2 scale.")
@click.option("--top-p", type=float, default=None, help="Nucleus sampling probability.")
@click.option("--stop", multiple=True, help="Stop sequence (repeatable).")
@click.option("--stream", is_flag=True, help="Stream the response as it is generated.")
@click.option("--api-key", default=None, help="Anthropic API key (defaults to ANTHROPIC_API_KEY).")
@click.option("--json", "as_json", is_flag=True, help="Output raw JSON.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.option("--telemetry", is_flag=True, help="Export tracing spans to the console.")
def complete(
    prompt: str,
    model: str,
    system: str | None,
    max_tokens: int | None,
    temperature: float | None,
    top_p: float | None,
    stop: tuple[str, ...],
    stream: bool,
    api_key: str | None,
    as_json: bool,
    verbose: bool,
    telemetry: bool,
) -> None:
    """Send PROMPT as a user message and print the reply."""
    from claude_bridge.core.interface.config import HandlerConfig
    from claude_bridge.core.interface.errors import CompletionError
    from claude_bridge.core.interface.handler import AnthropicCompatibleHandler

    if verbose:
        enable_verbose_logging()
    if telemetry:
        from claude_bridge.utils.telemetry import configure_telemetry

        try:
            configure_telemetry()
        except ImportError as exc:
            console.print(f"[yellow]Telemetry disabled:[/yellow] {exc}")

    messages: list[dict[str, Any]] = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": prompt})

    body: dict[str, Any] = {"model": model, "messages": messages}
    if max_tokens is not None:
        body["max_tokens"] = max_tokens
    if temperature is not None:
        body["temperature"] = temperature
    if top_p is not None:
        body["top_p"] = top_p
    if stop:
        body["stop"] = list(stop)
    if stream:
        body["stream"] = True

    handler = AnthropicCompatibleHandler(HandlerConfig(api_key=api_key))

    try:
        asyncio.run(_run(handler, body, as_json=as_json))
    except CompletionError as exc:
        console.print(f"[red]Request error:[/red] {exc}")
        sys.exit(1)
    except Exception as exc:
        console.print(f"[red]Provider error:[/red] {exc}")
        sys.exit(1)


async def _run(handler: Any, body: dict[str, Any], *, as_json: bool) -> None:
    from claude_bridge.core.interface.models import ChatCompletion

    result = await handler.create(body)
    if isinstance(result, ChatCompletion):
        print_completion(result, as_json=as_json)
        return

    async for chunk in result:
        print_chunk(chunk, as_json=as_json)
