"""Shared CLI output formatters."""

from __future__ import annotations

import json
import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from claude_bridge.core.interface.models import ChatCompletion, ChatCompletionChunk  # noqa: TC001

console = Console()
err_console = Console(stderr=True)


def enable_verbose_logging() -> None:
    """Send DEBUG logs to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def print_completion(completion: ChatCompletion, *, as_json: bool = False) -> None:
    """Pretty-print a non-streaming completion."""
    if as_json:
        console.print_json(completion.model_dump_json())
        return

    choice = completion.choices[0]
    if choice.message.content:
        console.print(choice.message.content, markup=False, highlight=False)
    for tc in choice.message.tool_calls or []:
        console.print(f"[cyan]tool call[/cyan] {tc.function.name}({tc.function.arguments})")

    console.print(f"\n[dim]finish_reason={choice.finish_reason}[/dim]", end="")
    if completion.usage is not None:
        console.print(
            f"[dim] tokens: prompt={completion.usage.prompt_tokens} "
            f"completion={completion.usage.completion_tokens}[/dim]",
            end="",
        )
    console.print()


def print_chunk(chunk: ChatCompletionChunk, *, as_json: bool = False) -> None:
    """Print one streaming chunk: raw JSON lines, or content as it arrives."""
    if as_json:
        console.print(chunk.model_dump_json(exclude_none=True), markup=False, highlight=False)
        return

    choice = chunk.choices[0]
    if choice.delta.content:
        console.print(choice.delta.content, end="", markup=False, highlight=False)
    for tc in choice.delta.tool_calls or []:
        if tc.function.name:
            console.print(f"\n[cyan]tool call[/cyan] {tc.function.name}", end="")
        if tc.function.arguments:
            console.print(tc.function.arguments, end="", markup=False, highlight=False)
    if choice.finish_reason is not None:
        console.print(f"\n[dim]finish_reason={choice.finish_reason}[/dim]")


def print_models_table(defaults: dict[str, int], no_image_models: frozenset[str]) -> None:
    """Pretty-print the known models as a table."""
    table = Table(title="Known Models")
    table.add_column("Model", style="cyan")
    table.add_column("Default max_tokens", justify="right")
    table.add_column("Images")

    for model, max_tokens in defaults.items():
        table.add_row(model, str(max_tokens), "no" if model in no_image_models else "yes")

    console.print(table)


def print_models_json(defaults: dict[str, int], no_image_models: frozenset[str]) -> None:
    data = [
        {"model": model, "max_tokens": max_tokens, "images": model not in no_image_models}
        for model, max_tokens in defaults.items()
    ]
    console.print_json(json.dumps(data))
