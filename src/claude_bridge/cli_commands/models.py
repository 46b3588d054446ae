"""``claude-bridge models`` — list models with a known default max_tokens."""

from __future__ import annotations

import click

from claude_bridge.cli_commands._output import print_models_json, print_models_table


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def models(as_json: bool) -> None:
    """List models that can be used without an explicit --max-tokens."""
    from claude_bridge.core.interface.model_defaults import (
        DEFAULT_MAX_TOKENS,
        LEGACY_NO_IMAGE_MODELS,
    )

    if as_json:
        print_models_json(DEFAULT_MAX_TOKENS, LEGACY_NO_IMAGE_MODELS)
    else:
        print_models_table(DEFAULT_MAX_TOKENS, LEGACY_NO_IMAGE_MODELS)
