"""claude-bridge CLI entrypoint."""

from __future__ import annotations

import click

from claude_bridge import __version__


@click.group()
@click.version_option(version=__version__, prog_name="claude-bridge")
def main() -> None:
    """claude-bridge — OpenAI-style chat completions on Anthropic models."""


# Register subcommands
from claude_bridge.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
