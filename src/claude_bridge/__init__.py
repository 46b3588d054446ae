"""claude-bridge — OpenAI-compatible chat completions served by Anthropic."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from claude_bridge.core.interface.config import HandlerConfig as HandlerConfig
    from claude_bridge.core.interface.handler import (
        AnthropicCompatibleHandler as AnthropicCompatibleHandler,
    )

_LAZY_EXPORTS = {
    "AnthropicCompatibleHandler": "claude_bridge.core.interface.handler",
    "HandlerConfig": "claude_bridge.core.interface.config",
}


def __getattr__(name: str) -> object:
    module_path = _LAZY_EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'claude_bridge' has no attribute {name!r}")
