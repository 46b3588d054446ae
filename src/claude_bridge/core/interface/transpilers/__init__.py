"""Provider-specific transpiler implementations."""

from claude_bridge.core.interface.transpilers.anthropic import AnthropicTranspiler
from claude_bridge.core.interface.transpilers.anthropic_stream import stream_chunks

__all__ = ["AnthropicTranspiler", "stream_chunks"]
