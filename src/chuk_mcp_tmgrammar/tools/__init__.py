"""
MCP tool implementations.

Tools are organized by domain:
- grammars - Grammar discovery, description and validation
- rendering - YAML/JSON rendering and export
"""

from chuk_mcp_tmgrammar.tools.grammars import register_grammar_tools
from chuk_mcp_tmgrammar.tools.rendering import register_rendering_tools

__all__ = [
    "register_grammar_tools",
    "register_rendering_tools",
]
