"""
Rendering pipeline - turns grammar models into editor documents.

The pipeline:
    Grammar → validate → rewrite includes → prune empties → YAML/JSON
"""

from chuk_mcp_tmgrammar.renderer.emitter import (
    GrammarEmitter,
    RenderResult,
    format_for_path,
    parse_format,
    render_grammar,
)
from chuk_mcp_tmgrammar.renderer.pruning import OMIT, emitted_fields, should_omit
from chuk_mcp_tmgrammar.renderer.transforms import rewrite_include, rewrite_includes

__all__ = [
    "OMIT",
    "GrammarEmitter",
    "RenderResult",
    "emitted_fields",
    "format_for_path",
    "parse_format",
    "render_grammar",
    "rewrite_include",
    "rewrite_includes",
    "should_omit",
]
