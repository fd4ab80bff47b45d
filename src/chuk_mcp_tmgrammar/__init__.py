"""
TextMate grammar generation.

Build a Grammar from typed pattern models, then render it:

    from chuk_mcp_tmgrammar import Grammar, IncludePattern, MatchPattern, render_grammar

    grammar = Grammar(
        scope_name="source.demo",
        uuid="u1",
        patterns=[IncludePattern(include="#main")],
        repository={"main": MatchPattern(name="keyword", match=r"\\bif\\b")},
    )
    print(render_grammar(grammar, "yaml"))
"""

from chuk_mcp_tmgrammar.constants import IncludeKind, OutputFormat
from chuk_mcp_tmgrammar.errors import GrammarError, GrammarReferenceError, GrammarShapeError
from chuk_mcp_tmgrammar.models import (
    BeginEndPattern,
    Capture,
    Grammar,
    IncludePattern,
    MatchPattern,
    NamedPattern,
    Pattern,
)
from chuk_mcp_tmgrammar.renderer import (
    GrammarEmitter,
    RenderResult,
    render_grammar,
    rewrite_include,
    rewrite_includes,
)
from chuk_mcp_tmgrammar.validation import ValidationResult, validate_grammar

__all__ = [
    "BeginEndPattern",
    "Capture",
    "Grammar",
    "GrammarEmitter",
    "GrammarError",
    "GrammarReferenceError",
    "GrammarShapeError",
    "IncludeKind",
    "IncludePattern",
    "MatchPattern",
    "NamedPattern",
    "OutputFormat",
    "Pattern",
    "RenderResult",
    "ValidationResult",
    "render_grammar",
    "rewrite_include",
    "rewrite_includes",
    "validate_grammar",
]
