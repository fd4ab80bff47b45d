"""
Pydantic models for the grammar system.

This module provides:
- Grammar: Complete syntax-highlighting definition
- MatchPattern / BeginEndPattern / IncludePattern: Pattern variants
- Pattern: Tagged union over the variants
- Capture: Scope for a numbered capture group
"""

from chuk_mcp_tmgrammar.models.grammar import (
    PATTERN_TYPES,
    BeginEndPattern,
    Capture,
    Grammar,
    GrammarMetadata,
    IncludePattern,
    MatchPattern,
    NamedPattern,
    Pattern,
)

__all__ = [
    "PATTERN_TYPES",
    "BeginEndPattern",
    "Capture",
    "Grammar",
    "GrammarMetadata",
    "IncludePattern",
    "MatchPattern",
    "NamedPattern",
    "Pattern",
]
