"""
Include rewriting - authoring convention to on-disk convention.

Grammars are authored with ``!scope.name`` for includes that point at
other grammars. Editors expect the bare scope name, so exactly one
leading ``!`` is dropped. ``#name`` and ``$self`` pass through.
"""

from __future__ import annotations

from chuk_mcp_tmgrammar.constants import EXTERNAL_MARKER
from chuk_mcp_tmgrammar.models.grammar import Grammar, IncludePattern, Pattern
from chuk_mcp_tmgrammar.models.traversal import map_patterns


def rewrite_include(pattern: IncludePattern) -> IncludePattern:
    """
    Strip the external marker from a single include.

    Only one character is removed, so ``!!x`` becomes ``!x``. For every
    other value a second application is a no-op.
    """
    if pattern.include.startswith(EXTERNAL_MARKER):
        return pattern.model_copy(update={"include": pattern.include[1:]})
    return pattern


def _rewrite_if_include(pattern: Pattern) -> Pattern:
    if isinstance(pattern, IncludePattern):
        return rewrite_include(pattern)
    return pattern


def rewrite_includes(grammar: Grammar) -> Grammar:
    """Apply rewrite_include to every include reachable from the grammar."""
    return map_patterns(grammar, _rewrite_if_include)
