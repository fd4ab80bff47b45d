"""
Traversal over the pattern tree of a grammar.

The tree is finite: includes are references by name and are never
expanded, so a grammar whose rules include each other still walks in
a single pass.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

from chuk_mcp_tmgrammar.errors import GrammarShapeError
from chuk_mcp_tmgrammar.models.grammar import PATTERN_TYPES, BeginEndPattern, Grammar, Pattern

PatternTransform = Callable[[Pattern], Pattern]


def iter_patterns(grammar: Grammar) -> Iterator[tuple[str, Pattern]]:
    """
    Yield every pattern in the grammar with its location.

    Order is top-level patterns first, then repository entries, each
    depth-first through nested ``patterns``. Locations are slash paths
    such as ``repository/block/patterns/0``.

    Raises:
        GrammarShapeError: if a pattern slot holds a non-pattern value
    """
    for index, pattern in enumerate(grammar.patterns or []):
        yield from _walk(pattern, f"patterns/{index}")

    for key, pattern in (grammar.repository or {}).items():
        yield from _walk(pattern, f"repository/{key}")


def _walk(pattern: Any, location: str) -> Iterator[tuple[str, Pattern]]:
    _check_shape(pattern, location)
    yield location, pattern

    if isinstance(pattern, BeginEndPattern):
        for index, child in enumerate(pattern.patterns or []):
            yield from _walk(child, f"{location}/patterns/{index}")


def map_patterns(grammar: Grammar, transform: PatternTransform) -> Grammar:
    """
    Return a new grammar with ``transform`` applied to every pattern.

    Children are transformed before their parent. Sequence order and
    repository keys are preserved; absent fields stay absent.
    """

    def visit(pattern: Any, location: str) -> Pattern:
        _check_shape(pattern, location)
        if isinstance(pattern, BeginEndPattern) and pattern.patterns is not None:
            children = [
                visit(child, f"{location}/patterns/{index}")
                for index, child in enumerate(pattern.patterns)
            ]
            pattern = pattern.model_copy(update={"patterns": children})
        return transform(pattern)

    update: dict[str, Any] = {}
    if grammar.patterns is not None:
        update["patterns"] = [
            visit(pattern, f"patterns/{index}") for index, pattern in enumerate(grammar.patterns)
        ]
    if grammar.repository is not None:
        update["repository"] = {
            key: visit(pattern, f"repository/{key}") for key, pattern in grammar.repository.items()
        }

    return grammar.model_copy(update=update)


def _check_shape(value: Any, location: str) -> None:
    if not isinstance(value, PATTERN_TYPES):
        raise GrammarShapeError(value, location)
