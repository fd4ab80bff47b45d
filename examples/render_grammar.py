#!/usr/bin/env python3
"""
Example: Building and rendering a grammar.

This demonstrates building a grammar from typed patterns, validating
it, and rendering it to YAML and JSON. External includes written as
'!scope.name' are emitted as plain scope names.

Usage:
    python examples/render_grammar.py
"""

import tempfile
from pathlib import Path

from chuk_mcp_tmgrammar import (
    BeginEndPattern,
    Capture,
    Grammar,
    GrammarEmitter,
    GrammarReferenceError,
    IncludePattern,
    MatchPattern,
    validate_grammar,
)


def build_grammar() -> Grammar:
    """A small grammar for an INI-like config format."""
    return Grammar(
        name="Config",
        scope_name="source.config",
        file_types=["cfg", "conf"],
        uuid="0c1b2a3d-4e5f-4a6b-8c7d-9e0f1a2b3c4d",
        patterns=[
            IncludePattern(include="#comments"),
            IncludePattern(include="#sections"),
            IncludePattern(include="#entries"),
        ],
        repository={
            "comments": MatchPattern(name="comment.line.semicolon.config", match=r";.*$"),
            "sections": MatchPattern(
                match=r"^\s*(\[)([^\]]+)(\])",
                captures={
                    "1": Capture(name="punctuation.definition.section.begin.config"),
                    "2": Capture(name="entity.name.section.config"),
                    "3": Capture(name="punctuation.definition.section.end.config"),
                },
            ),
            "entries": BeginEndPattern(
                begin=r"^\s*([\w.-]+)\s*(=)",
                begin_captures={
                    "1": Capture(name="variable.other.key.config"),
                    "2": Capture(name="keyword.operator.assignment.config"),
                },
                end=r"$",
                content_name="string.unquoted.value.config",
                patterns=[IncludePattern(include="!source.shell")],
            ),
        },
    )


def main() -> None:
    """Demonstrate rendering."""
    print("TextMate Grammar Rendering Demo")
    print("=" * 40)
    print()

    grammar = build_grammar()
    emitter = GrammarEmitter()

    # Validate first to see non-fatal findings
    result = validate_grammar(grammar)
    print(f"Validation: {result}")
    print()

    # Render YAML
    print("YAML output:")
    print(emitter.render(grammar, "yaml").text)

    # Write JSON for an editor extension
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "config.tmLanguage.json"
        emitter.write(grammar, path)
        print(f"Wrote {path} ({path.stat().st_size} bytes)")
    print()

    # A dangling reference aborts rendering
    broken = grammar.model_copy(update={"patterns": [IncludePattern(include="#values")]})
    try:
        emitter.render(broken)
    except GrammarReferenceError as e:
        print(f"Render refused: {e}")


if __name__ == "__main__":
    main()
