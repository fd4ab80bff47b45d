"""
Tests for the grammar emitter.

Tests cover:
- End-to-end YAML and JSON rendering
- Reference validation aborting the render
- Order preservation and required-field emission
- Writing files only after a successful render
"""

import json
from pathlib import Path

import pytest
import yaml

from chuk_mcp_tmgrammar.constants import OutputFormat
from chuk_mcp_tmgrammar.errors import GrammarReferenceError, GrammarShapeError
from chuk_mcp_tmgrammar.models import (
    BeginEndPattern,
    Capture,
    Grammar,
    IncludePattern,
    MatchPattern,
)
from chuk_mcp_tmgrammar.renderer import (
    GrammarEmitter,
    format_for_path,
    parse_format,
    render_grammar,
)


class TestEndToEnd:
    """Tests for complete renders."""

    def test_demo_yaml(self, demo_grammar: Grammar) -> None:
        """The demo grammar renders to the minimal document."""
        text = render_grammar(demo_grammar, "yaml")
        assert yaml.safe_load(text) == {
            "scopeName": "source.demo",
            "firstLineMatch": "",
            "injectionSelector": "",
            "uuid": "u1",
            "patterns": [{"include": "#main"}],
            "repository": {"main": {"name": "keyword", "match": "\\bif\\b"}},
        }
        assert "scopeName: source.demo" in text
        assert "uuid: u1" in text

    def test_demo_json(self, demo_grammar: Grammar) -> None:
        """JSON output carries the same document."""
        text = render_grammar(demo_grammar, OutputFormat.JSON)
        document = json.loads(text)
        assert document["repository"]["main"] == {"name": "keyword", "match": "\\bif\\b"}
        assert list(document) == [
            "scopeName",
            "firstLineMatch",
            "injectionSelector",
            "uuid",
            "patterns",
            "repository",
        ]

    def test_absent_optional_keys(self, demo_grammar: Grammar) -> None:
        """Unset optional keys never appear."""
        document = GrammarEmitter().to_document(demo_grammar)
        for key in ("$schema", "name", "fileTypes", "foldingStartMarker", "foldingStopMarker"):
            assert key not in document

    def test_external_include_rewritten(self) -> None:
        """Authoring-form includes are emitted without the marker."""
        grammar = Grammar(
            scope_name="source.x",
            uuid="u1",
            patterns=[
                IncludePattern(include="!foo.bar"),
                IncludePattern(include="#foo"),
                IncludePattern(include="$self"),
            ],
            repository={"foo": MatchPattern(match="foo")},
        )
        document = GrammarEmitter().to_document(grammar)
        assert document["patterns"] == [
            {"include": "foo.bar"},
            {"include": "#foo"},
            {"include": "$self"},
        ]

    def test_nested_patterns_rendered(self) -> None:
        """Captures and nested patterns render as plain mappings."""
        grammar = Grammar(
            scope_name="source.x",
            uuid="u1",
            patterns=[
                BeginEndPattern(
                    name="string.quoted.double",
                    begin='"',
                    begin_captures={"0": Capture(name="punctuation.begin")},
                    end='"',
                    end_captures={},
                    patterns=[
                        MatchPattern(name="constant.character.escape", match="\\\\."),
                        IncludePattern(include="!source.interp"),
                    ],
                )
            ],
        )
        document = GrammarEmitter().to_document(grammar)
        assert document["patterns"][0] == {
            "name": "string.quoted.double",
            "begin": '"',
            "beginCaptures": {"0": {"name": "punctuation.begin"}},
            "end": '"',
            "patterns": [
                {"name": "constant.character.escape", "match": "\\\\."},
                {"include": "source.interp"},
            ],
        }

    def test_required_empty_fields_emitted(self) -> None:
        """Empty required strings are still written."""
        grammar = Grammar(scope_name="", uuid="", first_line_match="")
        document = yaml.safe_load(render_grammar(grammar))
        assert document == {
            "scopeName": "",
            "firstLineMatch": "",
            "injectionSelector": "",
            "uuid": "",
        }

    def test_file_types(self) -> None:
        """Empty fileTypes is dropped, a populated one is kept."""
        empty = Grammar(scope_name="source.x", uuid="u1", file_types=[])
        single = Grammar(scope_name="source.x", uuid="u1", file_types=["py"])
        assert "fileTypes" not in yaml.safe_load(render_grammar(empty))
        assert yaml.safe_load(render_grammar(single))["fileTypes"] == ["py"]

    def test_input_not_mutated(self) -> None:
        """Rendering leaves the input grammar untouched."""
        grammar = Grammar(
            scope_name="source.x", uuid="u1", patterns=[IncludePattern(include="!a.b")]
        )
        render_grammar(grammar)
        assert grammar.patterns[0].include == "!a.b"


class TestOrdering:
    """Tests for pattern order preservation."""

    def test_pattern_order_preserved(self) -> None:
        """Patterns render in authored order, run after run."""
        grammar = Grammar(
            scope_name="source.x",
            uuid="u1",
            patterns=[
                MatchPattern(name="c", match="c"),
                MatchPattern(name="a", match="a"),
                MatchPattern(name="b", match="b"),
            ],
        )
        emitter = GrammarEmitter()
        first = emitter.render(grammar).text
        second = emitter.render(grammar).text
        assert first == second
        names = [p["name"] for p in yaml.safe_load(first)["patterns"]]
        assert names == ["c", "a", "b"]

    def test_duplicates_preserved(self) -> None:
        """Repeated patterns are not deduplicated."""
        include = IncludePattern(include="$self")
        grammar = Grammar(scope_name="source.x", uuid="u1", patterns=[include, include])
        assert len(GrammarEmitter().to_document(grammar)["patterns"]) == 2


class TestReferenceValidation:
    """Tests for dangling reference handling."""

    def test_missing_reference_fails(self) -> None:
        """A #name with no repository entry aborts the render."""
        grammar = Grammar(
            scope_name="source.x", uuid="u1", patterns=[IncludePattern(include="#missing")]
        )
        with pytest.raises(GrammarReferenceError) as excinfo:
            render_grammar(grammar)
        assert excinfo.value.reference == "#missing"
        assert excinfo.value.location == "patterns/0"

    def test_present_reference_succeeds(self) -> None:
        """The same grammar with the entry renders."""
        grammar = Grammar(
            scope_name="source.x",
            uuid="u1",
            patterns=[IncludePattern(include="#missing")],
            repository={"missing": MatchPattern(match="x")},
        )
        assert "#missing" in render_grammar(grammar)

    def test_nested_missing_reference(self) -> None:
        """Dangling references inside repository blocks are found."""
        grammar = Grammar(
            scope_name="source.x",
            uuid="u1",
            repository={
                "block": BeginEndPattern(
                    begin="a", end="b", patterns=[IncludePattern(include="#gone")]
                )
            },
        )
        with pytest.raises(GrammarReferenceError, match="#gone"):
            render_grammar(grammar)

    def test_all_dangling_references_reported(self) -> None:
        """Every dangling reference is listed on the error."""
        grammar = Grammar(
            scope_name="source.x",
            uuid="u1",
            patterns=[IncludePattern(include="#a"), IncludePattern(include="#b")],
        )
        with pytest.raises(GrammarReferenceError) as excinfo:
            render_grammar(grammar)
        assert excinfo.value.dangling == [("#a", "patterns/0"), ("#b", "patterns/1")]
        assert "1 more" in str(excinfo.value)

    def test_cyclic_references_render(self) -> None:
        """Rules including each other are legal."""
        grammar = Grammar(
            scope_name="source.x",
            uuid="u1",
            patterns=[IncludePattern(include="#a")],
            repository={
                "a": BeginEndPattern(begin="a", end="b", patterns=[IncludePattern(include="#a")]),
            },
        )
        document = GrammarEmitter().to_document(grammar)
        assert document["repository"]["a"]["patterns"] == [{"include": "#a"}]

    def test_unpopulated_patterns_dropped(self) -> None:
        """Patterns with no populated fields are left out of lists and the repository."""
        stub = MatchPattern.model_construct(match=None)
        grammar = Grammar(
            scope_name="source.x",
            uuid="u1",
            patterns=[MatchPattern(match="x"), stub],
            repository={"stub": stub, "kw": MatchPattern(match="y")},
        )
        document = GrammarEmitter().to_document(grammar)
        assert document["patterns"] == [{"match": "x"}]
        assert document["repository"] == {"kw": {"match": "y"}}

    def test_shape_error(self) -> None:
        """A non-pattern value aborts the render."""
        grammar = Grammar.model_construct(
            scope_name="source.x", uuid="u1", first_line_match="", patterns=["oops"]
        )
        with pytest.raises(GrammarShapeError):
            render_grammar(grammar)

    def test_errors_are_value_errors(self) -> None:
        """Pipeline errors can be caught as ValueError."""
        grammar = Grammar(scope_name="source.x", uuid="u1", patterns=[IncludePattern(include="#x")])
        with pytest.raises(ValueError):
            render_grammar(grammar)


class TestFormats:
    """Tests for output format selection."""

    def test_parse_format(self) -> None:
        """Formats are accepted as enum or case-insensitive string."""
        assert parse_format("YAML") == OutputFormat.YAML
        assert parse_format(OutputFormat.JSON) == OutputFormat.JSON

    def test_unknown_format(self, demo_grammar: Grammar) -> None:
        """Unknown formats are rejected."""
        with pytest.raises(ValueError, match="Unknown output format"):
            render_grammar(demo_grammar, "plist")

    def test_format_for_path(self) -> None:
        """File suffix picks the format."""
        assert format_for_path(Path("x.tmLanguage.json")) == OutputFormat.JSON
        assert format_for_path(Path("x.tmLanguage.yaml")) == OutputFormat.YAML


class TestWrite:
    """Tests for writing rendered grammars."""

    def test_write_json(self, demo_grammar: Grammar, temp_dir: Path) -> None:
        """Writing picks the format from the suffix."""
        path = temp_dir / "out" / "demo.tmLanguage.json"
        result = GrammarEmitter().write(demo_grammar, path)
        assert result.output_format == OutputFormat.JSON
        assert json.loads(path.read_text())["scopeName"] == "source.demo"

    def test_failed_render_writes_nothing(self, temp_dir: Path) -> None:
        """No file is created when validation fails."""
        grammar = Grammar(
            scope_name="source.x", uuid="u1", patterns=[IncludePattern(include="#missing")]
        )
        path = temp_dir / "bad.tmLanguage.yaml"
        with pytest.raises(GrammarReferenceError):
            GrammarEmitter().write(grammar, path)
        assert not path.exists()

    def test_render_result_warnings(self) -> None:
        """Non-fatal findings ride along with the result."""
        grammar = Grammar(scope_name="not a scope", uuid="u1")
        result = GrammarEmitter().render(grammar)
        assert any("INVALID_SCOPE_NAME" in w for w in result.warnings)
