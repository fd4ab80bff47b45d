"""
Grammar model - the TextMate grammar object graph.

A Grammar contains:
- Identity (scopeName, uuid, display name, file types)
- Top-level patterns, tried in order by the editor
- A repository of named patterns referenced via ``#name`` includes

Patterns are a tagged union of three variants. Match and begin/end
patterns share a ``name`` field, exposed through the NamedPattern
protocol rather than a common base class.

All models are frozen; transforms produce new instances.
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Protocol, Union, runtime_checkable

from pydantic import BaseModel, Discriminator, Field, Tag, field_validator

from chuk_mcp_tmgrammar.constants import (
    EXTERNAL_MARKER,
    REPOSITORY_MARKER,
    SELF_REFERENCE,
    IncludeKind,
    PatternKind,
)


class Capture(BaseModel):
    """Scope assignment for a single numbered capture group."""

    name: str = Field(..., description="Scope name for the captured text")

    model_config = {"frozen": True, "extra": "forbid"}

    OMIT_WHEN_EMPTY: ClassVar[frozenset[str]] = frozenset()


def _group_keys_as_str(value: Any) -> Any:
    """YAML reads unquoted group numbers as ints; captures are keyed by string."""
    if isinstance(value, dict):
        return {str(key): capture for key, capture in value.items()}
    return value


class MatchPattern(BaseModel):
    """
    A single-line rule: one regex, optionally with per-group scopes.
    """

    name: str | None = Field(None, description="Scope name for matched text")
    match: str = Field("", description="Oniguruma regular expression")
    captures: dict[str, Capture] | None = Field(None, description="Group number to capture")

    model_config = {"frozen": True, "extra": "forbid"}

    pattern_kind: ClassVar[PatternKind] = PatternKind.MATCH
    OMIT_WHEN_EMPTY: ClassVar[frozenset[str]] = frozenset({"name", "captures"})

    @field_validator("captures", mode="before")
    @classmethod
    def normalize_capture_keys(cls, v: Any) -> Any:
        """Accept unquoted group numbers."""
        return _group_keys_as_str(v)


class BeginEndPattern(BaseModel):
    """
    A multi-line block rule delimited by a begin and an end regex.

    Nested patterns apply only between the delimiters. ``captures`` is
    shorthand for using the same captures on both begin and end.
    """

    name: str | None = Field(None, description="Scope name for the whole block")
    begin: str = Field(..., description="Regex opening the block")
    begin_captures: dict[str, Capture] | None = Field(None, alias="beginCaptures")
    end: str = Field(..., description="Regex closing the block")
    end_captures: dict[str, Capture] | None = Field(None, alias="endCaptures")
    captures: dict[str, Capture] | None = Field(None, description="Captures for begin and end")
    content_name: str | None = Field(
        None, alias="contentName", description="Scope for text between begin and end"
    )
    patterns: list[Pattern] | None = Field(None, description="Rules applied inside the block")

    model_config = {"frozen": True, "extra": "forbid", "populate_by_name": True}

    pattern_kind: ClassVar[PatternKind] = PatternKind.BEGIN_END
    OMIT_WHEN_EMPTY: ClassVar[frozenset[str]] = frozenset(
        {
            "name",
            "begin_captures",
            "end_captures",
            "captures",
            "content_name",
            "patterns",
        }
    )

    @field_validator("begin_captures", "end_captures", "captures", mode="before")
    @classmethod
    def normalize_capture_keys(cls, v: Any) -> Any:
        """Accept unquoted group numbers."""
        return _group_keys_as_str(v)


class IncludePattern(BaseModel):
    """
    A reference to another rule set.

    Reference forms:
    - ``#name``: entry in this grammar's repository (must exist)
    - ``!scope.name``: another grammar; the ``!`` is dropped on emission
    - ``$self``: the grammar being defined
    """

    include: str = Field(..., description="Reference to another rule set")

    model_config = {"frozen": True, "extra": "forbid"}

    pattern_kind: ClassVar[PatternKind] = PatternKind.INCLUDE
    OMIT_WHEN_EMPTY: ClassVar[frozenset[str]] = frozenset()

    @property
    def reference_kind(self) -> IncludeKind:
        """Classify the include value by its leading marker."""
        if self.include.startswith(REPOSITORY_MARKER):
            return IncludeKind.REPOSITORY
        if self.include.startswith(EXTERNAL_MARKER):
            return IncludeKind.EXTERNAL
        if self.include == SELF_REFERENCE:
            return IncludeKind.SELF
        return IncludeKind.OTHER

    @property
    def target(self) -> str:
        """The referenced name with any leading marker removed."""
        if self.reference_kind in (IncludeKind.REPOSITORY, IncludeKind.EXTERNAL):
            return self.include[1:]
        return self.include


@runtime_checkable
class NamedPattern(Protocol):
    """Capability shared by patterns that assign a scope name."""

    name: str | None


def _pattern_tag(value: Any) -> str | None:
    """Pick the pattern variant for raw data or an existing instance."""
    if isinstance(value, dict):
        if "include" in value:
            return PatternKind.INCLUDE.value
        if "begin" in value or "end" in value:
            return PatternKind.BEGIN_END.value
        return PatternKind.MATCH.value

    kind = getattr(value, "pattern_kind", None)
    if isinstance(kind, PatternKind):
        return kind.value
    return None


Pattern = Annotated[
    Union[
        Annotated[MatchPattern, Tag(PatternKind.MATCH.value)],
        Annotated[BeginEndPattern, Tag(PatternKind.BEGIN_END.value)],
        Annotated[IncludePattern, Tag(PatternKind.INCLUDE.value)],
    ],
    Discriminator(_pattern_tag),
]

PATTERN_TYPES = (MatchPattern, BeginEndPattern, IncludePattern)

BeginEndPattern.model_rebuild()


class Grammar(BaseModel):
    """
    A complete syntax-highlighting definition for one language.

    Field order matches the key order of the emitted document.
    """

    schema_uri: str | None = Field(None, alias="$schema", description="JSON schema URI")
    name: str | None = Field(None, description="Display name")
    scope_name: str = Field(..., alias="scopeName", description="Root scope, e.g. source.foo")
    file_types: list[str] | None = Field(None, alias="fileTypes", description="File extensions")
    folding_start_marker: str | None = Field(None, alias="foldingStartMarker")
    folding_stop_marker: str | None = Field(None, alias="foldingStopMarker")
    first_line_match: str = Field("", alias="firstLineMatch")
    injection_selector: str = Field("", alias="injectionSelector")
    uuid: str = Field(..., description="Stable grammar identifier")
    patterns: list[Pattern] | None = Field(None, description="Top-level rules, in order")
    repository: dict[str, Pattern] | None = Field(None, description="Named reusable rules")

    model_config = {"frozen": True, "extra": "forbid", "populate_by_name": True}

    OMIT_WHEN_EMPTY: ClassVar[frozenset[str]] = frozenset(
        {
            "schema_uri",
            "name",
            "file_types",
            "folding_start_marker",
            "folding_stop_marker",
            "patterns",
            "repository",
        }
    )

    def repository_names(self) -> set[str]:
        """Names defined in the repository."""
        return set(self.repository or {})

    def get_rule(self, name: str) -> Pattern | None:
        """Look up a repository entry by name (without the ``#``)."""
        return (self.repository or {}).get(name)


class GrammarMetadata(BaseModel):
    """
    Lightweight grammar metadata for listing/discovery.
    """

    name: str = Field(..., description="Grammar identifier (file stem)")
    scope_name: str = Field(..., description="Root scope name")
    display_name: str | None = Field(None, description="Human-readable name")
    file_types: list[str] = Field(default_factory=list, description="File extensions")
    pattern_count: int = Field(0, description="Number of top-level patterns")
    repository_count: int = Field(0, description="Number of repository entries")
    path: str | None = Field(None, description="Path to grammar file")

    @classmethod
    def from_grammar(cls, name: str, grammar: Grammar, path: str | None = None) -> GrammarMetadata:
        """Create metadata from a full grammar."""
        return cls(
            name=name,
            scope_name=grammar.scope_name,
            display_name=grammar.name,
            file_types=list(grammar.file_types or []),
            pattern_count=len(grammar.patterns or []),
            repository_count=len(grammar.repository or {}),
            path=path,
        )
