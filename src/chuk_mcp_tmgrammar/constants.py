"""
Constants and enums for the grammar system.

No magic strings - use enums for constrained values.
"""

from enum import Enum


class PatternKind(str, Enum):
    """Discriminant for the pattern variants."""

    MATCH = "match"
    BEGIN_END = "begin_end"
    INCLUDE = "include"


class IncludeKind(str, Enum):
    """
    Reference forms an include value can take.

    Only the authoring form (EXTERNAL) is rewritten before emission.
    """

    REPOSITORY = "repository"  # #name
    EXTERNAL = "external"  # !scope.name
    SELF = "self"  # $self
    OTHER = "other"  # anything else, emitted verbatim


class OutputFormat(str, Enum):
    """Document formats the emitter can produce."""

    YAML = "yaml"
    JSON = "json"


# Include markers
REPOSITORY_MARKER = "#"
EXTERNAL_MARKER = "!"
SELF_REFERENCE = "$self"

# Authoring file suffixes recognized by the loader
GRAMMAR_SUFFIXES = (".yaml", ".yml", ".json")

# Suffix appended to exported grammar files
EXPORT_SUFFIX = ".tmLanguage"


class ErrorMessages:
    """Standardized error messages."""

    GRAMMAR_NOT_FOUND = "Grammar '{name}' not found."
    DANGLING_REFERENCE = "Include '{reference}' has no matching repository entry."
    UNKNOWN_FORMAT = "Unknown output format: '{fmt}'. Expected 'yaml' or 'json'."
    INVALID_SHAPE = "Expected a pattern, got {type_name}."


class SuccessMessages:
    """Standardized success messages."""

    GRAMMAR_RENDERED = "Rendered grammar '{name}' as {fmt}."
    GRAMMAR_EXPORTED = "Exported grammar '{name}' to {path}."
