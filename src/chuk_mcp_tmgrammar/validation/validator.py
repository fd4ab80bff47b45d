"""
Grammar Validator - validates grammar structure and references.

Validates:
- Every ``#name`` include resolves to a repository entry
- Scope name is a dot-separated identifier
- Capture keys are group numbers
- Include values are well formed
- Repository entries are used
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from chuk_mcp_tmgrammar.constants import EXTERNAL_MARKER, ErrorMessages, IncludeKind
from chuk_mcp_tmgrammar.errors import GrammarReferenceError
from chuk_mcp_tmgrammar.models.grammar import (
    BeginEndPattern,
    Capture,
    Grammar,
    IncludePattern,
    MatchPattern,
)
from chuk_mcp_tmgrammar.models.traversal import iter_patterns

SCOPE_NAME_RE = re.compile(r"^[A-Za-z0-9_+-]+(\.[A-Za-z0-9_+-]+)*$")


class ValidationSeverity(str, Enum):
    """Severity level for validation issues."""

    ERROR = "error"  # Prevents rendering
    WARNING = "warning"  # Rendering possible but output may misbehave
    INFO = "info"  # Informational only


@dataclass
class ValidationIssue:
    """A single validation issue."""

    severity: ValidationSeverity
    code: str
    message: str
    location: str | None = None
    subject: str | None = None

    def __str__(self) -> str:
        prefix = f"[{self.severity.value.upper()}]"
        location = f" at {self.location}" if self.location else ""
        return f"{prefix} {self.code}: {self.message}{location}"


class ValidationResult:
    """Result of validating a grammar."""

    def __init__(self) -> None:
        self.issues: list[ValidationIssue] = []

    def add_error(
        self, code: str, message: str, location: str | None = None, subject: str | None = None
    ) -> None:
        """Add an error issue."""
        self.issues.append(
            ValidationIssue(ValidationSeverity.ERROR, code, message, location, subject)
        )

    def add_warning(
        self, code: str, message: str, location: str | None = None, subject: str | None = None
    ) -> None:
        """Add a warning issue."""
        self.issues.append(
            ValidationIssue(ValidationSeverity.WARNING, code, message, location, subject)
        )

    def add_info(
        self, code: str, message: str, location: str | None = None, subject: str | None = None
    ) -> None:
        """Add an info issue."""
        self.issues.append(
            ValidationIssue(ValidationSeverity.INFO, code, message, location, subject)
        )

    @property
    def is_valid(self) -> bool:
        """Return True if no errors (warnings/info are OK)."""
        return not any(i.severity == ValidationSeverity.ERROR for i in self.issues)

    @property
    def errors(self) -> list[ValidationIssue]:
        """Get all error issues."""
        return [i for i in self.issues if i.severity == ValidationSeverity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        """Get all warning issues."""
        return [i for i in self.issues if i.severity == ValidationSeverity.WARNING]

    @property
    def info(self) -> list[ValidationIssue]:
        """Get all info issues."""
        return [i for i in self.issues if i.severity == ValidationSeverity.INFO]

    def raise_for_errors(self) -> None:
        """
        Raise if any dangling references were found.

        Raises:
            GrammarReferenceError: listing every dangling reference
        """
        dangling = [
            (issue.subject or "", issue.location)
            for issue in self.errors
            if issue.code == "DANGLING_REFERENCE"
        ]
        if dangling:
            raise GrammarReferenceError(dangling)

    def __str__(self) -> str:
        if not self.issues:
            return "Validation passed: no issues found"
        return "\n".join(str(issue) for issue in self.issues)


class GrammarValidator:
    """Validates grammar structure and references."""

    def validate(self, grammar: Grammar) -> ValidationResult:
        """
        Validate a grammar.

        Args:
            grammar: The grammar to validate

        Returns:
            ValidationResult with any issues found

        Raises:
            GrammarShapeError: if a pattern slot holds a non-pattern value
        """
        result = ValidationResult()

        self._validate_scope_name(grammar, result)
        self._validate_patterns(grammar, result)
        self._validate_repository(grammar, result)

        return result

    def _validate_scope_name(self, grammar: Grammar, result: ValidationResult) -> None:
        """Check the root scope name looks like ``source.foo``."""
        if not SCOPE_NAME_RE.match(grammar.scope_name):
            result.add_warning(
                "INVALID_SCOPE_NAME",
                f"Scope name is not a dot-separated identifier: {grammar.scope_name!r}",
                "scopeName",
                grammar.scope_name,
            )

    def _validate_patterns(self, grammar: Grammar, result: ValidationResult) -> None:
        """Check includes and captures across the whole pattern tree."""
        names = grammar.repository_names()

        for location, pattern in iter_patterns(grammar):
            if isinstance(pattern, IncludePattern):
                self._validate_include(pattern, location, names, result)
            elif isinstance(pattern, MatchPattern):
                self._validate_captures(pattern.captures, f"{location}/captures", result)
            elif isinstance(pattern, BeginEndPattern):
                self._validate_captures(pattern.captures, f"{location}/captures", result)
                self._validate_captures(
                    pattern.begin_captures, f"{location}/beginCaptures", result
                )
                self._validate_captures(pattern.end_captures, f"{location}/endCaptures", result)

    def _validate_include(
        self,
        pattern: IncludePattern,
        location: str,
        names: set[str],
        result: ValidationResult,
    ) -> None:
        """Check a single include reference."""
        if not pattern.include:
            result.add_warning(
                "EMPTY_INCLUDE",
                "Include value is empty and will be emitted as-is",
                location,
                pattern.include,
            )
            return

        kind = pattern.reference_kind
        if kind == IncludeKind.REPOSITORY and pattern.target not in names:
            result.add_error(
                "DANGLING_REFERENCE",
                ErrorMessages.DANGLING_REFERENCE.format(reference=pattern.include),
                location,
                pattern.include,
            )
        elif kind == IncludeKind.EXTERNAL and pattern.target.startswith(EXTERNAL_MARKER):
            result.add_warning(
                "DOUBLE_EXTERNAL_MARKER",
                f"Only one leading '!' is stripped from {pattern.include!r}",
                location,
                pattern.include,
            )

    def _validate_captures(
        self,
        captures: dict[str, Capture] | None,
        location: str,
        result: ValidationResult,
    ) -> None:
        """Check that capture keys are group numbers."""
        for key in captures or {}:
            if not key.isdigit():
                result.add_warning(
                    "INVALID_CAPTURE_KEY",
                    f"Capture key is not a group number: {key!r}",
                    f"{location}/{key}",
                    key,
                )

    def _validate_repository(self, grammar: Grammar, result: ValidationResult) -> None:
        """Report repository entries that nothing includes."""
        if not grammar.repository:
            return

        used = {
            pattern.target
            for _, pattern in iter_patterns(grammar)
            if isinstance(pattern, IncludePattern)
            and pattern.reference_kind == IncludeKind.REPOSITORY
        }
        for name in grammar.repository:
            if name not in used:
                result.add_info(
                    "UNUSED_REPOSITORY_ENTRY",
                    f"Repository entry '{name}' is never included",
                    f"repository/{name}",
                    name,
                )


def validate_grammar(grammar: Grammar) -> ValidationResult:
    """
    Convenience function to validate a grammar.

    Args:
        grammar: The grammar to validate

    Returns:
        ValidationResult with any issues found
    """
    validator = GrammarValidator()
    return validator.validate(grammar)
