"""
Grammar validation - structural checks run before rendering.
"""

from chuk_mcp_tmgrammar.validation.validator import (
    GrammarValidator,
    ValidationIssue,
    ValidationResult,
    ValidationSeverity,
    validate_grammar,
)

__all__ = [
    "GrammarValidator",
    "ValidationIssue",
    "ValidationResult",
    "ValidationSeverity",
    "validate_grammar",
]
