"""
Exceptions raised by the rendering pipeline.

All derive from ValueError so callers that already guard model
construction with ``except ValueError`` see pipeline failures too.
"""

from __future__ import annotations

from typing import Any

from chuk_mcp_tmgrammar.constants import ErrorMessages


class GrammarError(ValueError):
    """Base class for grammar generation failures."""


class GrammarReferenceError(GrammarError):
    """
    One or more ``#name`` includes do not resolve against the repository.

    Attributes:
        dangling: (reference, location) pairs, in traversal order
        reference: the first dangling reference
        location: path to the first offending node
    """

    def __init__(self, dangling: list[tuple[str, str | None]]):
        if not dangling:
            raise ValueError("GrammarReferenceError needs at least one reference")
        self.dangling = dangling
        self.reference, self.location = dangling[0]

        message = ErrorMessages.DANGLING_REFERENCE.format(reference=self.reference)
        if self.location:
            message = f"{message} (at {self.location})"
        if len(dangling) > 1:
            message = f"{message} and {len(dangling) - 1} more"
        super().__init__(message)


class GrammarShapeError(GrammarError):
    """A pattern slot holds a value that is none of the pattern variants."""

    def __init__(self, value: Any, location: str | None = None):
        self.value = value
        self.location = location
        message = ErrorMessages.INVALID_SHAPE.format(type_name=type(value).__name__)
        if location:
            message = f"{message} (at {location})"
        super().__init__(message)
