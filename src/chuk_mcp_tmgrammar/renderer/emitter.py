"""
Grammar emitter - turns a Grammar into the on-disk document.

The pipeline:
    Grammar (in-memory, authoring conventions)
    → validated (dangling ``#name`` includes abort here)
    → includes rewritten (``!scope`` → ``scope``)
    → pruned document (empty optional fields dropped)
    → YAML or JSON text

Nothing is written or returned until every step has succeeded.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel

from chuk_mcp_tmgrammar.constants import ErrorMessages, OutputFormat
from chuk_mcp_tmgrammar.models.grammar import Grammar
from chuk_mcp_tmgrammar.renderer.pruning import emitted_fields, should_omit
from chuk_mcp_tmgrammar.renderer.transforms import rewrite_includes
from chuk_mcp_tmgrammar.validation.validator import GrammarValidator, ValidationResult

logger = logging.getLogger(__name__)


def parse_format(value: OutputFormat | str) -> OutputFormat:
    """
    Normalize an output format given as enum or string.

    Raises:
        ValueError: for anything other than yaml or json
    """
    if isinstance(value, OutputFormat):
        return value
    try:
        return OutputFormat(value.lower())
    except ValueError:
        raise ValueError(ErrorMessages.UNKNOWN_FORMAT.format(fmt=value)) from None


def format_for_path(path: Path) -> OutputFormat:
    """Pick the output format from a file suffix (.json, otherwise YAML)."""
    if path.suffix.lower() == ".json":
        return OutputFormat.JSON
    return OutputFormat.YAML


@dataclass
class RenderResult:
    """Result of rendering a grammar."""

    text: str
    output_format: OutputFormat
    document: dict[str, Any]
    validation: ValidationResult

    @property
    def warnings(self) -> list[str]:
        """Non-fatal validation findings."""
        return [str(w) for w in self.validation.warnings]


class GrammarEmitter:
    """
    Renders grammars to YAML or JSON.

    The emitter holds no per-grammar state; one instance can render any
    number of grammars.
    """

    def __init__(self, validator: GrammarValidator | None = None):
        """
        Initialize the emitter.

        Args:
            validator: Validator to run before rendering
        """
        self.validator = validator or GrammarValidator()

    def prepare(self, grammar: Grammar) -> tuple[Grammar, ValidationResult]:
        """
        Validate a grammar and rewrite its includes.

        Returns:
            The rewritten grammar and the validation result

        Raises:
            GrammarReferenceError: if any ``#name`` include dangles
            GrammarShapeError: if a pattern slot holds a non-pattern
        """
        validation = self.validator.validate(grammar)
        logger.debug(
            f"Validated {grammar.scope_name}: {len(validation.errors)} errors, "
            f"{len(validation.warnings)} warnings"
        )
        validation.raise_for_errors()

        return rewrite_includes(grammar), validation

    def to_document(self, grammar: Grammar) -> dict[str, Any]:
        """
        Convert a grammar to a plain, pruned document.

        The grammar is validated and its includes rewritten first.
        """
        prepared, _ = self.prepare(grammar)
        return _to_plain(prepared)

    def render(
        self,
        grammar: Grammar,
        output_format: OutputFormat | str = OutputFormat.YAML,
    ) -> RenderResult:
        """
        Render a grammar to text.

        Args:
            grammar: The grammar to render
            output_format: 'yaml' or 'json'

        Returns:
            RenderResult with the emitted text

        Raises:
            GrammarReferenceError: if any ``#name`` include dangles
            ValueError: for an unknown output format
        """
        fmt = parse_format(output_format)
        prepared, validation = self.prepare(grammar)
        document = _to_plain(prepared)

        if fmt == OutputFormat.JSON:
            text = json.dumps(document, indent=2, ensure_ascii=False) + "\n"
        else:
            text = yaml.safe_dump(
                document, default_flow_style=False, sort_keys=False, allow_unicode=True
            )

        return RenderResult(text=text, output_format=fmt, document=document, validation=validation)

    def write(
        self,
        grammar: Grammar,
        path: Path,
        output_format: OutputFormat | str | None = None,
    ) -> RenderResult:
        """
        Render a grammar and write it to a file.

        The file is only touched after rendering succeeds.

        Args:
            grammar: The grammar to render
            path: Destination file
            output_format: Format override (default: from the file suffix)

        Returns:
            RenderResult for the written document
        """
        fmt = parse_format(output_format) if output_format else format_for_path(path)
        result = self.render(grammar, fmt)

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(result.text, encoding="utf-8")
        logger.info(f"Wrote {grammar.scope_name} to {path}")

        return result


def _to_plain(value: Any) -> Any:
    """Recursively convert models to dicts, pruning optional fields."""
    if isinstance(value, BaseModel):
        return {key: _to_plain(item) for key, item in emitted_fields(value).items()}
    if isinstance(value, dict):
        return {
            key: _to_plain(item) for key, item in value.items() if not _empty_member(item)
        }
    if isinstance(value, (list, tuple)):
        return [_to_plain(item) for item in value if not _empty_member(item)]
    return value


def _empty_member(value: Any) -> bool:
    return isinstance(value, BaseModel) and should_omit(value)


def render_grammar(
    grammar: Grammar,
    output_format: OutputFormat | str = OutputFormat.YAML,
) -> str:
    """
    Convenience function to render a grammar to text.

    Args:
        grammar: The grammar to render
        output_format: 'yaml' or 'json'

    Returns:
        The emitted document
    """
    emitter = GrammarEmitter()
    return emitter.render(grammar, output_format).text
