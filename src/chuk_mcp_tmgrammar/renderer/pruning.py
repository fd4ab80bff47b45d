"""
Emptiness pruning - decides which optional fields reach the document.

A converter table keyed by value shape answers "is this value empty?".
Converters return the value itself when it should be emitted, or OMIT
when the field should be dropped from the document entirely.

Only fields listed in a model's ``OMIT_WHEN_EMPTY`` are consulted.
Required fields are always emitted verbatim, even as empty strings.
Pattern instances held in a repository or a patterns list go through
the same table, so a pattern with no populated fields is dropped.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel

from chuk_mcp_tmgrammar.models.grammar import BeginEndPattern, IncludePattern, MatchPattern


class _Omit:
    """Marker returned by converters for values that must not be emitted."""

    def __repr__(self) -> str:
        return "OMIT"


OMIT = _Omit()

Converter = Callable[[Any], Any]


def _convert_string(value: str) -> Any:
    return OMIT if len(value) == 0 else value


def _convert_mapping(value: Mapping[str, Any]) -> Any:
    return OMIT if len(value) == 0 else value


def _convert_sequence(value: list[Any] | tuple[Any, ...]) -> Any:
    return OMIT if len(value) == 0 else value


def _convert_pattern(value: BaseModel) -> Any:
    # Only instances built with model_construct() can leave every field unset.
    fields = emitted_fields(value)
    return OMIT if all(item is None for item in fields.values()) else value


CONVERTERS: dict[type, Converter] = {
    str: _convert_string,
    dict: _convert_mapping,
    list: _convert_sequence,
    tuple: _convert_sequence,
    MatchPattern: _convert_pattern,
    BeginEndPattern: _convert_pattern,
    IncludePattern: _convert_pattern,
}


def find_converter(value: Any) -> Converter | None:
    """Find the converter for a value, walking its class hierarchy."""
    for cls in type(value).__mro__:
        converter = CONVERTERS.get(cls)
        if converter is not None:
            return converter
    if isinstance(value, Mapping):
        return _convert_mapping
    return None


def should_omit(value: Any) -> bool:
    """
    Return True if an optional field holding ``value`` must be dropped.

    ``None`` means the field was never set. Values with no converter
    (numbers, booleans) are always kept.
    """
    if value is None:
        return True
    converter = find_converter(value)
    if converter is None:
        return False
    return converter(value) is OMIT


def emitted_fields(model: BaseModel) -> dict[str, Any]:
    """
    The model's fields as they will appear in the document.

    Keys are the serialized names (aliases), in declaration order.
    Optional fields that are absent or empty are left out. Values are
    returned as-is; nested models are not converted here.
    """
    optional: frozenset[str] = getattr(model, "OMIT_WHEN_EMPTY", frozenset())
    result: dict[str, Any] = {}

    for field_name, field_info in type(model).model_fields.items():
        value = getattr(model, field_name, None)
        if field_name in optional and should_omit(value):
            continue
        result[field_info.alias or field_name] = value

    return result
