"""
Grammar tools - MCP tools for grammar discovery and validation.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_tmgrammar.constants import ErrorMessages
from chuk_mcp_tmgrammar.grammars import GrammarLoader
from chuk_mcp_tmgrammar.models.grammar import GrammarMetadata
from chuk_mcp_tmgrammar.validation import validate_grammar

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def _not_found(name: str) -> str:
    return json.dumps(
        {"status": "error", "message": ErrorMessages.GRAMMAR_NOT_FOUND.format(name=name)}
    )


def register_grammar_tools(mcp: ChukMCPServer, loader: GrammarLoader) -> dict[str, Any]:
    """
    Register grammar discovery tools with the MCP server.

    Args:
        mcp: The MCP server instance
        loader: The grammar loader

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def grammar_list() -> str:
        """
        List available grammars.

        Returns grammars from the built-in library and the project
        directory; project grammars override library ones.

        Returns:
            JSON string with grammar metadata

        Example:
            grammar_list()
        """
        try:
            grammars = loader.list_grammars()
            return json.dumps(
                {
                    "status": "success",
                    "grammars": [g.model_dump() for g in grammars],
                    "count": len(grammars),
                }
            )
        except Exception as e:
            logger.exception("Failed to list grammars")
            return json.dumps({"status": "error", "message": str(e)})

    tools["grammar_list"] = grammar_list

    @mcp.tool  # type: ignore[arg-type]
    async def grammar_describe(name: str) -> str:
        """
        Describe a grammar: scope, file types, rules.

        Args:
            name: Grammar name (file stem)

        Returns:
            JSON string with grammar details

        Example:
            grammar_describe(name="demo")
        """
        try:
            grammar = loader.get_grammar(name)
            if grammar is None:
                return _not_found(name)

            path = loader.find_file(name)
            metadata = GrammarMetadata.from_grammar(name, grammar, str(path) if path else None)

            return json.dumps(
                {
                    "status": "success",
                    "grammar": metadata.model_dump(),
                    "repository": sorted(grammar.repository_names()),
                }
            )
        except Exception as e:
            logger.exception("Failed to describe grammar")
            return json.dumps({"status": "error", "message": str(e)})

    tools["grammar_describe"] = grammar_describe

    @mcp.tool  # type: ignore[arg-type]
    async def grammar_validate(name: str) -> str:
        """
        Validate a grammar's references and structure.

        Checks for issues like:
        - Includes of repository entries that do not exist
        - Malformed scope names and capture keys
        - Unused repository entries

        Args:
            name: Grammar name

        Returns:
            JSON string with validation results

        Example:
            grammar_validate(name="demo")
        """
        try:
            grammar = loader.get_grammar(name)
            if grammar is None:
                return _not_found(name)

            result = validate_grammar(grammar)

            return json.dumps(
                {
                    "status": "success",
                    "valid": result.is_valid,
                    "errors": [
                        {"code": e.code, "message": e.message, "location": e.location}
                        for e in result.errors
                    ],
                    "warnings": [
                        {"code": w.code, "message": w.message, "location": w.location}
                        for w in result.warnings
                    ],
                    "info": [
                        {"code": i.code, "message": i.message, "location": i.location}
                        for i in result.info
                    ],
                }
            )
        except Exception as e:
            logger.exception("Failed to validate grammar")
            return json.dumps({"status": "error", "message": str(e)})

    tools["grammar_validate"] = grammar_validate

    @mcp.tool  # type: ignore[arg-type]
    async def grammar_copy_to_project(name: str) -> str:
        """
        Copy a library grammar into the project for customization.

        Args:
            name: Grammar name

        Returns:
            JSON string with the new file path

        Example:
            grammar_copy_to_project(name="demo")
        """
        try:
            path = loader.copy_to_project(name)
            if path is None:
                return _not_found(name)

            return json.dumps(
                {
                    "status": "success",
                    "path": str(path),
                    "message": f"Copied grammar '{name}' to project",
                }
            )
        except Exception as e:
            logger.exception("Failed to copy grammar")
            return json.dumps({"status": "error", "message": str(e)})

    tools["grammar_copy_to_project"] = grammar_copy_to_project

    return tools
