"""
Rendering tools - MCP tools for emitting editor grammar files.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from chuk_mcp_tmgrammar.constants import (
    EXPORT_SUFFIX,
    ErrorMessages,
    OutputFormat,
    SuccessMessages,
)
from chuk_mcp_tmgrammar.grammars import GrammarLoader
from chuk_mcp_tmgrammar.renderer import GrammarEmitter, parse_format

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def _not_found(name: str) -> str:
    return json.dumps(
        {"status": "error", "message": ErrorMessages.GRAMMAR_NOT_FOUND.format(name=name)}
    )


def register_rendering_tools(
    mcp: ChukMCPServer,
    loader: GrammarLoader,
    output_dir: Path,
) -> dict[str, Any]:
    """
    Register rendering/export tools with the MCP server.

    Args:
        mcp: The MCP server instance
        loader: The grammar loader
        output_dir: Directory for exported grammar files

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}
    emitter = GrammarEmitter()

    @mcp.tool  # type: ignore[arg-type]
    async def grammar_render(name: str, output_format: str = "yaml") -> str:
        """
        Render a grammar to YAML or JSON text.

        Includes written as '!scope.name' are emitted as 'scope.name'
        and empty optional fields are left out.

        Args:
            name: Grammar name
            output_format: 'yaml' or 'json'

        Returns:
            JSON string containing the rendered document

        Example:
            grammar_render(name="demo", output_format="json")
        """
        try:
            grammar = loader.get_grammar(name)
            if grammar is None:
                return _not_found(name)

            result = emitter.render(grammar, output_format)

            return json.dumps(
                {
                    "status": "success",
                    "format": result.output_format.value,
                    "content": result.text,
                    "warnings": result.warnings,
                    "message": SuccessMessages.GRAMMAR_RENDERED.format(
                        name=name, fmt=result.output_format.value
                    ),
                }
            )
        except Exception as e:
            logger.exception("Failed to render grammar")
            return json.dumps({"status": "error", "message": str(e)})

    tools["grammar_render"] = grammar_render

    @mcp.tool  # type: ignore[arg-type]
    async def grammar_render_source(
        source: str,
        source_format: str = "yaml",
        output_format: str = "yaml",
    ) -> str:
        """
        Render a grammar given inline as YAML or JSON text.

        Useful for trying out a grammar without saving it first.

        Args:
            source: Authored grammar document
            source_format: Format of the source ('yaml' or 'json')
            output_format: Format of the output ('yaml' or 'json')

        Returns:
            JSON string containing the rendered document

        Example:
            grammar_render_source(source="scopeName: source.x\\nuuid: u1\\n")
        """
        try:
            grammar = loader.parse(source, source_format)
            result = emitter.render(grammar, output_format)

            return json.dumps(
                {
                    "status": "success",
                    "format": result.output_format.value,
                    "content": result.text,
                    "warnings": result.warnings,
                }
            )
        except Exception as e:
            logger.exception("Failed to render grammar source")
            return json.dumps({"status": "error", "message": str(e)})

    tools["grammar_render_source"] = grammar_render_source

    @mcp.tool  # type: ignore[arg-type]
    async def grammar_export(
        name: str,
        output_format: str = "json",
        output_name: str | None = None,
    ) -> str:
        """
        Render a grammar and write it to the output directory.

        The file is named '<name>.tmLanguage.<format>', ready to drop
        into an editor extension.

        Args:
            name: Grammar name
            output_format: 'yaml' or 'json'
            output_name: Optional file stem (default: grammar name)

        Returns:
            JSON string with the written path

        Example:
            grammar_export(name="demo")
        """
        try:
            grammar = loader.get_grammar(name)
            if grammar is None:
                return _not_found(name)

            fmt = parse_format(output_format)
            extension = "json" if fmt == OutputFormat.JSON else "yaml"
            output_path = output_dir / f"{output_name or name}{EXPORT_SUFFIX}.{extension}"

            result = emitter.write(grammar, output_path, fmt)

            return json.dumps(
                {
                    "status": "success",
                    "path": str(output_path),
                    "format": result.output_format.value,
                    "warnings": result.warnings,
                    "message": SuccessMessages.GRAMMAR_EXPORTED.format(
                        name=name, path=output_path
                    ),
                }
            )
        except Exception as e:
            logger.exception("Failed to export grammar")
            return json.dumps({"status": "error", "message": str(e)})

    tools["grammar_export"] = grammar_export

    return tools
