#!/usr/bin/env python3
"""
Async TextMate Grammar MCP Server using chuk-mcp-server

This server provides MCP tools for authoring and emitting TextMate
syntax-highlighting grammars. Grammars are written as YAML/JSON with a
few authoring conveniences and rendered into the minimal documents
editors load.

The server provides tools for:
- Discovering library and project grammars
- Validating repository references and structure
- Rendering grammars to YAML or JSON
- Exporting .tmLanguage files for editor extensions
"""

import logging
from pathlib import Path

from chuk_mcp_server import ChukMCPServer

from chuk_mcp_tmgrammar.grammars import GrammarLoader
from chuk_mcp_tmgrammar.tools import register_grammar_tools, register_rendering_tools

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create the MCP server instance
mcp = ChukMCPServer("chuk-mcp-tmgrammar")

# Paths - use standard project structure
BASE_PATH = Path.cwd()
GRAMMARS_DIR = BASE_PATH / "grammars"
OUTPUT_DIR = BASE_PATH / "syntaxes"
LIBRARY_PATH = Path(__file__).parent / "grammars" / "library"

# Create loader
grammar_loader = GrammarLoader(
    library_path=LIBRARY_PATH,
    project_path=GRAMMARS_DIR,
)

# Register all tools
grammar_tools = register_grammar_tools(mcp, grammar_loader)
rendering_tools = register_rendering_tools(mcp, grammar_loader, OUTPUT_DIR)

# Export tool functions for direct access
grammar_list = grammar_tools["grammar_list"]
grammar_describe = grammar_tools["grammar_describe"]
grammar_validate = grammar_tools["grammar_validate"]
grammar_copy_to_project = grammar_tools["grammar_copy_to_project"]

grammar_render = rendering_tools["grammar_render"]
grammar_render_source = rendering_tools["grammar_render_source"]
grammar_export = rendering_tools["grammar_export"]

logger.info("TextMate Grammar MCP Server initialized")
logger.info(f"  Library path: {LIBRARY_PATH}")
logger.info(f"  Grammars dir: {GRAMMARS_DIR}")
logger.info(f"  Output dir: {OUTPUT_DIR}")
