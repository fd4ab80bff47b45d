"""
Grammar loader - discovers and loads authored grammar files.

Grammars can come from:
1. Built-in library (shipped with package)
2. Project grammars (user's project/grammars directory)

Files are YAML or JSON using the same keys as the emitted document,
with ``!scope.name`` allowed for includes of other grammars.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from chuk_mcp_tmgrammar.constants import GRAMMAR_SUFFIXES, OutputFormat
from chuk_mcp_tmgrammar.models.grammar import Grammar, GrammarMetadata
from chuk_mcp_tmgrammar.renderer.emitter import parse_format

logger = logging.getLogger(__name__)


class GrammarLoader:
    """
    Discovers and loads grammar definitions.

    Grammars are loaded from YAML/JSON files in the library and project
    directories. Project grammars override library grammars with the
    same file stem.
    """

    def __init__(
        self,
        library_path: Path | None = None,
        project_path: Path | None = None,
    ):
        """
        Initialize the grammar loader.

        Args:
            library_path: Path to built-in grammar library
            project_path: Path to project grammars directory
        """
        self.library_path = library_path or (Path(__file__).parent / "library")
        self.project_path = project_path
        self._cache: dict[str, Grammar] = {}

    def list_grammars(self) -> list[GrammarMetadata]:
        """
        List all available grammars.

        Unreadable files are skipped with a warning so one bad file
        does not hide the rest.
        """
        found: dict[str, GrammarMetadata] = {}

        for directory in (self.library_path, self.project_path):
            for path in self._grammar_files(directory):
                grammar = self._try_load(path)
                if grammar:
                    found[path.stem] = GrammarMetadata.from_grammar(path.stem, grammar, str(path))

        return sorted(found.values(), key=lambda m: m.name)

    def get_grammar(self, name: str) -> Grammar | None:
        """
        Get a grammar by name.

        Project grammars take precedence over library grammars.

        Args:
            name: Grammar name (file stem)

        Returns:
            Grammar if found, None otherwise

        Raises:
            ValueError: if the file exists but is not a valid grammar
        """
        if name in self._cache:
            return self._cache[name]

        path = self.find_file(name)
        if path is None:
            return None

        grammar = self.load_file(path)
        self._cache[name] = grammar
        return grammar

    def find_file(self, name: str) -> Path | None:
        """Locate the file for a grammar name, project first."""
        for directory in (self.project_path, self.library_path):
            if directory is None or not directory.exists():
                continue
            for suffix in GRAMMAR_SUFFIXES:
                candidate = directory / f"{name}{suffix}"
                if candidate.exists():
                    return candidate
        return None

    def load_file(self, path: Path) -> Grammar:
        """
        Load a grammar from a YAML or JSON file.

        Raises:
            ValueError: if the content is not a valid grammar
        """
        fmt = OutputFormat.JSON if path.suffix.lower() == ".json" else OutputFormat.YAML
        return self.parse(path.read_text(encoding="utf-8"), fmt)

    def parse(self, text: str, fmt: OutputFormat | str = OutputFormat.YAML) -> Grammar:
        """
        Parse a grammar from authored YAML or JSON text.

        Raises:
            ValueError: if the text cannot be parsed or is not a grammar
        """
        data = self._parse_data(text, parse_format(fmt))
        if not isinstance(data, dict):
            raise ValueError(f"Grammar document must be a mapping, got {type(data).__name__}")
        return Grammar.model_validate(data)

    def copy_to_project(self, name: str) -> Path | None:
        """
        Copy a library grammar to the project for customization.

        Args:
            name: Grammar name

        Returns:
            Path to copied file, or None if not found
        """
        if not self.project_path:
            raise ValueError("No project path configured")

        library_file = next(
            (
                self.library_path / f"{name}{suffix}"
                for suffix in GRAMMAR_SUFFIXES
                if (self.library_path / f"{name}{suffix}").exists()
            ),
            None,
        )
        if library_file is None:
            return None

        self.project_path.mkdir(parents=True, exist_ok=True)

        dest_file = self.project_path / library_file.name
        if dest_file.exists():
            raise ValueError(f"Grammar already exists in project: {name}")

        dest_file.write_text(library_file.read_text(encoding="utf-8"), encoding="utf-8")

        # Invalidate cache
        self._cache.pop(name, None)

        return dest_file

    def clear_cache(self) -> None:
        """Clear the grammar cache."""
        self._cache.clear()

    def _grammar_files(self, directory: Path | None) -> list[Path]:
        """Grammar files in a directory, sorted by name."""
        if directory is None or not directory.exists():
            return []
        return sorted(p for p in directory.iterdir() if p.suffix.lower() in GRAMMAR_SUFFIXES)

    def _try_load(self, path: Path) -> Grammar | None:
        """Load a grammar for discovery, returning None if it is unreadable."""
        try:
            return self.load_file(path)
        except (OSError, ValueError) as e:
            logger.warning(f"Skipping unreadable grammar {path}: {e}")
            return None

    def _parse_data(self, text: str, fmt: OutputFormat) -> Any:
        """Decode YAML/JSON text into plain data."""
        try:
            if fmt == OutputFormat.JSON:
                return json.loads(text)
            return yaml.safe_load(text)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ValueError(f"Could not parse grammar {fmt.value}: {e}") from e
