"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import pytest

from chuk_mcp_tmgrammar.models import Grammar, IncludePattern, MatchPattern


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def library_path() -> Path:
    """Path to the packaged grammar library."""
    return Path(__file__).parent.parent / "src" / "chuk_mcp_tmgrammar" / "grammars" / "library"


@pytest.fixture
def demo_grammar() -> Grammar:
    """A minimal grammar with one repository reference."""
    return Grammar(
        scope_name="source.demo",
        uuid="u1",
        patterns=[IncludePattern(include="#main")],
        repository={"main": MatchPattern(name="keyword", match=r"\bif\b")},
    )
