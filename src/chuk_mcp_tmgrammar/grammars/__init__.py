"""
Grammar library - authored grammar files and their discovery.

Library grammars ship with the package; project grammars live in the
user's working directory and override library grammars by name.
"""

from chuk_mcp_tmgrammar.grammars.loader import GrammarLoader

__all__ = ["GrammarLoader"]
