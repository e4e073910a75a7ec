"""Base interface for language-specific declaration parsers.

Defines the Strategy pattern base class that language parsers implement.
Shared parsing logic lives here; language-specific extraction is delegated.
"""

import logging
from abc import ABC, abstractmethod
from typing import List

import tree_sitter

from .models import ParseError, ParseResult, TypeDeclaration

logger = logging.getLogger(__name__)


class BaseLanguageParser(ABC):
    """Abstract base for tree-sitter declaration parsers.

    Subclasses implement:
    - get_language(): returns language name string
    - get_tree_sitter_language(): returns tree-sitter Language object
    - extract_types(): walks AST tree and builds TypeDeclaration views
    - extract_imports(): extracts import statements from AST
    """

    @abstractmethod
    def get_language(self) -> str:
        """Return the language identifier (e.g., 'csharp')."""
        ...

    @abstractmethod
    def get_tree_sitter_language(self) -> tree_sitter.Language:
        """Return the tree-sitter Language object for this language."""
        ...

    @abstractmethod
    def extract_types(self, tree: tree_sitter.Tree, source: bytes) -> List[TypeDeclaration]:
        """Extract top-level type declarations from a parsed tree-sitter AST.

        Args:
            tree: Parsed tree-sitter tree
            source: Raw source bytes

        Returns:
            List of TypeDeclaration views, nested types attached to parents
        """
        ...

    @abstractmethod
    def extract_imports(self, tree: tree_sitter.Tree, source: bytes) -> List[str]:
        """Extract import statements from the AST."""
        ...

    def parse_file(self, file_path: str, project_root: str = "") -> ParseResult:
        """Parse a source file into a ParseResult.

        Args:
            file_path: Absolute path to the source file
            project_root: Project root for computing relative paths

        Returns:
            ParseResult with extracted declarations and metadata
        """
        if project_root and file_path.startswith(project_root):
            rel_path = file_path[len(project_root):].lstrip("/")
        else:
            rel_path = file_path

        try:
            with open(file_path, "r", encoding="utf-8-sig", errors="replace") as f:
                source_text = f.read()
        except OSError as e:
            return ParseResult(
                file_path=rel_path,
                language=self.get_language(),
                types=[],
                imports=[],
                line_count=0,
                errors=[ParseError(file_path=rel_path, line=0, message=str(e), severity="error")],
            )

        return self.parse_source(source_text, rel_path)

    def parse_source(self, source_text: str, file_path: str = "<string>") -> ParseResult:
        """Parse source code string into a ParseResult.

        Args:
            source_text: Source code as string
            file_path: Relative file path (for metadata)

        Returns:
            ParseResult with extracted declarations and metadata
        """
        errors: List[ParseError] = []
        source_bytes = source_text.encode("utf-8")
        line_count = source_text.count("\n") + (1 if source_text and not source_text.endswith("\n") else 0)

        parser = tree_sitter.Parser(self.get_tree_sitter_language())
        tree = parser.parse(source_bytes)

        if tree.root_node.has_error:
            logger.warning(f"Tree-sitter reported parse errors in {file_path}")
            errors.append(
                ParseError(
                    file_path=file_path,
                    line=0,
                    message="Tree-sitter reported parse errors in file",
                    severity="warning",
                )
            )

        imports = self.extract_imports(tree, source_bytes)
        types = self.extract_types(tree, source_bytes)

        return ParseResult(
            file_path=file_path,
            language=self.get_language(),
            types=types,
            imports=imports,
            line_count=line_count,
            errors=errors,
        )
