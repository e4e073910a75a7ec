"""ClassLoom AST Parser: tree-sitter based declaration parsing.

Public API:
    parse_file(path, project_root) → ParseResult
    parse_source(source, file_path, language) → ParseResult
    detect_language(file_path) → str | None
"""

from .models import (
    AccessorDeclaration,
    ConstructorDeclaration,
    Expression,
    FieldDeclaration,
    MethodDeclaration,
    ParameterDeclaration,
    ParseError,
    ParseResult,
    PropertyDeclaration,
    Statement,
    TypeDeclaration,
    VariableDeclarator,
)
from .utils import detect_language, get_parser, is_supported_file, should_skip_directory

__all__ = [
    "parse_file",
    "parse_source",
    "detect_language",
    "get_parser",
    "is_supported_file",
    "should_skip_directory",
    "AccessorDeclaration",
    "ConstructorDeclaration",
    "Expression",
    "FieldDeclaration",
    "MethodDeclaration",
    "ParameterDeclaration",
    "ParseError",
    "ParseResult",
    "PropertyDeclaration",
    "Statement",
    "TypeDeclaration",
    "VariableDeclarator",
]


def parse_file(file_path: str, project_root: str = "") -> ParseResult:
    """Parse a source file into a typed declaration view.

    Raises:
        ValueError: If the file extension is not a supported language
    """
    language = detect_language(file_path)
    if language is None:
        raise ValueError(f"Unsupported file type: {file_path}")
    return get_parser(language).parse_file(file_path, project_root)


def parse_source(source_text: str, file_path: str = "<string>", language: str | None = None) -> ParseResult:
    """Parse source code string into a typed declaration view.

    Args:
        source_text: Source code as string
        file_path: Relative file path (for metadata)
        language: Language identifier. If None, detected from file_path,
            falling back to C#.

    Returns:
        ParseResult containing the declaration tree
    """
    if language is None:
        language = detect_language(file_path) or "csharp"
    return get_parser(language).parse_source(source_text, file_path)
