"""AST Parser data models.

Typed view over a parsed C# file: type declarations and their members,
down to the statement and expression shapes the translator inspects.
These are pure data containers with no parsing logic.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Expression:
    """A source expression with just enough structure for pattern checks."""

    kind: str  # "identifier" | "member_access" | "invocation" | "object_creation" | "other"
    text: str  # Verbatim source text
    target: Optional[str] = None  # member_access: receiver; invocation: callee; object_creation: type
    name: Optional[str] = None  # member_access: member name
    arguments: List["Expression"] = field(default_factory=list)


@dataclass
class Statement:
    """A single statement inside a block body."""

    kind: str  # "return" | "expression" | "other"
    text: str
    expression: Optional[Expression] = None


@dataclass
class ParameterDeclaration:
    name: str
    type: str
    default: Optional[str] = None  # Default value source text


@dataclass
class VariableDeclarator:
    name: str
    initializer: Optional[str] = None


@dataclass
class FieldDeclaration:
    """A field declaration; may declare several variables of one type."""

    type: str
    variables: List[VariableDeclarator]
    modifiers: List[str] = field(default_factory=list)
    doc_comment: Optional[str] = None


@dataclass
class AccessorDeclaration:
    """A get/set/init accessor.

    ``body`` is None for an accessor without a body (``get;``).
    """

    keyword: str  # "get" | "set" | "init"
    modifiers: List[str] = field(default_factory=list)
    body: Optional[List[Statement]] = None


@dataclass
class PropertyDeclaration:
    name: str
    type: str
    modifiers: List[str] = field(default_factory=list)
    accessors: List[AccessorDeclaration] = field(default_factory=list)
    doc_comment: Optional[str] = None


@dataclass
class ConstructorDeclaration:
    name: str
    parameters: List[ParameterDeclaration] = field(default_factory=list)
    modifiers: List[str] = field(default_factory=list)
    initializer: Optional[str] = None  # "base" | "this"
    initializer_arguments: List[str] = field(default_factory=list)
    body: List[Statement] = field(default_factory=list)
    doc_comment: Optional[str] = None


@dataclass
class MethodDeclaration:
    name: str
    return_type: str
    parameters: List[ParameterDeclaration] = field(default_factory=list)
    modifiers: List[str] = field(default_factory=list)
    body: List[Statement] = field(default_factory=list)
    doc_comment: Optional[str] = None


@dataclass
class TypeDeclaration:
    """A class/interface/struct/record declaration and its direct members."""

    kind: str  # "class" | "interface" | "struct" | "record"
    name: str
    bases: List[str] = field(default_factory=list)
    modifiers: List[str] = field(default_factory=list)
    doc_comment: Optional[str] = None
    fields: List[FieldDeclaration] = field(default_factory=list)
    properties: List[PropertyDeclaration] = field(default_factory=list)
    constructors: List[ConstructorDeclaration] = field(default_factory=list)
    methods: List[MethodDeclaration] = field(default_factory=list)
    nested_types: List["TypeDeclaration"] = field(default_factory=list)
    namespace: str = ""


@dataclass
class ParseError:
    """An error encountered during parsing."""

    file_path: str
    line: int
    message: str
    severity: str = "warning"  # "warning" | "error"


@dataclass
class ParseResult:
    """Complete parse output for a single file.

    ``types`` holds the top-level type declarations only; nested types hang
    off their parent's ``nested_types``.
    """

    file_path: str
    language: str
    types: List[TypeDeclaration]
    imports: List[str]  # All using directives in file
    line_count: int = 0
    errors: List[ParseError] = field(default_factory=list)

    @property
    def classes(self) -> List[TypeDeclaration]:
        return [t for t in self.types if t.kind == "class"]
