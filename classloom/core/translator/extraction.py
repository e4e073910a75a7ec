"""Extraction stage: declaration view → intermediate model.

Locates the single top-level class of a parsed file and captures its
shape: supertypes, documentation, fields, classified properties, the
constructor with its base call, methods, and the leading run of contract
assertions in constructor, setter and method bodies.
"""

import logging
import re
from typing import List, Optional, Sequence, Tuple

from ..ast_parser.models import (
    AccessorDeclaration,
    ConstructorDeclaration,
    Expression,
    MethodDeclaration,
    ParameterDeclaration,
    ParseResult,
    PropertyDeclaration,
    Statement,
    TypeDeclaration,
)
from .conventions import ConventionEngine, classify_assertion
from .errors import MultipleClassesFound, NoClassFound
from .models import (
    Argument,
    ClassModel,
    Constructor,
    ContractAssertion,
    Field,
    GetterKind,
    Method,
    Property,
    SetterKind,
)

logger = logging.getLogger(__name__)

_COMMENT_SPACE_RE = re.compile(r"\n\s+")
_TYPE_ARGS_RE = re.compile(r"<.*>", re.DOTALL)


def clean_comment(comment: Optional[str]) -> Optional[str]:
    """Collapse newline-plus-indentation runs into a single newline."""
    if not comment or not comment.strip():
        return None
    return _COMMENT_SPACE_RE.sub("\n", comment.strip())


class ModelExtractor:
    """Builds a :class:`ClassModel` from a parsed C# file."""

    def __init__(self, conventions: Optional[ConventionEngine] = None):
        self.conventions = conventions or ConventionEngine()

    def extract(self, parse_result: ParseResult) -> ClassModel:
        """Extract the one top-level class of a file.

        Raises:
            NoClassFound: If the file declares no top-level class
            MultipleClassesFound: If it declares more than one
        """
        classes = parse_result.classes
        if not classes:
            raise NoClassFound(parse_result.file_path)
        if len(classes) > 1:
            raise MultipleClassesFound([c.name for c in classes], parse_result.file_path)
        return self.extract_class(classes[0])

    def extract_class(self, decl: TypeDeclaration) -> ClassModel:
        base_type, interfaces = self._split_bases(decl.bases)

        model = ClassModel(
            name=decl.name,
            base_type=base_type,
            interfaces=interfaces,
            comment=clean_comment(decl.doc_comment),
            constructor=self._extract_constructor(decl.constructors),
            fields=tuple(self._extract_fields(decl)),
            properties=tuple(self.extract_property(p) for p in decl.properties),
            methods=tuple(self._extract_method(m) for m in decl.methods),
        )

        logger.debug(
            f"Extracted class {model.name}: {len(model.fields)} fields, "
            f"{len(model.properties)} properties, {len(model.methods)} methods, "
            f"constructor={'yes' if model.constructor else 'no'}"
        )
        return model

    # =========================================================================
    # Supertypes
    # =========================================================================

    def _split_bases(self, bases: Sequence[str]) -> Tuple[Optional[str], Tuple[str, ...]]:
        """First non-interface name is the base type; ``I*`` names are interfaces."""
        interfaces = tuple(b for b in bases if self.conventions.is_interface_name(b))
        others = [b for b in bases if not self.conventions.is_interface_name(b)]
        return (others[0] if others else None), interfaces

    # =========================================================================
    # Members
    # =========================================================================

    def _extract_fields(self, decl: TypeDeclaration) -> List[Field]:
        fields = []
        for fld in decl.fields:
            # Only the first declarator of `int a, b;` is kept
            var = fld.variables[0]
            fields.append(Field(
                name=var.name,
                type=fld.type,
                initializer=var.initializer,
                comment=clean_comment(fld.doc_comment),
            ))
        return fields

    def extract_property(self, prop: PropertyDeclaration) -> Property:
        """Classify a property's accessors."""
        getter_decl = self._find_accessor(prop.accessors, "get")
        setter_decl = self._find_accessor(prop.accessors, "set")

        getter = None
        proxy_target = None
        if getter_decl is not None:
            getter, proxy_target = self.classify_getter(prop.name, getter_decl)

        setter = None
        setter_assertions: Tuple[ContractAssertion, ...] = ()
        if setter_decl is not None:
            setter = self.classify_setter(setter_decl)
            if setter is SetterKind.CUSTOM:
                setter_assertions = tuple(self.scan_assertions(setter_decl.body or []))

        return Property(
            name=prop.name,
            type=prop.type,
            comment=clean_comment(prop.doc_comment),
            getter=getter,
            setter=setter,
            setter_assertions=setter_assertions,
            proxy_target=proxy_target,
        )

    @staticmethod
    def _find_accessor(accessors: Sequence[AccessorDeclaration], keyword: str) -> Optional[AccessorDeclaration]:
        for accessor in accessors:
            if accessor.keyword == keyword:
                return accessor
        return None

    def classify_getter(
        self, property_name: str, accessor: AccessorDeclaration
    ) -> Tuple[GetterKind, Optional[str]]:
        """Return the getter kind and, for model proxies, the proxied field."""
        if accessor.body is None:
            return GetterKind.BACKING_FIELD, None

        expr = self._single_return(accessor.body)
        if expr is None:
            return GetterKind.CUSTOM, None

        identifier = self._bare_identifier(expr)
        if identifier is not None:
            backing = self.conventions.backing_field_name(property_name)
            if self.conventions.convert_name(identifier, True).lower() == backing.lower():
                return GetterKind.BACKING_FIELD, None
            return GetterKind.CUSTOM, None

        if (
            expr.kind == "member_access"
            and expr.target
            and expr.name
            and expr.name.lower() == property_name.lower()
        ):
            return GetterKind.MODEL_PROXY, self._strip_this(expr.target)

        return GetterKind.CUSTOM, None

    def classify_setter(self, accessor: AccessorDeclaration) -> SetterKind:
        restricted = self.conventions.config.restricted_setter_modifiers
        if any(m in restricted for m in accessor.modifiers):
            return SetterKind.BACKING_FIELD
        return SetterKind.CUSTOM

    @staticmethod
    def _single_return(body: Sequence[Statement]) -> Optional[Expression]:
        if len(body) == 1 and body[0].kind == "return":
            return body[0].expression
        return None

    @staticmethod
    def _strip_this(text: str) -> str:
        return text[len("this."):] if text.startswith("this.") else text

    def _bare_identifier(self, expr: Expression) -> Optional[str]:
        """``x`` or ``this.x`` → ``x``."""
        if expr.kind == "identifier":
            return expr.text
        if expr.kind == "member_access" and expr.target == "this" and expr.name:
            return expr.name
        return None

    def _extract_constructor(self, constructors: Sequence[ConstructorDeclaration]) -> Optional[Constructor]:
        if not constructors:
            return None
        ctor = constructors[0]
        return Constructor(
            arguments=self._arguments(ctor.parameters),
            base_call=tuple(ctor.initializer_arguments) if ctor.initializer == "base" else (),
            comment=clean_comment(ctor.doc_comment),
            assertions=tuple(self.scan_assertions(ctor.body)),
        )

    def _extract_method(self, method: MethodDeclaration) -> Method:
        return Method(
            name=method.name,
            return_type=method.return_type,
            is_private="private" in method.modifiers,
            arguments=self._arguments(method.parameters),
            comment=clean_comment(method.doc_comment),
            assertions=tuple(self.scan_assertions(method.body)),
        )

    @staticmethod
    def _arguments(params: Sequence[ParameterDeclaration]) -> Tuple[Argument, ...]:
        return tuple(Argument(name=p.name, type=p.type, default=p.default) for p in params)

    # =========================================================================
    # Contract assertions
    # =========================================================================

    def scan_assertions(self, statements: Sequence[Statement]) -> List[ContractAssertion]:
        """Collect the leading run of assertion-helper calls.

        Stops quietly at the first statement that is not a call to the
        assertion helper with at least one argument.
        """
        assertions = []
        for statement in statements:
            condition = self._assertion_condition(statement)
            if condition is None:
                logger.debug(f"Assertion scan stopped at: {statement.text.strip()[:60]}")
                break
            assertions.append(classify_assertion(condition))
        return assertions

    def _assertion_condition(self, statement: Statement) -> Optional[str]:
        expr = statement.expression
        if statement.kind != "expression" or expr is None or expr.kind != "invocation":
            return None
        if not self._is_assertion_helper(expr.target) or not expr.arguments:
            return None
        return expr.arguments[0].text

    def _is_assertion_helper(self, callee: Optional[str]) -> bool:
        if not callee:
            return False
        bare = "".join(_TYPE_ARGS_RE.sub("", callee).split())
        return bare == self.conventions.config.assertion_helper
