"""C# declaration parser using tree-sitter.

Walks the tree-sitter AST and builds the typed declaration view consumed
by the translator: classes (and other type declarations) with their fields,
properties and accessors, constructors, methods, parameters, and the
statement/expression shapes found in member bodies.
"""

import logging
from typing import List, Optional

import tree_sitter
import tree_sitter_c_sharp

from .base import BaseLanguageParser
from .models import (
    AccessorDeclaration,
    ConstructorDeclaration,
    Expression,
    FieldDeclaration,
    MethodDeclaration,
    ParameterDeclaration,
    PropertyDeclaration,
    Statement,
    TypeDeclaration,
    VariableDeclarator,
)

logger = logging.getLogger(__name__)

_CSHARP_LANGUAGE = tree_sitter.Language(tree_sitter_c_sharp.language())

_TYPE_NODES = {
    "class_declaration": "class",
    "interface_declaration": "interface",
    "struct_declaration": "struct",
    "record_declaration": "record",
}

_ACCESSOR_KEYWORDS = ("get", "set", "init", "add", "remove")


class CSharpParser(BaseLanguageParser):
    """tree-sitter based C# parser.

    Extracts:
    - Class / interface / struct / record declarations -> TypeDeclaration
    - Field declarations -> FieldDeclaration (every declarator kept)
    - Property declarations -> PropertyDeclaration with accessor bodies
    - Constructor declarations -> ConstructorDeclaration with base/this call
    - Method declarations -> MethodDeclaration with body statements
    - Leading ``///`` documentation comments for each of the above
    """

    def get_language(self) -> str:
        return "csharp"

    def get_tree_sitter_language(self) -> tree_sitter.Language:
        return _CSHARP_LANGUAGE

    def extract_imports(self, tree: tree_sitter.Tree, source: bytes) -> List[str]:
        """Extract using directives from the AST."""
        imports = []
        for child in tree.root_node.children:
            if child.type == "using_directive":
                imports.append(self._text(child, source).strip())
        return imports

    def extract_types(self, tree: tree_sitter.Tree, source: bytes) -> List[TypeDeclaration]:
        """Extract top-level type declarations from the C# AST."""
        types: List[TypeDeclaration] = []
        self._walk_namespaces(tree.root_node, source, namespace="", types=types)
        return types

    # =========================================================================
    # Namespace walker
    # =========================================================================

    def _walk_namespaces(
        self,
        node: tree_sitter.Node,
        source: bytes,
        namespace: str,
        types: List[TypeDeclaration],
    ) -> None:
        """Recursively walk namespaces collecting type declarations.

        A file-scoped namespace covers the declarations that follow it.
        Depending on the grammar version those are its siblings or its
        children, so both are walked with the new name.
        """
        for child in node.children:
            if child.type == "namespace_declaration":
                ns_name = self._namespace_name(child, source)
                full_ns = f"{namespace}.{ns_name}" if namespace else ns_name
                self._walk_namespaces(child, source, full_ns, types)

            elif child.type == "file_scoped_namespace_declaration":
                ns_name = self._namespace_name(child, source)
                namespace = f"{namespace}.{ns_name}" if namespace else ns_name
                self._walk_namespaces(child, source, namespace, types)

            elif child.type == "declaration_list":
                self._walk_namespaces(child, source, namespace, types)

            elif child.type in _TYPE_NODES:
                decl = self._extract_type(child, source, namespace)
                if decl:
                    types.append(decl)

    # =========================================================================
    # Type-level extractor
    # =========================================================================

    def _extract_type(
        self, node: tree_sitter.Node, source: bytes, namespace: str
    ) -> Optional[TypeDeclaration]:
        """Extract a type declaration and its direct members."""
        name = self._get_child_text(node, "name", source)
        if not name:
            return None

        decl = TypeDeclaration(
            kind=_TYPE_NODES[node.type],
            name=name,
            bases=self._extract_bases(node, source),
            modifiers=self._extract_modifiers(node, source),
            doc_comment=self._extract_xml_doc(node, source),
            namespace=namespace,
        )

        body = node.child_by_field_name("body") or self._get_child_by_type(node, "declaration_list")
        if body is None:
            return decl

        for child in body.children:
            if child.type == "field_declaration":
                fld = self._extract_field(child, source)
                if fld:
                    decl.fields.append(fld)

            elif child.type == "property_declaration":
                prop = self._extract_property(child, source)
                if prop:
                    decl.properties.append(prop)

            elif child.type == "constructor_declaration":
                decl.constructors.append(self._extract_constructor(child, source, name))

            elif child.type == "method_declaration":
                method = self._extract_method(child, source)
                if method:
                    decl.methods.append(method)

            elif child.type in _TYPE_NODES:
                nested = self._extract_type(child, source, namespace)
                if nested:
                    decl.nested_types.append(nested)

        logger.debug(
            f"Parsed {decl.kind} {name}: {len(decl.fields)} fields, "
            f"{len(decl.properties)} properties, {len(decl.methods)} methods"
        )
        return decl

    # =========================================================================
    # Member extractors
    # =========================================================================

    def _extract_field(self, node: tree_sitter.Node, source: bytes) -> Optional[FieldDeclaration]:
        """Extract a field declaration with all of its declarators."""
        var_decl = self._get_child_by_type(node, "variable_declaration")
        if var_decl is None:
            return None

        type_text = self._get_child_text(var_decl, "type", source) or ""
        variables = []
        for child in var_decl.children:
            if child.type != "variable_declarator":
                continue
            var_name = self._get_child_text(child, "name", source)
            if var_name is None:
                ident = self._get_child_by_type(child, "identifier")
                var_name = self._text(ident, source) if ident else ""
            variables.append(VariableDeclarator(
                name=var_name,
                initializer=self._value_after_equals(child, source),
            ))

        if not variables:
            return None

        return FieldDeclaration(
            type=type_text,
            variables=variables,
            modifiers=self._extract_modifiers(node, source),
            doc_comment=self._extract_xml_doc(node, source),
        )

    def _extract_property(self, node: tree_sitter.Node, source: bytes) -> Optional[PropertyDeclaration]:
        """Extract a property with its accessors.

        An expression-bodied property (``int X => _x;``) is reported as a
        single ``get`` accessor returning that expression.
        """
        name = self._get_child_text(node, "name", source)
        if not name:
            return None

        accessors: List[AccessorDeclaration] = []
        accessor_list = node.child_by_field_name("accessors") or self._get_child_by_type(node, "accessor_list")
        if accessor_list is not None:
            for child in accessor_list.children:
                if child.type == "accessor_declaration":
                    accessors.append(self._extract_accessor(child, source))
        else:
            arrow = self._get_child_by_type(node, "arrow_expression_clause")
            if arrow is not None:
                accessors.append(AccessorDeclaration(
                    keyword="get",
                    body=self._arrow_statements(arrow, source, returns=True),
                ))

        return PropertyDeclaration(
            name=name,
            type=self._get_child_text(node, "type", source) or "",
            modifiers=self._extract_modifiers(node, source),
            accessors=accessors,
            doc_comment=self._extract_xml_doc(node, source),
        )

    def _extract_accessor(self, node: tree_sitter.Node, source: bytes) -> AccessorDeclaration:
        keyword = None
        name_node = node.child_by_field_name("name")
        if name_node is not None:
            keyword = self._text(name_node, source)
        else:
            for child in node.children:
                if child.type in _ACCESSOR_KEYWORDS:
                    keyword = child.type
                    break

        body = None
        body_node = node.child_by_field_name("body")
        if body_node is None:
            body_node = self._get_child_by_type(node, "block") or self._get_child_by_type(
                node, "arrow_expression_clause"
            )
        if body_node is not None and body_node.type == "block":
            body = self._block_statements(body_node, source)
        elif body_node is not None and body_node.type == "arrow_expression_clause":
            body = self._arrow_statements(body_node, source, returns=keyword == "get")

        return AccessorDeclaration(
            keyword=keyword or "",
            modifiers=self._extract_modifiers(node, source),
            body=body,
        )

    def _extract_constructor(
        self, node: tree_sitter.Node, source: bytes, class_name: str
    ) -> ConstructorDeclaration:
        """Extract a constructor, its base/this initializer and body."""
        initializer = None
        initializer_args: List[str] = []
        init_node = self._get_child_by_type(node, "constructor_initializer")
        if init_node is not None:
            for child in init_node.children:
                if child.type in ("base", "this"):
                    initializer = child.type
                elif child.type == "argument_list":
                    initializer_args = [arg.text for arg in self._arguments(child, source)]

        return ConstructorDeclaration(
            name=self._get_child_text(node, "name", source) or class_name,
            parameters=self._extract_parameters(node, source),
            modifiers=self._extract_modifiers(node, source),
            initializer=initializer,
            initializer_arguments=initializer_args,
            body=self._function_body(node, source),
            doc_comment=self._extract_xml_doc(node, source),
        )

    def _extract_method(self, node: tree_sitter.Node, source: bytes) -> Optional[MethodDeclaration]:
        """Extract a method declaration."""
        name = self._get_child_text(node, "name", source)
        if not name:
            return None

        return_type = self._get_child_text(node, "returns", source) or self._get_child_text(node, "type", source)

        return MethodDeclaration(
            name=name,
            return_type=return_type or "void",
            parameters=self._extract_parameters(node, source),
            modifiers=self._extract_modifiers(node, source),
            body=self._function_body(node, source),
            doc_comment=self._extract_xml_doc(node, source),
        )

    def _extract_parameters(self, node: tree_sitter.Node, source: bytes) -> List[ParameterDeclaration]:
        param_list = node.child_by_field_name("parameters") or self._get_child_by_type(node, "parameter_list")
        if param_list is None:
            return []

        params = []
        for child in param_list.children:
            if child.type != "parameter":
                continue
            params.append(ParameterDeclaration(
                name=self._get_child_text(child, "name", source) or "",
                type=self._get_child_text(child, "type", source) or "",
                default=self._value_after_equals(child, source),
            ))
        return params

    # =========================================================================
    # Bodies: statements and expressions
    # =========================================================================

    def _function_body(self, node: tree_sitter.Node, source: bytes) -> List[Statement]:
        body = node.child_by_field_name("body")
        if body is None:
            body = self._get_child_by_type(node, "block") or self._get_child_by_type(node, "arrow_expression_clause")
        if body is None:
            return []
        if body.type == "arrow_expression_clause":
            return self._arrow_statements(body, source, returns=False)
        return self._block_statements(body, source)

    def _block_statements(self, block: tree_sitter.Node, source: bytes) -> List[Statement]:
        statements = []
        for child in block.named_children:
            if child.type == "comment":
                continue
            statements.append(self._statement(child, source))
        return statements

    def _arrow_statements(self, arrow: tree_sitter.Node, source: bytes, returns: bool) -> List[Statement]:
        expr_node = self._first_named(arrow)
        if expr_node is None:
            return []
        expr = self._expression(expr_node, source)
        return [Statement(kind="return" if returns else "expression", text=expr.text, expression=expr)]

    def _statement(self, node: tree_sitter.Node, source: bytes) -> Statement:
        text = self._text(node, source)
        if node.type in ("return_statement", "expression_statement"):
            expr_node = self._first_named(node)
            return Statement(
                kind="return" if node.type == "return_statement" else "expression",
                text=text,
                expression=self._expression(expr_node, source) if expr_node is not None else None,
            )
        return Statement(kind="other", text=text)

    def _expression(self, node: tree_sitter.Node, source: bytes) -> Expression:
        text = self._text(node, source)

        if node.type == "identifier":
            return Expression(kind="identifier", text=text)

        if node.type == "member_access_expression":
            return Expression(
                kind="member_access",
                text=text,
                target=self._get_child_text(node, "expression", source),
                name=self._get_child_text(node, "name", source),
            )

        if node.type == "invocation_expression":
            args_node = node.child_by_field_name("arguments") or self._get_child_by_type(node, "argument_list")
            return Expression(
                kind="invocation",
                text=text,
                target=self._get_child_text(node, "function", source),
                arguments=self._arguments(args_node, source) if args_node is not None else [],
            )

        if node.type == "object_creation_expression":
            args_node = node.child_by_field_name("arguments") or self._get_child_by_type(node, "argument_list")
            return Expression(
                kind="object_creation",
                text=text,
                target=self._get_child_text(node, "type", source),
                arguments=self._arguments(args_node, source) if args_node is not None else [],
            )

        return Expression(kind="other", text=text)

    def _arguments(self, arg_list: tree_sitter.Node, source: bytes) -> List[Expression]:
        """Return the value expression of each argument in an argument_list."""
        args = []
        for child in arg_list.children:
            if child.type != "argument":
                continue
            named = [c for c in child.named_children if c.type != "comment"]
            if named:
                # Named arguments (`x: value`) put the value last
                args.append(self._expression(named[-1], source))
        return args

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _text(node: tree_sitter.Node, source: bytes) -> str:
        return source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    @staticmethod
    def _get_child_text(node: tree_sitter.Node, field_name: str, source: bytes) -> Optional[str]:
        child = node.child_by_field_name(field_name)
        if child:
            return source[child.start_byte:child.end_byte].decode("utf-8", errors="replace")
        return None

    def _namespace_name(self, node: tree_sitter.Node, source: bytes) -> str:
        name = self._get_child_text(node, "name", source)
        if name:
            return name
        for child in node.named_children:
            if child.type in ("identifier", "qualified_name"):
                return self._text(child, source)
        return ""

    @staticmethod
    def _get_child_by_type(node: tree_sitter.Node, type_name: str) -> Optional[tree_sitter.Node]:
        for child in node.children:
            if child.type == type_name:
                return child
        return None

    @staticmethod
    def _first_named(node: tree_sitter.Node) -> Optional[tree_sitter.Node]:
        for child in node.named_children:
            if child.type != "comment":
                return child
        return None

    def _value_after_equals(self, node: tree_sitter.Node, source: bytes) -> Optional[str]:
        """Return the ``= value`` text of a declarator or parameter.

        Older grammars wrap the value in an ``equals_value_clause`` node,
        newer ones inline the ``=`` token.
        """
        clause = self._get_child_by_type(node, "equals_value_clause")
        if clause is not None:
            value = self._first_named(clause)
            return self._text(value, source) if value is not None else None

        seen_equals = False
        for child in node.children:
            if seen_equals and child.is_named and child.type != "comment":
                return self._text(child, source)
            if child.type == "=":
                seen_equals = True
        return None

    def _extract_bases(self, node: tree_sitter.Node, source: bytes) -> List[str]:
        """Extract the declared supertype names from base_list, in order."""
        base_list = self._get_child_by_type(node, "base_list")
        if base_list is None:
            return []

        bases = []
        for child in base_list.named_children:
            if child.type == "comment":
                continue
            if child.type == "primary_constructor_base_type":
                type_node = child.child_by_field_name("type") or self._first_named(child)
                text = self._text(type_node, source) if type_node is not None else ""
            else:
                text = self._text(child, source)
            text = text.strip()
            if text:
                bases.append(text)
        return bases

    def _extract_modifiers(self, node: tree_sitter.Node, source: bytes) -> List[str]:
        """Extract modifier keywords (public, private, static, override, etc.)."""
        return [
            self._text(child, source).strip()
            for child in node.children
            if child.type == "modifier"
        ]

    def _extract_xml_doc(self, node: tree_sitter.Node, source: bytes) -> Optional[str]:
        """Extract the ``///`` doc comment lines immediately preceding a node.

        Lines are returned with their indentation removed, joined by a
        single newline, each still carrying its ``///`` marker.
        """
        lines = []
        prev = node.prev_named_sibling
        while prev is not None and prev.type == "comment":
            text = self._text(prev, source).strip()
            if not text.startswith("///"):
                break
            lines.insert(0, text)
            prev = prev.prev_named_sibling

        return "\n".join(lines) if lines else None
