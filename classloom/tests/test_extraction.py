"""Tests for the extraction stage, fed with hand-built declaration views."""

import pytest

from classloom.core.ast_parser.models import (
    AccessorDeclaration,
    ConstructorDeclaration,
    Expression,
    FieldDeclaration,
    MethodDeclaration,
    ParameterDeclaration,
    ParseResult,
    PropertyDeclaration,
    Statement,
    TypeDeclaration,
    VariableDeclarator,
)
from classloom.core.translator.errors import MultipleClassesFound, NoClassFound
from classloom.core.translator.extraction import ModelExtractor, clean_comment
from classloom.core.translator.models import ContractAssertionKind, GetterKind, SetterKind


# ── Fixtures ──────────────────────────────────────────────────────────────


def _returns(expr: Expression) -> list:
    return [Statement(kind="return", text=f"return {expr.text};", expression=expr)]


def _ident(name: str) -> Expression:
    return Expression(kind="identifier", text=name)


def _member(target: str, name: str) -> Expression:
    return Expression(kind="member_access", text=f"{target}.{name}", target=target, name=name)


def _requires(condition: str, helper: str = "Contract.Requires") -> Statement:
    call = Expression(
        kind="invocation",
        text=f"{helper}({condition})",
        target=helper,
        arguments=[Expression(kind="other", text=condition)],
    )
    return Statement(kind="expression", text=f"{call.text};", expression=call)


def _other(text: str) -> Statement:
    return Statement(kind="other", text=text)


def _result(*types: TypeDeclaration) -> ParseResult:
    return ParseResult(file_path="Foo.cs", language="csharp", types=list(types), imports=[])


@pytest.fixture
def extractor():
    return ModelExtractor()


# =========================================================================
# Tests: class location
# =========================================================================

class TestClassLocation:
    def test_no_class(self, extractor):
        with pytest.raises(NoClassFound):
            extractor.extract(_result())

    def test_interface_only_file_has_no_class(self, extractor):
        with pytest.raises(NoClassFound):
            extractor.extract(_result(TypeDeclaration(kind="interface", name="IFoo")))

    def test_multiple_classes(self, extractor):
        with pytest.raises(MultipleClassesFound) as info:
            extractor.extract(_result(
                TypeDeclaration(kind="class", name="A"),
                TypeDeclaration(kind="class", name="B"),
            ))
        assert info.value.class_names == ["A", "B"]

    def test_nested_classes_do_not_count(self, extractor):
        outer = TypeDeclaration(
            kind="class", name="Outer",
            nested_types=[TypeDeclaration(kind="class", name="Inner")],
        )
        assert extractor.extract(_result(outer)).name == "Outer"


# =========================================================================
# Tests: supertypes, comments, fields
# =========================================================================

class TestClassShape:
    def test_base_type_and_interfaces(self, extractor):
        decl = TypeDeclaration(
            kind="class", name="Foo",
            bases=["IDisposable", "BaseVM", "INotifyPropertyChanged", "Other"],
        )
        model = extractor.extract_class(decl)
        assert model.base_type == "BaseVM"
        assert model.interfaces == ("IDisposable", "INotifyPropertyChanged")

    def test_no_supertypes(self, extractor):
        model = extractor.extract_class(TypeDeclaration(kind="class", name="Foo"))
        assert model.base_type is None
        assert model.interfaces == ()
        assert model.constructor is None

    def test_comment_indentation_is_collapsed(self):
        raw = "/// <summary>\n    /// Foo.\n    /// </summary>"
        assert clean_comment(raw) == "/// <summary>\n/// Foo.\n/// </summary>"
        assert clean_comment(None) is None
        assert clean_comment("   ") is None

    def test_only_first_declarator_is_kept(self, extractor):
        decl = TypeDeclaration(
            kind="class", name="Foo",
            fields=[FieldDeclaration(
                type="int",
                variables=[VariableDeclarator("_a", "1"), VariableDeclarator("_b")],
                doc_comment="/// <summary>A.</summary>",
            )],
        )
        model = extractor.extract_class(decl)
        assert len(model.fields) == 1
        field = model.fields[0]
        assert (field.name, field.type, field.initializer) == ("_a", "int", "1")
        assert field.comment == "/// <summary>A.</summary>"


# =========================================================================
# Tests: property classification
# =========================================================================

class TestGetterClassification:
    def _getter(self, extractor, body, name="Name"):
        prop = PropertyDeclaration(name=name, type="string", accessors=[AccessorDeclaration("get", body=body)])
        return extractor.extract_property(prop)

    def test_auto_getter_is_backing_field(self, extractor):
        assert self._getter(extractor, None).getter is GetterKind.BACKING_FIELD

    def test_return_backing_field(self, extractor):
        assert self._getter(extractor, _returns(_ident("_name"))).getter is GetterKind.BACKING_FIELD

    def test_backing_field_match_ignores_case(self, extractor):
        assert self._getter(extractor, _returns(_ident("_NAME"))).getter is GetterKind.BACKING_FIELD

    def test_this_qualified_backing_field(self, extractor):
        assert self._getter(extractor, _returns(_member("this", "_name"))).getter is GetterKind.BACKING_FIELD

    def test_subject_backing_field(self, extractor):
        prop = self._getter(extractor, _returns(_ident("_nameChangedSubject")), name="NameChanged")
        assert prop.getter is GetterKind.BACKING_FIELD

    def test_model_proxy(self, extractor):
        prop = self._getter(extractor, _returns(_member("_model", "name")))
        assert prop.getter is GetterKind.MODEL_PROXY
        assert prop.proxy_target == "_model"

    def test_other_field_is_custom(self, extractor):
        assert self._getter(extractor, _returns(_ident("_other"))).getter is GetterKind.CUSTOM

    def test_proxy_of_other_member_is_custom(self, extractor):
        assert self._getter(extractor, _returns(_member("_model", "Title"))).getter is GetterKind.CUSTOM

    def test_multi_statement_body_is_custom(self, extractor):
        body = [_other("var x = 1;")] + _returns(_ident("_name"))
        assert self._getter(extractor, body).getter is GetterKind.CUSTOM

    def test_classification_is_repeatable(self, extractor):
        prop = PropertyDeclaration(
            name="Name", type="string",
            accessors=[AccessorDeclaration("get", body=_returns(_member("_model", "Name")))],
        )
        assert extractor.extract_property(prop) == extractor.extract_property(prop)


class TestSetterClassification:
    def test_no_setter(self, extractor):
        prop = extractor.extract_property(
            PropertyDeclaration(name="Name", type="string", accessors=[AccessorDeclaration("get")])
        )
        assert prop.setter is None
        assert prop.setter_assertions == ()

    def test_private_setter_is_backing_field(self, extractor):
        prop = extractor.extract_property(PropertyDeclaration(
            name="Name", type="string",
            accessors=[AccessorDeclaration("get"), AccessorDeclaration("set", modifiers=["private"])],
        ))
        assert prop.setter is SetterKind.BACKING_FIELD

    def test_public_setter_is_custom_with_assertions(self, extractor):
        body = [_requires("value != null"), _other("_name = value;")]
        prop = extractor.extract_property(PropertyDeclaration(
            name="Name", type="string",
            accessors=[AccessorDeclaration("get"), AccessorDeclaration("set", body=body)],
        ))
        assert prop.setter is SetterKind.CUSTOM
        assert [a.kind for a in prop.setter_assertions] == [ContractAssertionKind.IS_NOT_NULL]
        assert prop.setter_assertions[0].argument_name == "value"

    def test_set_only_property_has_no_getter(self, extractor):
        prop = extractor.extract_property(
            PropertyDeclaration(name="Name", type="string", accessors=[AccessorDeclaration("set")])
        )
        assert prop.getter is None
        assert prop.setter is SetterKind.CUSTOM


# =========================================================================
# Tests: constructor, methods, assertions
# =========================================================================

class TestAssertionScanning:
    def test_leading_run_only(self, extractor):
        statements = [
            _requires("a != null"),
            _requires("b > 0"),
            _other("_a = a;"),
            _requires("c != null"),
        ]
        assertions = extractor.scan_assertions(statements)
        assert [a.argument_name for a in assertions] == ["a", "b"]

    def test_generic_helper_is_recognised(self, extractor):
        assertions = extractor.scan_assertions([_requires("a != null", "Contract.Requires<ArgumentNullException>")])
        assert len(assertions) == 1

    def test_other_helpers_stop_the_scan(self, extractor):
        assert extractor.scan_assertions([_requires("a != null", "Debug.Assert")]) == []

    def test_call_without_arguments_stops_the_scan(self, extractor):
        call = Expression(kind="invocation", text="Contract.Requires()", target="Contract.Requires")
        statement = Statement(kind="expression", text="Contract.Requires();", expression=call)
        assert extractor.scan_assertions([statement, _requires("a != null")]) == []

    def test_only_first_argument_is_the_condition(self, extractor):
        call = Expression(
            kind="invocation", text='Contract.Requires(a > 0, "msg")', target="Contract.Requires",
            arguments=[Expression(kind="other", text="a > 0"), Expression(kind="other", text='"msg"')],
        )
        statement = Statement(kind="expression", text=call.text + ";", expression=call)
        assertions = extractor.scan_assertions([statement])
        assert [a.kind for a in assertions] == [ContractAssertionKind.GREATER_THAN_ZERO]


class TestConstructorAndMethods:
    def test_constructor(self, extractor):
        ctor = ConstructorDeclaration(
            name="Foo",
            parameters=[
                ParameterDeclaration("log", "ILogService"),
                ParameterDeclaration("name", "string", '"x"'),
            ],
            initializer="base",
            initializer_arguments=["log"],
            body=[_requires("name != null"), _other("_name = name;")],
            doc_comment="/// <summary>Ctor.</summary>",
        )
        model = extractor.extract_class(TypeDeclaration(kind="class", name="Foo", constructors=[ctor]))
        result = model.constructor
        assert [a.name for a in result.arguments] == ["log", "name"]
        assert result.arguments[1].default == '"x"'
        assert result.base_call == ("log",)
        assert [a.argument_name for a in result.assertions] == ["name"]
        assert result.comment == "/// <summary>Ctor.</summary>"

    def test_this_initializer_is_not_a_base_call(self, extractor):
        ctor = ConstructorDeclaration(name="Foo", initializer="this", initializer_arguments=["0"])
        model = extractor.extract_class(TypeDeclaration(kind="class", name="Foo", constructors=[ctor]))
        assert model.constructor.base_call == ()

    def test_methods(self, extractor):
        decl = TypeDeclaration(kind="class", name="Foo", methods=[
            MethodDeclaration(
                name="OnSaved", return_type="void", modifiers=["private"],
                parameters=[ParameterDeclaration("e", "EventArgs")],
            ),
            MethodDeclaration(
                name="Compute", return_type="int", modifiers=["public"],
                body=[_requires("x >= 0")],
            ),
            MethodDeclaration(name="Dispose", return_type="void", modifiers=["public"]),
        ])
        model = extractor.extract_class(decl)
        assert [m.name for m in model.methods] == ["OnSaved", "Compute", "Dispose"]
        assert model.methods[0].is_private
        assert not model.methods[1].is_private
        assert model.methods[1].assertions[0].kind is ContractAssertionKind.GREATER_OR_EQUAL_THAN_ZERO
