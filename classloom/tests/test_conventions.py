"""Tests for the naming/type/initializer conventions and assertion classifier."""

import pytest

from classloom.core.translator.config import DEFAULT_CONVENTIONS
from classloom.core.translator.conventions import (
    ConventionEngine,
    classify_assertion,
    comment_summary,
    first_sentence,
    remove_param_docs,
    restrict,
    split_generic,
    split_type_arguments,
)
from classloom.core.translator.models import ContractAssertionKind


@pytest.fixture
def conv():
    return ConventionEngine()


# =========================================================================
# Tests: identifier convention
# =========================================================================

class TestNameConvention:
    def test_private_field(self, conv):
        assert conv.convert_name("_count", True) == "_count"
        assert conv.convert_name("Count", True) == "_count"

    def test_public_name(self, conv):
        assert conv.convert_name("Name", False) == "name"
        assert conv.convert_name("_Name", False) == "name"
        assert conv.convert_name("__name", False) == "name"

    def test_subject_suffix_is_stripped(self, conv):
        assert conv.convert_name("_nameChangedSubject", True) == "_nameChanged"
        assert conv.convert_name("NameChangedSubject", False) == "nameChanged"

    def test_literal_rename(self, conv):
        assert conv.convert_name("_subscribings", True) == "_subscriptions"
        assert conv.convert_name("Subscribings", True) == "_subscriptions"

    @pytest.mark.parametrize("name", ["_count", "_fooBar", "_x", "_isDisposed"])
    def test_converted_private_names_are_fixed_points(self, conv, name):
        assert conv.convert_name(name, True) == name

    def test_empty_name(self, conv):
        assert conv.convert_name("", False) == ""
        assert conv.convert_name("_", True) == "_"

    def test_backing_field_name(self, conv):
        assert conv.backing_field_name("IsBusy") == "_isBusy"

    @pytest.mark.parametrize("name, expected", [
        ("IDisposable", True),
        ("IEquatable<Foo>", True),
        ("System.IDisposable", True),
        ("Item", False),
        ("BaseVM", False),
        ("I", False),
    ])
    def test_interface_names(self, conv, name, expected):
        assert conv.is_interface_name(name) is expected


# =========================================================================
# Tests: type convention
# =========================================================================

class TestTypeConvention:
    def test_every_primitive_is_reachable_in_any_case(self, conv):
        for source, target in DEFAULT_CONVENTIONS.basic_types.items():
            assert conv.convert_type(source) == target
            assert conv.convert_type(source.upper()) == target
            assert conv.convert_type(source.capitalize()) == target

    def test_primitive_families(self, conv):
        assert conv.convert_type("int") == "number"
        assert conv.convert_type("Double") == "number"
        assert conv.convert_type("bool") == "boolean"
        assert conv.convert_type("object") == "any"
        assert conv.convert_type("ImageSource") == "string"

    @pytest.mark.parametrize("wrapper", ["List", "IList", "IEnumerable", "ObservableCollection"])
    @pytest.mark.parametrize("element", ["int", "string", "FooViewModel", "Subject<bool>", "List<double>"])
    def test_list_wrappers_become_arrays(self, conv, wrapper, element):
        assert conv.convert_type(f"{wrapper}<{element}>") == conv.convert_type(element) + "[]"

    def test_nested_lists(self, conv):
        assert conv.convert_type("List<List<int>>") == "number[][]"

    def test_subject(self, conv):
        assert conv.convert_type("Subject<int>") == "IObservable<number>"
        assert conv.convert_type("Subject<int>", use_interface=False) == "Observable<number>"

    def test_list_of_subjects(self, conv):
        assert conv.convert_type("List<Subject<string>>") == "IObservable<string>[]"

    def test_commands(self, conv):
        assert conv.convert_type("DelegateCommand") == "Command<any>"
        assert conv.convert_type("RelayCommand<int>") == "Command<number>"
        assert conv.convert_type("DelegateCommand<List<string>>") == "Command<string[]>"

    def test_lower_case_generic_converts_each_argument(self, conv):
        assert conv.convert_type("tuple<int, List<string>>") == "tuple<number, string[]>"

    def test_unknown_generic_is_unchanged(self, conv):
        assert conv.convert_type("Dictionary<string, int>") == "Dictionary<string, int>"

    def test_view_model_aliases(self, conv):
        assert conv.convert_type("ViewModelBase") == "BaseVM"
        assert conv.convert_type("UserViewModel") == "UserVM"
        assert conv.convert_type("List<UserViewModel>") == "UserVM[]"

    def test_nullable_and_arrays(self, conv):
        assert conv.convert_type("int?") == "number"
        assert conv.convert_type("string[]") == "string[]"
        assert conv.convert_type("Subject<int?>") == "IObservable<number>"

    def test_unknown_types_pass_through(self, conv):
        assert conv.convert_type("Foo") == "Foo"
        assert conv.convert_type("void") == "void"
        assert conv.convert_type("") == ""

    def test_observable_and_no_value(self, conv):
        assert conv.is_observable("IObservable<number>")
        assert conv.is_observable("Observable<string>")
        assert not conv.is_observable("number[]")
        assert conv.is_no_value("void")
        assert not conv.is_no_value("number")


class TestGenericSplitting:
    def test_split_type_arguments_respects_nesting(self):
        assert split_type_arguments("int, Dictionary<string, int>, bool") == [
            "int",
            "Dictionary<string, int>",
            "bool",
        ]

    def test_split_generic(self):
        assert split_generic("List<int>") == ("List", ["int"])
        assert split_generic("Foo") is None
        assert split_generic("A<B>.C<D>") is None


# =========================================================================
# Tests: initializer convention
# =========================================================================

class TestInitializerConvention:
    def test_list_creation_becomes_empty_array(self, conv):
        assert conv.convert_initializer("new List<int>()") == "[]"
        assert conv.convert_initializer("new ObservableCollection<Foo>(items)") == "[]"

    def test_other_creation_keeps_arguments(self, conv):
        assert conv.convert_initializer("new Foo(1, 2)") == "new Foo(1, 2)"
        assert conv.convert_initializer("new BarViewModel(x)") == "new BarVM(x)"
        assert conv.convert_initializer("new Subject<int>()") == "new Observable<number>()"
        assert conv.convert_initializer("new CompositeDisposable()") == "new CompositeDisposable()"

    def test_other_expressions_pass_through(self, conv):
        assert conv.convert_initializer("0") == "0"
        assert conv.convert_initializer('"text"') == '"text"'
        assert conv.convert_initializer("new[] { 1, 2 }") == "new[] { 1, 2 }"
        assert conv.convert_initializer(None) is None


# =========================================================================
# Tests: assertion classification
# =========================================================================

class TestAssertionClassification:
    @pytest.mark.parametrize("expression, kind, arg", [
        ("name != null", ContractAssertionKind.IS_NOT_NULL, "name"),
        ("null != name", ContractAssertionKind.IS_NOT_NULL, "name"),
        ("this.name != null", ContractAssertionKind.IS_NOT_NULL, "name"),
        ("count > 0", ContractAssertionKind.GREATER_THAN_ZERO, "count"),
        ("count >= 0", ContractAssertionKind.GREATER_OR_EQUAL_THAN_ZERO, "count"),
        ("items.Count > 0", ContractAssertionKind.COUNT_GREATER_THAN_ZERO, "items"),
        ("items.Count() > 0", ContractAssertionKind.COUNT_GREATER_THAN_ZERO, "items"),
        ("items.Length > 0", ContractAssertionKind.COUNT_GREATER_THAN_ZERO, "items"),
        ("items.Any()", ContractAssertionKind.COUNT_GREATER_THAN_ZERO, "items"),
        ("!string.IsNullOrEmpty(title)", ContractAssertionKind.IS_NOT_EMPTY_STRING, "title"),
        ("!String.IsNullOrWhiteSpace(title)", ContractAssertionKind.IS_NOT_EMPTY_STRING, "title"),
    ])
    def test_recognised_shapes(self, expression, kind, arg):
        assertion = classify_assertion(expression)
        assert assertion.kind is kind
        assert assertion.argument_name == arg
        assert assertion.raw_expression == expression

    def test_unrecognised_shape_keeps_raw_text(self):
        assertion = classify_assertion("x.IsValid && y < 3")
        assert assertion.kind is ContractAssertionKind.OTHER
        assert assertion.argument_name is None
        assert assertion.raw_expression == "x.IsValid && y < 3"

    def test_whitespace_is_ignored_for_matching(self):
        assert classify_assertion("name\n    != null").kind is ContractAssertionKind.IS_NOT_NULL


# =========================================================================
# Tests: helpers
# =========================================================================

class TestHelpers:
    def test_restrict(self):
        assert restrict([1, 2, 3, 4], [lambda x: x == 2, lambda x: x > 3]) == [1, 3]

    def test_comment_summary_and_first_sentence(self):
        comment = "/// <summary>\n/// Gets the name. Second\n/// sentence.\n/// </summary>"
        assert comment_summary(comment) == "Gets the name. Second sentence."
        assert first_sentence(comment_summary(comment)) == "Gets the name."

    def test_comment_summary_without_summary_tag(self):
        assert comment_summary("/// Plain text") == "Plain text"
        assert comment_summary(None) is None

    def test_remove_param_docs(self):
        comment = (
            "/// <summary>\n/// Creates it.\n/// </summary>\n"
            '/// <param name="log">The log.</param>\n'
            '/// <param name="name">The name.</param>'
        )
        cleaned = remove_param_docs(comment, ["log"])
        assert 'name="log"' not in cleaned
        assert '/// <param name="name">The name.</param>' in cleaned
        assert cleaned.startswith("/// <summary>")

    def test_remove_multiline_param_docs(self):
        comment = (
            "/// <summary>Ctor.</summary>\n"
            '/// <param name="log">\n'
            "/// The logger.\n"
            "/// </param>\n"
            '/// <param name="name">Name.</param>'
        )
        cleaned = remove_param_docs(comment, ["log"])
        assert cleaned == '/// <summary>Ctor.</summary>\n/// <param name="name">Name.</param>'

    def test_remove_param_docs_keeps_other_multiline_params(self):
        comment = (
            '/// <param name="name">\n'
            "/// The name.\n"
            "/// </param>\n"
            '/// <param name="log">The log.</param>'
        )
        assert remove_param_docs(comment, ["log"]) == (
            '/// <param name="name">\n/// The name.\n/// </param>'
        )

    def test_disposed_flag(self, conv):
        assert conv.is_disposed_flag("_isDisposed")
        assert conv.is_disposed_flag("IsDisposed")
        assert not conv.is_disposed_flag("_disposed")
