"""Naming, typing and classification rules for C# → TypeScript.

Every function here is pure: the same inputs always give the same output,
and unknown shapes fall through unchanged instead of failing. The tables
come from the :class:`ConventionConfig` the engine is built with.
"""

import re
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, TypeVar

from .config import DEFAULT_CONVENTIONS, ConventionConfig
from .models import ContractAssertion, ContractAssertionKind

T = TypeVar("T")

_GENERIC_RE = re.compile(r"^(?P<outer>[A-Za-z_][\w.]*)\s*<(?P<args>.+)>$", re.DOTALL)
_LOWER_GENERIC_RE = re.compile(r"^[a-z][a-z0-9]*$")
_NEW_RE = re.compile(r"^new\s+(?P<type>[^(]+?)\s*\((?P<args>.*)\)$", re.DOTALL)
_SUMMARY_RE = re.compile(r"<summary>(?P<text>.+?)</summary>", re.DOTALL)
_SENTENCE_RE = re.compile(r"^(?P<sentence>.+?[.!?])(?=\s|$)", re.DOTALL)
_PARAM_OPEN_RE = re.compile(r'^\s*///\s*<param\s+name="(?P<name>[^"]*)"\s*>')
_PARAM_CLOSE = "</param>"

# Argument reference inside an assertion, optionally qualified with `this.`
_ARG = r"(?:this\.)?@?(?P<arg>[A-Za-z_]\w*)"

# Ordered: the first matching pattern decides the kind
_ASSERTION_PATTERNS: Tuple[Tuple[ContractAssertionKind, re.Pattern], ...] = (
    (ContractAssertionKind.IS_NOT_NULL, re.compile(rf"^{_ARG}\s*!=\s*null$")),
    (ContractAssertionKind.IS_NOT_NULL, re.compile(rf"^null\s*!=\s*{_ARG}$")),
    (ContractAssertionKind.GREATER_THAN_ZERO, re.compile(rf"^{_ARG}\s*>\s*0$")),
    (ContractAssertionKind.GREATER_OR_EQUAL_THAN_ZERO, re.compile(rf"^{_ARG}\s*>=\s*0$")),
    (
        ContractAssertionKind.COUNT_GREATER_THAN_ZERO,
        re.compile(rf"^{_ARG}\s*\.\s*(?:Count|Length)(?:\s*\(\s*\))?\s*>\s*0$"),
    ),
    (ContractAssertionKind.COUNT_GREATER_THAN_ZERO, re.compile(rf"^{_ARG}\s*\.\s*Any\s*\(\s*\)$")),
    (
        ContractAssertionKind.IS_NOT_EMPTY_STRING,
        re.compile(rf"^!\s*[Ss]tring\s*\.\s*IsNullOr(?:Empty|WhiteSpace)\s*\(\s*{_ARG}\s*\)$"),
    ),
)


def restrict(items: Iterable[T], restrictions: Sequence[Callable[[T], bool]]) -> List[T]:
    """Drop every item for which any restriction returns True."""
    return [item for item in items if not any(fx(item) for fx in restrictions)]


def split_type_arguments(args: str) -> List[str]:
    """Split ``A, B<C, D>, E`` on top-level commas only."""
    parts = []
    depth = 0
    current = []
    for char in args:
        if char in "<([":
            depth += 1
        elif char in ">)]":
            depth -= 1
        if char == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    tail = "".join(current).strip()
    if tail or parts:
        parts.append(tail)
    return parts


def split_generic(type_name: str) -> Optional[Tuple[str, List[str]]]:
    """Return ``(outer, [args])`` for ``Outer<args>``, else None.

    Only matches when the first ``<`` closes at the very end, so
    ``A<B>.C<D>`` is not mistaken for a generic of ``A``.
    """
    match = _GENERIC_RE.match(type_name)
    if not match:
        return None

    depth = 0
    start = type_name.index("<")
    for pos in range(start, len(type_name)):
        char = type_name[pos]
        if char == "<":
            depth += 1
        elif char == ">":
            depth -= 1
            if depth == 0 and pos != len(type_name) - 1:
                return None
    return match.group("outer"), split_type_arguments(match.group("args"))


def comment_summary(comment: Optional[str]) -> Optional[str]:
    """Return the bare ``<summary>`` text of a doc comment, flattened to one line."""
    if not comment:
        return None
    match = _SUMMARY_RE.search(comment)
    raw = match.group("text") if match else comment
    text = " ".join(raw.replace("///", " ").split())
    return text or None


def first_sentence(text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    match = _SENTENCE_RE.match(text)
    return match.group("sentence") if match else text


def remove_param_docs(comment: Optional[str], names: Iterable[str]) -> Optional[str]:
    """Drop ``<param name="...">`` entries for the given argument names.

    An entry runs from its opening tag through the next ``</param>``, which
    may sit on a later ``///`` line.
    """
    if not comment:
        return comment

    dropped = set(names)
    lines = []
    in_dropped_param = False
    for line in comment.split("\n"):
        if in_dropped_param:
            in_dropped_param = _PARAM_CLOSE not in line
            continue

        match = _PARAM_OPEN_RE.match(line)
        if match and match.group("name") in dropped:
            in_dropped_param = _PARAM_CLOSE not in line[match.end():]
            continue

        if line.strip():
            lines.append(line)
    return "\n".join(lines) or None


def classify_assertion(expression: str) -> ContractAssertion:
    """Classify one precondition expression.

    Patterns are tried in priority order; the raw text is always kept so
    unrecognised checks can still be rendered verbatim.
    """
    normalized = " ".join(expression.split())
    for kind, pattern in _ASSERTION_PATTERNS:
        match = pattern.match(normalized)
        if match:
            return ContractAssertion(
                argument_name=match.group("arg"),
                kind=kind,
                raw_expression=expression,
            )
    return ContractAssertion(argument_name=None, kind=ContractAssertionKind.OTHER, raw_expression=expression)


class ConventionEngine:
    """Maps C# identifiers, types and initializers onto TypeScript conventions."""

    def __init__(self, config: ConventionConfig = DEFAULT_CONVENTIONS):
        self.config = config

    # =========================================================================
    # Identifiers
    # =========================================================================

    def convert_name(self, name: str, is_private: bool) -> str:
        """Apply the field/property naming convention.

        ``_FooBar`` / ``FooBar`` become ``fooBar``, or ``_fooBar`` when
        private; then the literal renames apply.
        """
        marker = self.config.private_marker
        bare = name.lstrip(marker)
        if bare:
            bare = bare[0].lower() + bare[1:]
        result = marker + bare if is_private else bare

        suffix = self.config.stripped_name_suffix
        if suffix and result.endswith(suffix) and result[: -len(suffix)].lstrip(marker):
            return result[: -len(suffix)]

        return self.config.name_renames.get(result, result)

    def backing_field_name(self, property_name: str) -> str:
        return self.convert_name(property_name, True)

    def is_interface_name(self, type_name: str) -> bool:
        """``I`` followed by an upper-case letter marks an interface."""
        prefix = self.config.interface_prefix
        bare = type_name.split("<")[0].split(".")[-1].strip()
        return (
            len(bare) > len(prefix)
            and bare.startswith(prefix)
            and bare[len(prefix)].isupper()
        )

    # =========================================================================
    # Types
    # =========================================================================

    def convert_type(self, type_name: str, use_interface: bool = True) -> str:
        """Map a C# type string onto its TypeScript spelling.

        Rules, first match wins: literal/view-model renames (then matching
        continues), primitive table, nullable, arrays and list wrappers,
        observable wrappers, command wrappers, lower-case generics. Anything
        else comes back unchanged. Type arguments recurse through the whole
        pipeline.
        """
        config = self.config
        name = type_name.strip()
        if not name:
            return type_name

        name = config.type_renames.get(name, name)
        source_suffix, target_suffix = config.view_model_suffix
        if name.endswith(source_suffix):
            name = name[: -len(source_suffix)] + target_suffix

        basic = config.basic_types.get(name.lower())
        if basic is not None:
            return basic

        if name.endswith("?"):
            return self.convert_type(name[:-1], use_interface)

        if name.endswith("[]"):
            return self.convert_type(name[:-2], use_interface) + "[]"

        if name in config.command_wrappers:
            return "Command<any>"

        generic = split_generic(name)
        if generic is None:
            return name
        outer, args = generic

        if outer in config.list_wrappers and len(args) == 1:
            return self.convert_type(args[0], use_interface) + "[]"

        if outer in config.observable_wrappers and len(args) == 1:
            prefix = config.interface_prefix if use_interface else ""
            return f"{prefix}Observable<{self.convert_type(args[0], use_interface)}>"

        if outer in config.command_wrappers and len(args) == 1:
            return f"Command<{self.convert_type(args[0], use_interface)}>"

        if _LOWER_GENERIC_RE.match(outer):
            converted = ", ".join(self.convert_type(arg, use_interface) for arg in args)
            return f"{outer}<{converted}>"

        return name

    def is_list_type(self, type_name: str) -> bool:
        name = type_name.strip()
        if name.endswith("[]"):
            return True
        generic = split_generic(name)
        return generic is not None and generic[0] in self.config.list_wrappers and len(generic[1]) == 1

    @staticmethod
    def is_observable(converted_type: str) -> bool:
        """True for converted stream types (``IObservable<T>``/``Observable<T>``)."""
        return converted_type.startswith(("IObservable<", "Observable<"))

    @staticmethod
    def is_no_value(converted_type: str) -> bool:
        return converted_type.strip() == "void"

    # =========================================================================
    # Initializers
    # =========================================================================

    def convert_initializer(self, expression: Optional[str]) -> Optional[str]:
        """Rewrite ``new T(args)``; list types become ``[]``."""
        if expression is None:
            return None
        match = _NEW_RE.match(expression.strip())
        if not match:
            return expression

        type_name = match.group("type").strip()
        if self.is_list_type(type_name):
            return "[]"
        return f"new {self.convert_type(type_name, use_interface=False)}({match.group('args')})"

    # =========================================================================
    # Restriction predicates
    # =========================================================================

    def is_log_service(self, type_name: str) -> bool:
        return type_name.strip() == self.config.log_service_type

    def is_disposed_flag(self, field_name: str) -> bool:
        return self.convert_name(field_name, True) == self.config.disposed_flag

    def is_reserved_assertion(self, assertion: ContractAssertion) -> bool:
        return assertion.argument_name == self.config.reserved_assertion_argument

    def is_structural_method(self, method_name: str) -> bool:
        return method_name in self.config.method_denylist

    def is_disposable_member(self, converted_type: str) -> bool:
        return converted_type == self.config.aggregate_disposable_type or self.is_observable(converted_type)
