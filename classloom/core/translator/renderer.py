"""Rendering stage: intermediate model → TypeScript skeleton.

Sections are emitted in a fixed order inside the class body: class
documentation, Fields, Constructor, Properties, Events, Methods, Event
handlers, the IDisposable block and the IEquatable block. A section with
nothing to show is omitted together with its region header.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .conventions import (
    ConventionEngine,
    comment_summary,
    first_sentence,
    remove_param_docs,
    restrict,
)
from .errors import UnrecognizedAccessorShape
from .models import (
    Argument,
    ClassModel,
    ContractAssertion,
    ContractAssertionKind,
    GetterKind,
    Method,
    Property,
    SetterKind,
)
from .source_builder import SourceBuilder

logger = logging.getLogger(__name__)

TODO_GETTER = "// TODO: implement getter"
TODO_SETTER = "// TODO: implement setter"
TODO_BODY = "// TODO: implement"
TODO_CLEANUP = "// TODO: custom cleanup"
TODO_EQUALS = "// TODO: implement equality comparison"
REVIEW_MARKER = "// FIXME: review assertion"


@dataclass(frozen=True)
class RenderedField:
    """A field as it appears in the output, after naming/type conventions."""

    name: str
    type: str
    initializer: Optional[str] = None
    comment: Optional[str] = None


def render_assertions(
    assertions: Sequence[ContractAssertion], conventions: ConventionEngine
) -> List[str]:
    """Render a list of contract assertions as runtime checks.

    A not-null check and a count check on the same argument merge into a
    single ``Contract.notEmpty`` line at the not-null check's position,
    whichever of the two came first.
    """
    kept = restrict(assertions, [conventions.is_reserved_assertion])

    paired: Dict[int, int] = {}
    consumed = set()
    for i, assertion in enumerate(kept):
        if assertion.kind is not ContractAssertionKind.IS_NOT_NULL:
            continue
        for j, other in enumerate(kept):
            if (
                j not in consumed
                and other.kind is ContractAssertionKind.COUNT_GREATER_THAN_ZERO
                and other.argument_name == assertion.argument_name
            ):
                paired[i] = j
                consumed.add(j)
                break

    lines = []
    for i, assertion in enumerate(kept):
        if i in consumed:
            continue
        arg = assertion.argument_name
        kind = assertion.kind
        raw = " ".join(assertion.raw_expression.split())
        if kind is ContractAssertionKind.IS_NOT_NULL:
            lines.append(f"Contract.notEmpty({arg});" if i in paired else f"Contract.defined({arg});")
        elif kind is ContractAssertionKind.COUNT_GREATER_THAN_ZERO:
            lines.append(f"Contract.requires({arg}.length > 0);")
        elif kind is ContractAssertionKind.IS_NOT_EMPTY_STRING:
            lines.append(f"Contract.notBlank({arg});")
        elif kind in (ContractAssertionKind.GREATER_THAN_ZERO, ContractAssertionKind.GREATER_OR_EQUAL_THAN_ZERO):
            lines.append(f"Contract.requires({raw});")
        else:
            lines.append(f"Contract.requires({raw}); {REVIEW_MARKER}")
    return lines


class ClassRenderer:
    """Renders a :class:`ClassModel` as a TypeScript class skeleton."""

    def __init__(self, conventions: Optional[ConventionEngine] = None):
        self.conventions = conventions or ConventionEngine()

    def render(self, model: ClassModel) -> str:
        sb = SourceBuilder()

        with sb.line() as header:
            header.append(f"class {model.name}")
            if model.base_type:
                header.append(f"extends {model.base_type}")
            if model.interfaces:
                header.append(f"implements {', '.join(model.interfaces)}")

        with sb.nested_block():
            if model.comment:
                sb.append(model.comment)

            fields = self.collect_fields(model)
            emitted = []
            if self._append_fields(sb, fields):
                emitted.append("fields")
            if self._append_constructor(sb, model, fields):
                emitted.append("constructor")
            if self._append_properties(sb, model):
                emitted.append("properties")
            if self._append_events(sb, model):
                emitted.append("events")
            if self._append_methods(sb, model):
                emitted.append("methods")
            if self._append_disposable(sb, model, fields):
                emitted.append("disposable")
            if self._append_equatable(sb, model):
                emitted.append("equatable")

        logger.debug(f"Rendered {model.name} sections: {', '.join(emitted) or 'none'}")
        return sb.to_string()

    # =========================================================================
    # Fields
    # =========================================================================

    def collect_fields(self, model: ClassModel) -> List[RenderedField]:
        """Declared fields plus one backing field per property.

        De-duplicated by converted name (declared fields win), filtered by
        the restriction predicates and sorted by converted name.
        """
        conv = self.conventions
        by_name: Dict[str, RenderedField] = {}
        for fld in model.fields:
            name = conv.convert_name(fld.name, True)
            if name not in by_name:
                by_name[name] = RenderedField(
                    name=name,
                    type=fld.type,
                    initializer=fld.initializer,
                    comment=fld.comment,
                )

        for prop in model.properties:
            name = conv.backing_field_name(prop.name)
            if name not in by_name:
                by_name[name] = RenderedField(name=name, type=prop.type, comment=prop.comment)

        restrictions = [
            lambda f: conv.is_disposed_flag(f.name),
            lambda f: conv.is_log_service(f.type),
        ]
        return sorted(restrict(by_name.values(), restrictions), key=lambda f: f.name)

    def _append_fields(self, sb: SourceBuilder, fields: Sequence[RenderedField]) -> bool:
        if not fields:
            return False

        sb.append_region_header("Fields")
        for fld in fields:
            with sb.spaced_block():
                summary = first_sentence(comment_summary(fld.comment))
                if summary:
                    sb.append(f"// {summary}")
                sb.append(f"private {fld.name}: {self.conventions.convert_type(fld.type)};")
        return True

    # =========================================================================
    # Constructor
    # =========================================================================

    def _append_constructor(
        self, sb: SourceBuilder, model: ClassModel, fields: Sequence[RenderedField]
    ) -> bool:
        ctor = model.constructor
        if ctor is None:
            return False
        conv = self.conventions

        dropped = [a for a in ctor.arguments if conv.is_log_service(a.type)]
        arguments = restrict(ctor.arguments, [lambda a: conv.is_log_service(a.type)])

        sb.append_region_header("Constructor")
        comment = remove_param_docs(ctor.comment, [a.name for a in dropped])
        if comment:
            sb.append(comment)

        sb.append(f"constructor({self.render_arguments(arguments)})")
        with sb.nested_block():
            if model.base_type or ctor.base_call:
                # Base-call arguments are forwarded as written, logging ones included
                with sb.spaced_block():
                    sb.append(f"super({', '.join(ctor.base_call)});")

            with sb.spaced_block():
                sb.append_lines(render_assertions(ctor.assertions, conv))

            with sb.spaced_block():
                for fld in fields:
                    if fld.initializer is not None:
                        sb.append(f"this.{fld.name} = {conv.convert_initializer(fld.initializer)};")

            with sb.spaced_block():
                field_names = {f.name for f in fields}
                for arg in arguments:
                    field_name = conv.convert_name(arg.name, True)
                    if field_name in field_names:
                        sb.append(f"this.{field_name} = {conv.convert_name(arg.name, False)};")
        return True

    def render_arguments(self, arguments: Sequence[Argument]) -> str:
        conv = self.conventions
        parts = []
        for arg in arguments:
            part = f"{conv.convert_name(arg.name, False)}: {conv.convert_type(arg.type)}"
            if arg.default is not None:
                part += f" = {conv.convert_initializer(arg.default)}"
            parts.append(part)
        return ", ".join(parts)

    # =========================================================================
    # Properties and events
    # =========================================================================

    def _is_event(self, prop: Property) -> bool:
        return self.conventions.is_observable(self.conventions.convert_type(prop.type))

    @staticmethod
    def _pascal(name: str) -> str:
        return name[:1].upper() + name[1:]

    def _append_properties(self, sb: SourceBuilder, model: ClassModel) -> bool:
        properties = restrict(model.properties, [self._is_event])
        if not properties:
            return False

        conv = self.conventions
        sb.append_region_header("Properties")
        for prop in properties:
            backing = conv.backing_field_name(prop.name)
            type_name = conv.convert_type(prop.type)

            with sb.spaced_block():
                if prop.comment:
                    sb.append(prop.comment)
                sb.append(f"get{self._pascal(prop.name)}(): {type_name}")
                with sb.nested_block():
                    sb.append(self._getter_body(prop, backing))

            if prop.setter is None:
                continue

            with sb.spaced_block():
                sb.append(f"set{self._pascal(prop.name)}(value: {type_name})")
                with sb.nested_block():
                    if prop.setter is SetterKind.BACKING_FIELD:
                        sb.append(f"this.{backing} = value;")
                    else:
                        with sb.spaced_block():
                            sb.append_lines(render_assertions(prop.setter_assertions, conv))
                        sb.append(TODO_SETTER)
        return True

    def _getter_body(self, prop: Property, backing: str) -> str:
        if prop.getter is GetterKind.CUSTOM:
            return TODO_GETTER
        if prop.getter is GetterKind.BACKING_FIELD:
            return f"return this.{backing};"
        if prop.getter is GetterKind.MODEL_PROXY:
            target = self.conventions.convert_name(prop.proxy_target or "model", True)
            return f"return this.{target}.get{self._pascal(prop.name)}();"
        raise UnrecognizedAccessorShape(prop.name)

    def _append_events(self, sb: SourceBuilder, model: ClassModel) -> bool:
        events = [p for p in model.properties if self._is_event(p)]
        if not events:
            return False

        conv = self.conventions
        sb.append_region_header("Events")
        for prop in events:
            type_name = conv.convert_type(prop.type)
            signature = f"get {conv.convert_name(prop.name, False)}()"
            if not conv.is_no_value(type_name):
                signature += f": {type_name}"

            with sb.spaced_block():
                if prop.comment:
                    sb.append(prop.comment)
                sb.append(signature)
                with sb.nested_block():
                    sb.append(f"return this.{conv.backing_field_name(prop.name)};")
        return True

    # =========================================================================
    # Methods
    # =========================================================================

    def is_event_handler(self, method: Method) -> bool:
        return (
            method.is_private
            and self.conventions.is_no_value(self.conventions.convert_type(method.return_type))
            and len(method.arguments) == 1
        )

    def _append_methods(self, sb: SourceBuilder, model: ClassModel) -> bool:
        methods = restrict(model.methods, [lambda m: self.conventions.is_structural_method(m.name)])
        regular = [m for m in methods if not self.is_event_handler(m)]
        handlers = [m for m in methods if self.is_event_handler(m)]

        for region, group in (("Methods", regular), ("Event handlers", handlers)):
            if not group:
                continue
            sb.append_region_header(region)
            for method in group:
                self._append_method(sb, method)

        return bool(methods)

    def _append_method(self, sb: SourceBuilder, method: Method) -> None:
        conv = self.conventions
        return_type = conv.convert_type(method.return_type)

        with sb.spaced_block():
            if method.comment:
                sb.append(method.comment)

            with sb.line() as signature:
                if method.is_private:
                    signature.append("private")
                head = f"{conv.convert_name(method.name, method.is_private)}({self.render_arguments(method.arguments)})"
                if not conv.is_no_value(return_type):
                    head += f": {return_type}"
                signature.append(head)

            with sb.nested_block():
                with sb.spaced_block():
                    sb.append_lines(render_assertions(method.assertions, conv))
                sb.append(TODO_BODY)

    # =========================================================================
    # Synthesized blocks
    # =========================================================================

    def is_disposable(self, model: ClassModel) -> bool:
        config = self.conventions.config
        return config.disposable_interface in model.interfaces or any(
            m.name == config.cleanup_method for m in model.methods
        )

    def is_equatable(self, model: ClassModel) -> bool:
        marker = self.conventions.config.equatable_marker
        return any(i.startswith(marker) for i in model.interfaces)

    def _append_disposable(
        self, sb: SourceBuilder, model: ClassModel, fields: Sequence[RenderedField]
    ) -> bool:
        if not self.is_disposable(model):
            return False

        conv = self.conventions
        flag = conv.config.disposed_flag
        sb.append_region_header("IDisposable implementation")
        with sb.spaced_block():
            sb.append(f"private {flag}: boolean;")

        sb.append("dispose()")
        with sb.nested_block():
            sb.append(f"if (this.{flag})")
            with sb.nested_block():
                sb.append("return;")

            with sb.spaced_block():
                for fld in fields:
                    if conv.is_disposable_member(conv.convert_type(fld.type)):
                        sb.append(f"this.{fld.name}.dispose();")

            with sb.spaced_block():
                sb.append(TODO_CLEANUP)

            sb.append(f"this.{flag} = true;")
        return True

    def _append_equatable(self, sb: SourceBuilder, model: ClassModel) -> bool:
        if not self.is_equatable(model):
            return False

        sb.append_region_header("IEquatable implementation")
        sb.append(f"equals(other: {model.name}): boolean")
        with sb.nested_block():
            sb.append(TODO_EQUALS)
        return True
