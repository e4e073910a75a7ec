"""Intermediate model shared by extraction and rendering.

Plain immutable snapshots of one translated class. Built once by
:class:`~classloom.core.translator.extraction.ModelExtractor`, read by
:class:`~classloom.core.translator.renderer.ClassRenderer`, then dropped.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class GetterKind(Enum):
    """How a property getter reads its value."""
    BACKING_FIELD = "backing_field"   # returns its own backing field (or has no body)
    MODEL_PROXY = "model_proxy"       # returns <model field>.<SameName>
    CUSTOM = "custom"                 # anything else


class SetterKind(Enum):
    """How a property setter stores its value."""
    BACKING_FIELD = "backing_field"   # restricted visibility, plain store
    CUSTOM = "custom"


class ContractAssertionKind(Enum):
    """Recognised precondition shapes, in matching priority order."""
    IS_NOT_NULL = "is_not_null"
    GREATER_THAN_ZERO = "greater_than_zero"
    GREATER_OR_EQUAL_THAN_ZERO = "greater_or_equal_than_zero"
    COUNT_GREATER_THAN_ZERO = "count_greater_than_zero"
    IS_NOT_EMPTY_STRING = "is_not_empty_string"
    OTHER = "other"


@dataclass(frozen=True)
class ContractAssertion:
    argument_name: Optional[str]
    kind: ContractAssertionKind
    raw_expression: str


@dataclass(frozen=True)
class Argument:
    name: str
    type: str
    default: Optional[str] = None


@dataclass(frozen=True)
class Field:
    name: str
    type: str
    initializer: Optional[str] = None
    comment: Optional[str] = None


@dataclass(frozen=True)
class Property:
    """A property with its accessor classification.

    ``getter`` is None when the property has no getter, ``setter`` is None
    when it has no setter. ``proxy_target`` names the field a MODEL_PROXY
    getter reads through.
    """
    name: str
    type: str
    comment: Optional[str] = None
    getter: Optional[GetterKind] = None
    setter: Optional[SetterKind] = None
    setter_assertions: Tuple[ContractAssertion, ...] = ()
    proxy_target: Optional[str] = None


@dataclass(frozen=True)
class Method:
    name: str
    return_type: str
    is_private: bool = False
    arguments: Tuple[Argument, ...] = ()
    comment: Optional[str] = None
    assertions: Tuple[ContractAssertion, ...] = ()


@dataclass(frozen=True)
class Constructor:
    arguments: Tuple[Argument, ...] = ()
    base_call: Tuple[str, ...] = ()
    comment: Optional[str] = None
    assertions: Tuple[ContractAssertion, ...] = ()


@dataclass(frozen=True)
class ClassModel:
    """One source class, ready to render."""
    name: str
    base_type: Optional[str] = None
    interfaces: Tuple[str, ...] = ()
    comment: Optional[str] = None
    constructor: Optional[Constructor] = None
    fields: Tuple[Field, ...] = ()
    properties: Tuple[Property, ...] = ()
    methods: Tuple[Method, ...] = ()
