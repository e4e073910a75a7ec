"""Convention tables for the C# → TypeScript translator.

All lookup tables the rule engine consults live in one frozen
:class:`ConventionConfig`. ``DEFAULT_CONVENTIONS`` carries the built-in
values; :func:`load_conventions` overlays a YAML file (same layout as
``config/conventions.yaml``) on top of them.
"""

import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)


def _frozen(mapping: Dict[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(mapping))


# Primitive type equivalents, matched case-insensitively
_BASIC_TYPES = {
    "int": "number",
    "uint": "number",
    "long": "number",
    "ulong": "number",
    "short": "number",
    "ushort": "number",
    "byte": "number",
    "sbyte": "number",
    "float": "number",
    "double": "number",
    "decimal": "number",
    "single": "number",
    "int32": "number",
    "int64": "number",
    "bool": "boolean",
    "boolean": "boolean",
    "object": "any",
    "string": "string",
    "char": "string",
    "imagesource": "string",
    "bitmapimage": "string",
    "bitmap": "string",
    "image": "string",
}

_TYPE_RENAMES = {
    "ViewModelBase": "BaseVM",
    "BaseViewModel": "BaseVM",
    "ReactiveViewModel": "BaseVM",
}

_NAME_RENAMES = {
    "_subscribings": "_subscriptions",
}


@dataclass(frozen=True)
class ConventionConfig:
    """Immutable lookup tables for naming, typing and filtering rules."""

    basic_types: Mapping[str, str] = field(default_factory=lambda: _frozen(_BASIC_TYPES))
    type_renames: Mapping[str, str] = field(default_factory=lambda: _frozen(_TYPE_RENAMES))
    view_model_suffix: Tuple[str, str] = ("ViewModel", "VM")
    list_wrappers: Tuple[str, ...] = (
        "List",
        "IList",
        "IEnumerable",
        "ICollection",
        "IReadOnlyList",
        "IReadOnlyCollection",
        "ObservableCollection",
    )
    observable_wrappers: Tuple[str, ...] = (
        "Subject",
        "BehaviorSubject",
        "ReplaySubject",
        "IObservable",
    )
    command_wrappers: Tuple[str, ...] = ("DelegateCommand", "RelayCommand")

    name_renames: Mapping[str, str] = field(default_factory=lambda: _frozen(_NAME_RENAMES))
    stripped_name_suffix: str = "Subject"
    private_marker: str = "_"

    interface_prefix: str = "I"
    log_service_type: str = "ILogService"
    disposed_flag: str = "_isDisposed"
    reserved_assertion_argument: str = "log"
    method_denylist: Tuple[str, ...] = ("Dispose", "Equals", "GetHashCode", "ObjectInvariant")
    disposable_interface: str = "IDisposable"
    cleanup_method: str = "Dispose"
    equatable_marker: str = "IEquatable"
    aggregate_disposable_type: str = "CompositeDisposable"
    assertion_helper: str = "Contract.Requires"
    restricted_setter_modifiers: Tuple[str, ...] = ("private", "protected")


DEFAULT_CONVENTIONS = ConventionConfig()


def _coerce(name: str, current: Any, value: Any) -> Any:
    """Check an overlay value against the default's shape."""
    if isinstance(current, Mapping):
        if not isinstance(value, dict):
            raise ConfigError(f"'{name}' must be a mapping")
        merged = dict(current)
        merged.update({str(k): str(v) for k, v in value.items()})
        if name == "basic_types":
            merged = {k.lower(): v for k, v in merged.items()}
        return _frozen(merged)

    if isinstance(current, tuple):
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigError(f"'{name}' must be a list of strings")
        if name == "view_model_suffix" and len(value) != 2:
            raise ConfigError("'view_model_suffix' must be [source_suffix, target_suffix]")
        return tuple(value)

    if not isinstance(value, str):
        raise ConfigError(f"'{name}' must be a string")
    return value


def load_conventions(
    path: Optional[Union[str, Path]] = None,
    base: ConventionConfig = DEFAULT_CONVENTIONS,
) -> ConventionConfig:
    """Load convention overrides from a YAML file.

    Mapping-valued tables are merged into the defaults, list- and
    string-valued settings replace them.

    Args:
        path: YAML file to read. None returns ``base`` unchanged.
        base: Conventions the file is overlaid on.

    Returns:
        A new ConventionConfig

    Raises:
        ConfigError: If the file is not valid YAML, is not a mapping, or
            names an unknown setting.
    """
    if path is None:
        return base

    config_path = Path(path)
    if not config_path.exists():
        logger.warning(f"Conventions file not found at {config_path}, using defaults")
        return base

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"{config_path} must contain a mapping of settings")

    known = {f.name for f in fields(ConventionConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"Unknown convention settings in {config_path}: {', '.join(unknown)}")

    overrides = {name: _coerce(name, getattr(base, name), value) for name, value in raw.items()}
    logger.debug(f"Loaded {len(overrides)} convention overrides from {config_path}")
    return replace(base, **overrides)
