"""Translation error taxonomy."""

from typing import Sequence


class TranslationError(Exception):
    """Base class for failures of a single translation."""


class StructuralError(TranslationError, ValueError):
    """The input does not contain exactly one top-level class."""


class NoClassFound(StructuralError):
    def __init__(self, file_path: str = "<string>"):
        super().__init__(f"No class declaration found in {file_path}")
        self.file_path = file_path


class MultipleClassesFound(StructuralError):
    def __init__(self, class_names: Sequence[str], file_path: str = "<string>"):
        super().__init__(
            f"Expected one class declaration in {file_path}, found {len(class_names)}: "
            f"{', '.join(class_names)}"
        )
        self.class_names = list(class_names)
        self.file_path = file_path


class UnrecognizedAccessorShape(TranslationError, RuntimeError):
    """A property reached rendering without a getter classification."""

    def __init__(self, property_name: str):
        super().__init__(f"Property '{property_name}' has no getter classification")
        self.property_name = property_name


class ConfigError(TranslationError, ValueError):
    """A convention configuration file is malformed."""
