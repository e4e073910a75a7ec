"""C# → TypeScript class skeleton translator.

Public API:
    Translator(config).translate(source) → str
    translate(source, config) → str
    load_conventions(path) → ConventionConfig
"""

from .config import DEFAULT_CONVENTIONS, ConventionConfig, load_conventions
from .conventions import ConventionEngine
from .errors import (
    ConfigError,
    MultipleClassesFound,
    NoClassFound,
    StructuralError,
    TranslationError,
    UnrecognizedAccessorShape,
)
from .extraction import ModelExtractor
from .renderer import ClassRenderer
from .source_builder import SourceBuilder
from .translator import Translator, translate

__all__ = [
    "ClassRenderer",
    "ConfigError",
    "ConventionConfig",
    "ConventionEngine",
    "DEFAULT_CONVENTIONS",
    "ModelExtractor",
    "MultipleClassesFound",
    "NoClassFound",
    "SourceBuilder",
    "StructuralError",
    "TranslationError",
    "Translator",
    "UnrecognizedAccessorShape",
    "load_conventions",
    "translate",
]
