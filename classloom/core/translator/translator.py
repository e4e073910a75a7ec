"""C# class → TypeScript skeleton translation.

Pipeline: tree-sitter parse → :class:`ModelExtractor` →
:class:`ClassRenderer`. One call handles one file and keeps no state
between calls.
"""

import logging
from typing import Optional

from ..ast_parser import parse_source
from .config import DEFAULT_CONVENTIONS, ConventionConfig
from .conventions import ConventionEngine
from .extraction import ModelExtractor
from .models import ClassModel
from .renderer import ClassRenderer

logger = logging.getLogger(__name__)


class Translator:
    """Translates class definitions from C# to TypeScript."""

    def __init__(self, config: ConventionConfig = DEFAULT_CONVENTIONS):
        self.conventions = ConventionEngine(config)
        self.extractor = ModelExtractor(self.conventions)
        self.renderer = ClassRenderer(self.conventions)

    def parse_model(self, source_text: str, file_path: str = "<string>") -> ClassModel:
        """Parse C# source and extract its single class.

        Raises:
            NoClassFound: If the source declares no top-level class
            MultipleClassesFound: If it declares more than one
        """
        result = parse_source(source_text, file_path, "csharp")
        for error in result.errors:
            logger.debug(f"{error.file_path}: {error.message}")
        return self.extractor.extract(result)

    def translate(self, source_text: str, file_path: str = "<string>") -> str:
        """Translate one C# file's class into a TypeScript class skeleton.

        Args:
            source_text: Full text of the C# file
            file_path: Path used in log and error messages

        Returns:
            The rendered TypeScript source

        Raises:
            StructuralError: If the file does not hold exactly one class
            UnrecognizedAccessorShape: If a property cannot be rendered
        """
        model = self.parse_model(source_text, file_path)
        return self.renderer.render(model)


def translate(source_text: str, config: Optional[ConventionConfig] = None) -> str:
    """Translate C# source with the given (or default) conventions."""
    return Translator(config or DEFAULT_CONVENTIONS).translate(source_text)
