"""Line-oriented source text builder.

Handles indentation, brace blocks and blank-line spacing so renderers only
describe structure. Knows nothing about the translated model.
"""

from contextlib import contextmanager
from typing import Iterator, List

REGION_RULE = "// -----------------------------------"


class SourceLineBuilder:
    """Collects the pieces of one line; they are joined with single spaces."""

    def __init__(self):
        self._parts: List[str] = []

    def append(self, part: str) -> "SourceLineBuilder":
        if part:
            self._parts.append(part.strip())
        return self

    def __str__(self) -> str:
        return " ".join(self._parts)


class SourceBuilder:
    """Accumulates indented lines of code.

    Blocks are scoped with ``with``::

        with sb.line() as header:
            header.append("class Foo")
        with sb.nested_block():
            sb.append("x: number;")

    renders as ``class Foo {``, the indented body and ``}``. On output,
    runs of blank lines collapse to one, blank lines next to braces and at
    either end are dropped, and a lone ``{`` joins the preceding line.
    """

    def __init__(self, indent: str = "    ", separator: str = "\n"):
        self._indent = indent
        self._separator = separator
        self._nesting_level = 0
        self._lines: List[str] = []

    @property
    def nesting_level(self) -> int:
        return self._nesting_level

    def append(self, text: str = "") -> None:
        """Append a line (or several, split on newlines) at the current indentation."""
        for line in text.split("\n"):
            if not line.strip():
                self._lines.append("")
            elif line.strip() == "{":
                self._lines.append("{")
            else:
                self._lines.append(self._indent * self._nesting_level + line)

    def append_lines(self, lines: List[str]) -> None:
        for line in lines:
            self.append(line)

    def append_blank(self) -> None:
        self._lines.append("")

    def append_region_header(self, region_name: str) -> None:
        """Append a three-line region banner surrounded by blank lines."""
        with self.spaced_block():
            self.append(REGION_RULE)
            self.append(f"// {region_name}")
            self.append(REGION_RULE)

    @contextmanager
    def nested_block(self) -> Iterator["SourceBuilder"]:
        """Open a brace block; the body is indented one level deeper."""
        self.append("{")
        self._nesting_level += 1
        try:
            yield self
        finally:
            self._nesting_level -= 1
            self.append("}")

    @contextmanager
    def spaced_block(self) -> Iterator["SourceBuilder"]:
        """Surround the body with blank lines."""
        self.append_blank()
        try:
            yield self
        finally:
            self.append_blank()

    @contextmanager
    def line(self) -> Iterator[SourceLineBuilder]:
        """Build one line from several pieces."""
        builder = SourceLineBuilder()
        try:
            yield builder
        finally:
            self.append(str(builder))

    def to_string(self) -> str:
        result: List[str] = []
        for line in self._lines:
            stripped = line.strip()

            if not stripped:
                if result and result[-1] and not result[-1].endswith("{"):
                    result.append("")
                continue

            if stripped == "{" and result and result[-1]:
                result[-1] = result[-1].rstrip() + " {"
                continue

            if stripped.startswith("}"):
                while result and not result[-1]:
                    result.pop()

            result.append(line)

        while result and not result[-1]:
            result.pop()

        return self._separator.join(result)

    def __str__(self) -> str:
        return self.to_string()
