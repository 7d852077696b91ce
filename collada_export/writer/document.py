"""
Indented text writer for XML documents.

Every line of the document goes through a DocumentWriter, which prefixes it
with the indentation of the current nesting depth.
"""

from contextlib import contextmanager
from typing import Iterator, List
from xml.sax.saxutils import escape, quoteattr


class UnbalancedNestingError(RuntimeError):
    """Raised when a nesting level is closed at root depth."""


def format_attributes(attrs: dict) -> str:
    """Render attributes as ` key="value"`, skipping None values, in insertion order."""
    return "".join(
        f" {key}={quoteattr(str(value))}" for key, value in attrs.items() if value is not None
    )


class DocumentWriter:
    """Accumulates document text with a running indentation prefix."""

    def __init__(self, indent_unit: str = "  ", line_end: str = "\n"):
        """
        Args:
            indent_unit: text added to the prefix per nesting level
            line_end: line terminator
        """
        self.indent_unit = indent_unit
        self.line_end = line_end
        self._prefix = ""
        self._parts: List[str] = []

    @property
    def depth(self) -> int:
        """Current nesting depth, 0 at root."""
        return len(self._prefix) // len(self.indent_unit)

    def push_level(self) -> None:
        self._prefix += self.indent_unit

    def pop_level(self) -> None:
        if not self._prefix:
            raise UnbalancedNestingError("pop_level called at root indentation")
        self._prefix = self._prefix[:-len(self.indent_unit)]

    @contextmanager
    def level(self) -> Iterator[None]:
        """One indentation level, released on every exit path."""
        self.push_level()
        try:
            yield
        finally:
            self.pop_level()

    def line(self, text: str) -> None:
        """Write one indented line."""
        self._parts.append(f"{self._prefix}{text}{self.line_end}")

    def open_tag(self, tag: str, **attrs) -> None:
        self.line(f"<{tag}{format_attributes(attrs)}>")
        self.push_level()

    def close_tag(self, tag: str) -> None:
        self.pop_level()
        self.line(f"</{tag}>")

    @contextmanager
    def element(self, tag: str, **attrs) -> Iterator[None]:
        """Open `tag`, indent its content, close it on exit."""
        self.open_tag(tag, **attrs)
        try:
            yield
        finally:
            self.close_tag(tag)

    def empty_element(self, tag: str, **attrs) -> None:
        self.line(f"<{tag}{format_attributes(attrs)}/>")

    def text_element(self, tag: str, text, escape_text: bool = True, **attrs) -> None:
        """Write `<tag attrs>text</tag>` on one line."""
        body = escape(str(text)) if escape_text else str(text)
        self.line(f"<{tag}{format_attributes(attrs)}>{body}</{tag}>")

    def getvalue(self) -> str:
        return "".join(self._parts)
