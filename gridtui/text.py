"""Styled text: spans, lines of spans and multi-line text."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Union

import regex
import wcwidth

from gridtui.style import Style

_GRAPHEME = regex.compile(r"\X")


def graphemes(text: str) -> list[str]:
    """Split ``text`` into extended grapheme clusters."""
    return _GRAPHEME.findall(text)


def text_width(text: str) -> int:
    """Number of terminal columns ``text`` occupies; control characters count as zero."""
    return sum(max(wcwidth.wcwidth(ch), 0) for ch in text)


@dataclass(frozen=True)
class StyledGrapheme:
    """A grapheme associated with a style."""

    symbol: str
    style: Style


@dataclass
class Span:
    """A string where every grapheme has the same style."""

    content: str
    style: Style = field(default_factory=Style)

    @classmethod
    def raw(cls, content: str) -> Span:
        """A span with no style."""
        return cls(content, Style())

    @classmethod
    def styled(cls, content: str, style: Style) -> Span:
        """A span with the given style."""
        return cls(content, style)

    def width(self) -> int:
        """Width of the content in columns."""
        return text_width(self.content)

    def styled_graphemes(self, base_style: Style) -> Iterator[StyledGrapheme]:
        """Yield the graphemes of the span, skipping newlines.

        Each grapheme's style is ``base_style`` patched with the span's style.
        """
        style = base_style.patch(self.style)
        for symbol in graphemes(self.content):
            if symbol != "\n":
                yield StyledGrapheme(symbol, style)


@dataclass
class Spans:
    """A single line made of spans, each with its own style."""

    spans: list[Span] = field(default_factory=list)

    @classmethod
    def from_value(cls, value: Union[str, Span, Spans, Iterable[Span]]) -> Spans:
        """Build a line from a string, a span, a list of spans or a line."""
        if isinstance(value, Spans):
            return value
        if isinstance(value, str):
            return cls([Span.raw(value)])
        if isinstance(value, Span):
            return cls([value])
        if isinstance(value, (list, tuple)):
            if not all(isinstance(item, Span) for item in value):
                raise TypeError("a line can only be built from Span items")
            return cls(list(value))
        raise TypeError(f"cannot build a line from {type(value).__name__}")

    def width(self) -> int:
        """Total width of all spans."""
        return sum(span.width() for span in self.spans)

    def __iter__(self) -> Iterator[Span]:
        return iter(self.spans)

    def __len__(self) -> int:
        return len(self.spans)

    def __str__(self) -> str:
        return "".join(span.content for span in self.spans)


def _split_lines(content: str) -> list[str]:
    if not content:
        return []
    parts = content.split("\n")
    if parts[-1] == "":
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


@dataclass
class Text:
    """Multiple lines, each made of styled spans."""

    lines: list[Spans] = field(default_factory=list)

    @classmethod
    def from_value(cls, value: Union[str, Span, Spans, Text, Iterable[Spans]]) -> Text:
        """Build text from a string, a span, a line, a list of lines or text."""
        if isinstance(value, Text):
            return value
        if isinstance(value, str):
            return cls.raw(value)
        if isinstance(value, Span):
            return cls([Spans([value])])
        if isinstance(value, Spans):
            return cls([value])
        if isinstance(value, (list, tuple)):
            if not all(isinstance(item, Spans) for item in value):
                raise TypeError("text can only be built from Spans items")
            return cls(list(value))
        raise TypeError(f"cannot build text from {type(value).__name__}")

    @classmethod
    def raw(cls, content: str) -> Text:
        """Unstyled text split into lines at newlines."""
        return cls([Spans([Span.raw(line)]) for line in _split_lines(content)])

    @classmethod
    def styled(cls, content: str, style: Style) -> Text:
        """Text split into lines, with ``style`` patched into every span."""
        text = cls.raw(content)
        text.patch_style(style)
        return text

    def width(self) -> int:
        """Width of the widest line, or 0 when empty."""
        return max((line.width() for line in self.lines), default=0)

    def height(self) -> int:
        """Number of lines."""
        return len(self.lines)

    def patch_style(self, style: Style) -> None:
        """Patch ``style`` into the style of every span."""
        for line in self.lines:
            for span in line.spans:
                span.style = span.style.patch(style)

    def extend(self, lines: Iterable[Spans]) -> None:
        """Append lines, such as those of another text."""
        self.lines.extend(Spans.from_value(line) for line in lines)

    def __iter__(self) -> Iterator[Spans]:
        return iter(self.lines)