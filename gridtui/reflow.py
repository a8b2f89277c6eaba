"""Line composers that pack a stream of styled graphemes into lines."""

from __future__ import annotations

import abc
from typing import Iterable, Iterator, Optional

from gridtui.text import StyledGrapheme, graphemes, text_width

NBSP = "\u00a0"

# Python treats the ASCII information separators as whitespace; terminals do not.
_NOT_WHITESPACE = frozenset("\x1c\x1d\x1e\x1f")

ComposedLine = tuple[list[StyledGrapheme], int]


def _is_whitespace(symbol: str) -> bool:
    """True when every character of ``symbol`` is whitespace (vacuously true for "")."""
    return all(ch.isspace() and ch not in _NOT_WHITESPACE for ch in symbol)


def trim_offset(src: str, offset: int) -> str:
    """Drop the leading graphemes of ``src`` that fit entirely within ``offset`` columns."""
    start = 0
    for grapheme in graphemes(src):
        width = text_width(grapheme)
        if width > offset:
            break
        offset -= width
        start += len(grapheme)
    return src[start:]


class LineComposer(abc.ABC):
    """Packs styled graphemes into lines no wider than ``max_line_width``.

    A newline grapheme (``"\\n"``) ends a line. Iterating a composer yields
    ``(graphemes, width)`` pairs until the input is exhausted.
    """

    def __init__(self, symbols: Iterable[StyledGrapheme], max_line_width: int) -> None:
        self._symbols: Iterator[StyledGrapheme] = iter(symbols)
        self.max_line_width = max_line_width

    @abc.abstractmethod
    def next_line(self) -> Optional[ComposedLine]:
        """The next line and its width, or None when nothing is left."""

    def __iter__(self) -> Iterator[ComposedLine]:
        while (line := self.next_line()) is not None:
            yield line


class WordWrapper(LineComposer):
    """Wraps lines on word boundaries, optionally trimming leading whitespace."""

    def __init__(
        self, symbols: Iterable[StyledGrapheme], max_line_width: int, trim: bool
    ) -> None:
        super().__init__(symbols, max_line_width)
        self.trim = trim
        self._pending: list[StyledGrapheme] = []

    def next_line(self) -> Optional[ComposedLine]:
        max_width = self.max_line_width
        if max_width == 0:
            return None
        current, self._pending = self._pending, []
        current_width = sum(text_width(g.symbol) for g in current)

        symbols_to_last_word_end = 0
        width_to_last_word_end = 0
        prev_whitespace = False
        exhausted = True
        for grapheme in self._symbols:
            exhausted = False
            symbol = grapheme.symbol
            symbol_width = text_width(symbol)
            symbol_whitespace = _is_whitespace(symbol) and symbol != NBSP

            # Skip graphemes wider than a whole line, and leading whitespace when trimming.
            if symbol_width > max_width or (
                self.trim and symbol_whitespace and symbol != "\n" and current_width == 0
            ):
                continue

            if symbol == "\n":
                if prev_whitespace:
                    current_width = width_to_last_word_end
                    del current[symbols_to_last_word_end:]
                break

            if symbol_whitespace and not prev_whitespace:
                symbols_to_last_word_end = len(current)
                width_to_last_word_end = current_width

            current.append(grapheme)
            current_width += symbol_width

            if current_width > max_width:
                # Without a word break on the line, wrap at the end of the line.
                if symbols_to_last_word_end == 0:
                    truncate_at, truncated_width = len(current) - 1, max_width
                else:
                    truncate_at, truncated_width = (
                        symbols_to_last_word_end,
                        width_to_last_word_end,
                    )
                remainder = current[truncate_at:]
                first_visible = next(
                    (i for i, g in enumerate(remainder) if not _is_whitespace(g.symbol)),
                    None,
                )
                if first_visible is not None:
                    self._pending.extend(remainder[first_visible:])
                del current[truncate_at:]
                current_width = truncated_width
                break

            prev_whitespace = symbol_whitespace

        # The remainder of the previous line is returned even once the input is exhausted.
        if exhausted and not current:
            return None
        return current, current_width


class LineTruncator(LineComposer):
    """Cuts off the part of each line that does not fit.

    ``horizontal_offset`` columns are skipped at the start of every line.
    """

    def __init__(
        self,
        symbols: Iterable[StyledGrapheme],
        max_line_width: int,
        horizontal_offset: int = 0,
    ) -> None:
        super().__init__(symbols, max_line_width)
        self.horizontal_offset = horizontal_offset

    def next_line(self) -> Optional[ComposedLine]:
        max_width = self.max_line_width
        if max_width == 0:
            return None

        current: list[StyledGrapheme] = []
        current_width = 0
        skip_rest = False
        exhausted = True
        offset = self.horizontal_offset
        for grapheme in self._symbols:
            exhausted = False
            symbol = grapheme.symbol
            symbol_width = text_width(symbol)

            if symbol_width > max_width:
                continue
            if symbol == "\n":
                break
            if current_width + symbol_width > max_width:
                skip_rest = True
                break

            if offset:
                if symbol_width > offset:
                    symbol = trim_offset(symbol, offset)
                    offset = 0
                else:
                    offset -= symbol_width
                    symbol = ""
            current_width += text_width(symbol)
            current.append(StyledGrapheme(symbol, grapheme.style))

        if skip_rest:
            for grapheme in self._symbols:
                if grapheme.symbol == "\n":
                    break

        if exhausted and not current:
            return None
        return current, current_width