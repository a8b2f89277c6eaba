"""A grid of styled cells describing what the terminal should show."""

from __future__ import annotations

import sys
import warnings
from dataclasses import dataclass, field, replace
from typing import Iterable, Union

from gridtui.layout import Rect
from gridtui.style import Color, ColorLike, Modifier, Style
from gridtui.text import Span, Spans, graphemes, text_width

_NO_MODIFIERS = Modifier(0)


@dataclass
class Cell:
    """One terminal cell: a grapheme with colours and modifiers.

    The setters return the cell so calls can be chained.
    """

    symbol: str = " "
    fg: ColorLike = Color.RESET
    bg: ColorLike = Color.RESET
    modifier: Modifier = _NO_MODIFIERS

    def set_symbol(self, symbol: str) -> Cell:
        self.symbol = symbol
        return self

    def set_char(self, ch: str) -> Cell:
        if len(ch) != 1:
            raise ValueError(f"expected a single character, got {ch!r}")
        self.symbol = ch
        return self

    def set_fg(self, color: ColorLike) -> Cell:
        self.fg = color
        return self

    def set_bg(self, color: ColorLike) -> Cell:
        self.bg = color
        return self

    def set_style(self, style: Style) -> Cell:
        """Apply an incremental style to the cell."""
        if style.fg is not None:
            self.fg = style.fg
        if style.bg is not None:
            self.bg = style.bg
        self.modifier = (self.modifier | style.add_modifier) & ~style.sub_modifier
        return self

    def style(self) -> Style:
        """The cell's look expressed as a style."""
        return Style().with_fg(self.fg).with_bg(self.bg).add(self.modifier)

    def reset(self) -> None:
        """Return the cell to a blank space with default colours."""
        self.symbol = " "
        self.fg = Color.RESET
        self.bg = Color.RESET
        self.modifier = _NO_MODIFIERS


@dataclass
class Buffer:
    """The desired content of an area of the terminal.

    Widgets draw into a buffer; the difference between two buffers is what
    gets written to the terminal.
    """

    area: Rect = field(default_factory=Rect)
    content: list[Cell] = field(default_factory=list)

    @classmethod
    def empty(cls, area: Rect) -> Buffer:
        """A buffer of blank cells covering ``area``."""
        return cls.filled(area, Cell())

    @classmethod
    def filled(cls, area: Rect, cell: Cell) -> Buffer:
        """A buffer whose every cell is a copy of ``cell``."""
        return cls(area, [replace(cell) for _ in range(area.area())])

    @classmethod
    def with_lines(cls, lines: Iterable[str]) -> Buffer:
        """A buffer at the origin holding the given lines, as wide as the widest."""
        lines = list(lines)
        width = max((text_width(line) for line in lines), default=0)
        buffer = cls.empty(Rect(0, 0, width, len(lines)))
        for y, line in enumerate(lines):
            buffer.set_string(0, y, line, Style())
        return buffer

    def get(self, x: int, y: int) -> Cell:
        """The cell at global coordinates ``(x, y)``; it may be modified in place."""
        return self.content[self.index_of(x, y)]

    def index_of(self, x: int, y: int) -> int:
        """Index in ``content`` of the cell at global coordinates ``(x, y)``."""
        area = self.area
        if not (area.left() <= x < area.right() and area.top() <= y < area.bottom()):
            raise IndexError(
                f"Trying to access position outside the buffer: x={x}, y={y}, area={area}"
            )
        return (y - area.y) * area.width + (x - area.x)

    def pos_of(self, i: int) -> tuple[int, int]:
        """Global coordinates of the cell at index ``i``."""
        if not 0 <= i < len(self.content):
            raise IndexError(
                "Trying to get the coords of a cell outside the buffer: "
                f"i={i} len={len(self.content)}"
            )
        return self.area.x + i % self.area.width, self.area.y + i // self.area.width

    def set_string(self, x: int, y: int, string: str, style: Style = Style()) -> None:
        """Print ``string`` starting at ``(x, y)``, clipped at the end of the line."""
        self.set_stringn(x, y, string, sys.maxsize, style)

    def set_stringn(
        self, x: int, y: int, string: str, width: int, style: Style = Style()
    ) -> tuple[int, int]:
        """Print at most ``width`` columns of ``string`` starting at ``(x, y)``.

        Returns the position just after the last printed grapheme.
        """
        area = self.area
        # The right edge itself is accepted: nothing fits there, so nothing is written.
        if not (area.left() <= x <= area.right() and area.top() <= y < area.bottom()):
            raise IndexError(
                f"Trying to access position outside the buffer: x={x}, y={y}, area={area}"
            )
        index = (y - area.y) * area.width + (x - area.x)
        x_offset = x
        max_offset = min(area.right(), x + max(width, 0))
        for symbol in graphemes(string):
            symbol_width = text_width(symbol)
            if symbol_width == 0:
                continue
            if symbol_width > max(max_offset - x_offset, 0):
                break
            self.content[index].set_symbol(symbol).set_style(style)
            # Cells covered by a wide grapheme would be hidden; blank them.
            for hidden in self.content[index + 1 : index + symbol_width]:
                hidden.reset()
            index += symbol_width
            x_offset += symbol_width
        return x_offset, y

    def set_spans(self, x: int, y: int, spans: Spans, width: int) -> tuple[int, int]:
        """Print a line of spans in at most ``width`` columns."""
        remaining = width
        for span in spans.spans:
            if remaining == 0:
                break
            end_x, _ = self.set_stringn(x, y, span.content, remaining, span.style)
            written = max(end_x - x, 0)
            x = end_x
            remaining = max(remaining - written, 0)
        return x, y

    def set_span(self, x: int, y: int, span: Span, width: int) -> tuple[int, int]:
        """Print a single span in at most ``width`` columns."""
        return self.set_stringn(x, y, span.content, width, span.style)

    def set_background(self, area: Rect, color: ColorLike) -> None:
        """Set the background colour of every cell in ``area``.

        Deprecated in favour of :meth:`set_style`.
        """
        warnings.warn(
            "set_background is deprecated; use set_style instead",
            DeprecationWarning,
            stacklevel=2,
        )
        for cell in self._cells_in(area):
            cell.set_bg(color)

    def set_style(self, area: Rect, style: Style) -> None:
        """Apply ``style`` to every cell in ``area``."""
        for cell in self._cells_in(area):
            cell.set_style(style)

    def _cells_in(self, area: Rect) -> Iterable[Cell]:
        for y in range(area.top(), area.bottom()):
            for x in range(area.left(), area.right()):
                yield self.get(x, y)

    def resize(self, area: Rect) -> None:
        """Make the buffer cover ``area``, truncating or padding with blank cells."""
        length = area.area()
        if len(self.content) > length:
            del self.content[length:]
        else:
            self.content.extend(Cell() for _ in range(length - len(self.content)))
        self.area = area

    def reset(self) -> None:
        """Blank every cell."""
        for cell in self.content:
            cell.reset()

    def merge(self, other: Buffer) -> None:
        """Merge ``other`` into this buffer; its cells win where the two overlap."""
        area = self.area.union(other.area)
        merged = [Cell() for _ in range(area.area())]
        for source in (self, other):
            for i, cell in enumerate(source.content):
                x, y = source.pos_of(i)
                merged[(y - area.y) * area.width + (x - area.x)] = cell
        self.content = merged
        self.area = area

    def diff(self, other: Buffer) -> list[tuple[int, int, Cell]]:
        """The updates, as ``(x, y, cell)``, needed to go from this buffer to ``other``.

        Buffers are assumed well formed: a wide grapheme is followed by blank cells.
        Coordinates are relative to the buffer's area.
        """
        width = self.area.width
        updates: list[tuple[int, int, Cell]] = []
        # Cells invalidated by drawing or replacing a preceding wide grapheme.
        invalidated = 0
        # Cells of the next buffer hidden by a preceding wide grapheme.
        to_skip = 0
        for i, (current, previous) in enumerate(zip(other.content, self.content)):
            if (current != previous or invalidated > 0) and to_skip == 0:
                updates.append((i % width, i // width, current))
            current_width = text_width(current.symbol)
            to_skip = max(current_width - 1, 0)
            affected = max(current_width, text_width(previous.symbol))
            invalidated = max(max(affected, invalidated) - 1, 0)
        return updates


__all__: list[str] = ["Buffer", "Cell"]

_Stringish = Union[str, Span]