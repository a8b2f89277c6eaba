"""Terminal backends: the interface a terminal draws through, and an ANSI implementation."""

from __future__ import annotations

import abc
import contextlib
import os
import re
import sys
from typing import Iterable, Iterator, Optional, TextIO

from gridtui.buffer import Cell
from gridtui.layout import Rect
from gridtui.style import Color, ColorLike, Indexed, Modifier, Rgb

try:
    import termios
    import tty
except ImportError:  # not available on every platform
    termios = None  # type: ignore[assignment]
    tty = None  # type: ignore[assignment]

CSI = "\x1b["

_NO_MODIFIERS = Modifier(0)

_PALETTE_INDEX = {
    Color.BLACK: 0,
    Color.RED: 1,
    Color.GREEN: 2,
    Color.YELLOW: 3,
    Color.BLUE: 4,
    Color.MAGENTA: 5,
    Color.CYAN: 6,
    Color.GRAY: 7,
    Color.DARK_GRAY: 8,
    Color.LIGHT_RED: 9,
    Color.LIGHT_GREEN: 10,
    Color.LIGHT_YELLOW: 11,
    Color.LIGHT_BLUE: 12,
    Color.LIGHT_MAGENTA: 13,
    Color.LIGHT_CYAN: 14,
    Color.WHITE: 15,
}

# SGR attribute codes.
_RESET = 0
_BOLD = 1
_DIM = 2
_ITALIC = 3
_UNDERLINED = 4
_SLOW_BLINK = 5
_RAPID_BLINK = 6
_REVERSE = 7
_CROSSED_OUT = 9
_NORMAL_INTENSITY = 22
_NO_ITALIC = 23
_NO_UNDERLINE = 24
_NO_BLINK = 25
_NO_REVERSE = 27
_NOT_CROSSED_OUT = 29

_CURSOR_REPORT = re.compile(r"\x1b\[(\d+);(\d+)R")


def _sgr(code: int) -> str:
    return f"{CSI}{code}m"


def _move_to(x: int, y: int) -> str:
    return f"{CSI}{y + 1};{x + 1}H"


def color_sequence(color: ColorLike, foreground: bool) -> str:
    """The escape sequence that sets the foreground or background colour."""
    if color is Color.RESET:
        return f"{CSI}{39 if foreground else 49}m"
    prefix = "38" if foreground else "48"
    if isinstance(color, Rgb):
        return f"{CSI}{prefix};2;{color.r};{color.g};{color.b}m"
    if isinstance(color, Indexed):
        return f"{CSI}{prefix};5;{color.index}m"
    if isinstance(color, Color):
        return f"{CSI}{prefix};5;{_PALETTE_INDEX[color]}m"
    raise TypeError(f"not a colour: {color!r}")


def modifier_diff(previous: Modifier, current: Modifier) -> str:
    """The escape sequences that turn the ``previous`` modifiers into ``current``."""
    out: list[str] = []
    removed = previous & ~current
    if Modifier.REVERSED in removed:
        out.append(_sgr(_NO_REVERSE))
    if Modifier.BOLD in removed:
        out.append(_sgr(_NORMAL_INTENSITY))
        if Modifier.DIM in current:
            out.append(_sgr(_DIM))
    if Modifier.ITALIC in removed:
        out.append(_sgr(_NO_ITALIC))
    if Modifier.UNDERLINED in removed:
        out.append(_sgr(_NO_UNDERLINE))
    if Modifier.DIM in removed:
        out.append(_sgr(_NORMAL_INTENSITY))
    if Modifier.CROSSED_OUT in removed:
        out.append(_sgr(_NOT_CROSSED_OUT))
    if Modifier.SLOW_BLINK in removed or Modifier.RAPID_BLINK in removed:
        out.append(_sgr(_NO_BLINK))

    added = current & ~previous
    for flag, code in (
        (Modifier.REVERSED, _REVERSE),
        (Modifier.BOLD, _BOLD),
        (Modifier.ITALIC, _ITALIC),
        (Modifier.UNDERLINED, _UNDERLINED),
        (Modifier.DIM, _DIM),
        (Modifier.CROSSED_OUT, _CROSSED_OUT),
        (Modifier.SLOW_BLINK, _SLOW_BLINK),
        (Modifier.RAPID_BLINK, _RAPID_BLINK),
    ):
        if flag in added:
            out.append(_sgr(code))
    return "".join(out)


class Backend(abc.ABC):
    """What a terminal needs from the device it draws on.

    Methods raise OSError when the device fails.
    """

    @abc.abstractmethod
    def draw(self, content: Iterable[tuple[int, int, Cell]]) -> None:
        """Write the given ``(x, y, cell)`` updates."""

    @abc.abstractmethod
    def hide_cursor(self) -> None:
        """Hide the cursor."""

    @abc.abstractmethod
    def show_cursor(self) -> None:
        """Show the cursor."""

    @abc.abstractmethod
    def get_cursor(self) -> tuple[int, int]:
        """The cursor position as ``(x, y)``."""

    @abc.abstractmethod
    def set_cursor(self, x: int, y: int) -> None:
        """Move the cursor to ``(x, y)``."""

    @abc.abstractmethod
    def clear(self) -> None:
        """Clear the whole screen."""

    @abc.abstractmethod
    def size(self) -> Rect:
        """The area of the screen."""

    @abc.abstractmethod
    def flush(self) -> None:
        """Push pending output to the device."""


def _fileno(stream: object) -> Optional[int]:
    try:
        return stream.fileno()  # type: ignore[attr-defined]
    except (AttributeError, OSError, ValueError):
        return None


@contextlib.contextmanager
def _unbuffered_input(stream: object) -> Iterator[None]:
    fd = _fileno(stream)
    if fd is None or termios is None or not os.isatty(fd):
        yield
        return
    saved = termios.tcgetattr(fd)
    try:
        tty.setcbreak(fd)
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


class AnsiBackend(Backend):
    """A backend writing ANSI escape sequences to a text stream.

    Cursor position reports are read from ``input`` (standard input by default).
    """

    def __init__(self, stream: TextIO, input: Optional[TextIO] = None) -> None:
        self._stream = stream
        self._input = input

    def draw(self, content: Iterable[tuple[int, int, Cell]]) -> None:
        fg: ColorLike = Color.RESET
        bg: ColorLike = Color.RESET
        modifier = _NO_MODIFIERS
        last_pos: Optional[tuple[int, int]] = None
        out: list[str] = []
        for x, y, cell in content:
            if last_pos is None or not (x == last_pos[0] + 1 and y == last_pos[1]):
                out.append(_move_to(x, y))
            last_pos = (x, y)
            if cell.modifier != modifier:
                out.append(modifier_diff(modifier, cell.modifier))
                modifier = cell.modifier
            if cell.fg != fg:
                out.append(color_sequence(cell.fg, True))
                fg = cell.fg
            if cell.bg != bg:
                out.append(color_sequence(cell.bg, False))
                bg = cell.bg
            out.append(cell.symbol)
        out.append(color_sequence(Color.RESET, True))
        out.append(color_sequence(Color.RESET, False))
        out.append(_sgr(_RESET))
        self._stream.write("".join(out))

    def _execute(self, sequence: str) -> None:
        self._stream.write(sequence)
        self._stream.flush()

    def hide_cursor(self) -> None:
        self._execute(f"{CSI}?25l")

    def show_cursor(self) -> None:
        self._execute(f"{CSI}?25h")

    def get_cursor(self) -> tuple[int, int]:
        self._execute(f"{CSI}6n")
        source = self._input if self._input is not None else sys.stdin
        chars: list[str] = []
        with _unbuffered_input(source):
            while True:
                ch = source.read(1)
                if not ch:
                    break
                chars.append(ch)
                if ch == "R":
                    break
        response = "".join(chars)
        match = _CURSOR_REPORT.search(response)
        if match is None:
            raise OSError(f"unexpected cursor position report: {response!r}")
        row, column = (int(group) for group in match.groups())
        return column - 1, row - 1

    def set_cursor(self, x: int, y: int) -> None:
        self._execute(_move_to(x, y))

    def clear(self) -> None:
        self._execute(f"{CSI}2J")

    def size(self) -> Rect:
        fd = _fileno(self._stream)
        if fd is None:
            fd = _fileno(sys.__stdout__)
        if fd is None:
            fd = 1
        columns, lines = os.get_terminal_size(fd)
        return Rect.new(0, 0, columns, lines)

    def flush(self) -> None:
        self._stream.flush()