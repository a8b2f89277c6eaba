"""A terminal that renders frames into double buffers and writes only the differences."""

from __future__ import annotations

import enum
import sys
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional

from gridtui.backend import Backend
from gridtui.buffer import Buffer
from gridtui.layout import Rect
from gridtui.widgets import StatefulWidget, Widget


class _ResizeBehavior(enum.Enum):
    FIXED = enum.auto()
    AUTO = enum.auto()


@dataclass
class Viewport:
    """The part of the screen the terminal draws on."""

    area: Rect
    resize_behavior: _ResizeBehavior = _ResizeBehavior.FIXED

    @classmethod
    def fixed(cls, area: Rect) -> Viewport:
        """A viewport that keeps its area when the screen is resized."""
        return cls(area, _ResizeBehavior.FIXED)


@dataclass
class TerminalOptions:
    """Options for :meth:`Terminal.with_options`."""

    viewport: Viewport


class Frame:
    """A consistent view of the terminal while one frame is rendered.

    ``cursor_position`` is None to hide the cursor after drawing, or the
    ``(x, y)`` where it is shown.
    """

    def __init__(self, terminal: Terminal) -> None:
        self._terminal = terminal
        self.cursor_position: Optional[tuple[int, int]] = None

    def size(self) -> Rect:
        """The area being drawn; it does not change during rendering."""
        return self._terminal.viewport.area

    def render_widget(self, widget: Widget, area: Rect) -> None:
        widget.render(area, self._terminal.current_buffer())

    def render_stateful_widget(self, widget: StatefulWidget, area: Rect, state: Any) -> None:
        widget.render(area, self._terminal.current_buffer(), state)

    def set_cursor(self, x: int, y: int) -> None:
        """Show the cursor at ``(x, y)`` once the frame is drawn."""
        self.cursor_position = (x, y)


@dataclass(frozen=True)
class CompletedFrame:
    """The buffer and area of the last draw; valid until the next draw."""

    buffer: Buffer
    area: Rect


class Terminal:
    """Draws frames on a backend, writing only what changed since the last frame."""

    def __init__(self, backend: Backend, options: Optional[TerminalOptions] = None) -> None:
        if options is None:
            options = TerminalOptions(Viewport(backend.size(), _ResizeBehavior.AUTO))
        self.backend = backend
        self.viewport = replace(options.viewport)
        self._buffers = [Buffer.empty(self.viewport.area), Buffer.empty(self.viewport.area)]
        self._current = 0
        self.hidden_cursor = False

    @classmethod
    def with_options(cls, backend: Backend, options: TerminalOptions) -> Terminal:
        return cls(backend, options)

    def get_frame(self) -> Frame:
        return Frame(self)

    def current_buffer(self) -> Buffer:
        """The buffer the current frame is rendered into."""
        return self._buffers[self._current]

    def _previous_buffer(self) -> Buffer:
        return self._buffers[1 - self._current]

    def flush(self) -> None:
        """Send the differences between the previous and the current buffer to the backend."""
        updates = self._previous_buffer().diff(self.current_buffer())
        self.backend.draw(updates)

    def resize(self, area: Rect) -> None:
        """Resize the buffers to ``area`` and clear the screen."""
        for buffer in self._buffers:
            buffer.resize(area)
        self.viewport.area = area
        self.clear()

    def autoresize(self) -> None:
        """Follow the backend's size unless the viewport is fixed."""
        if self.viewport.resize_behavior is _ResizeBehavior.AUTO:
            size = self.size()
            if size != self.viewport.area:
                self.resize(size)

    def draw(self, render: Callable[[Frame], None]) -> CompletedFrame:
        """Render one frame with ``render``, write the changes and swap buffers."""
        self.autoresize()

        frame = self.get_frame()
        render(frame)
        cursor_position = frame.cursor_position

        self.flush()

        if cursor_position is None:
            self.hide_cursor()
        else:
            self.show_cursor()
            self.set_cursor(*cursor_position)

        self._previous_buffer().reset()
        self._current = 1 - self._current

        self.backend.flush()
        return CompletedFrame(self._previous_buffer(), self.viewport.area)

    def hide_cursor(self) -> None:
        self.backend.hide_cursor()
        self.hidden_cursor = True

    def show_cursor(self) -> None:
        self.backend.show_cursor()
        self.hidden_cursor = False

    def get_cursor(self) -> tuple[int, int]:
        return self.backend.get_cursor()

    def set_cursor(self, x: int, y: int) -> None:
        self.backend.set_cursor(x, y)

    def clear(self) -> None:
        """Clear the screen and force a full redraw on the next draw."""
        self.backend.clear()
        self._previous_buffer().reset()

    def size(self) -> Rect:
        """The real size of the backend."""
        return self.backend.size()

    def close(self) -> None:
        """Restore the cursor if the terminal hid it."""
        if self.hidden_cursor:
            try:
                self.show_cursor()
            except OSError as err:
                print(f"Failed to show the cursor: {err}", file=sys.stderr)

    def __enter__(self) -> Terminal:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()