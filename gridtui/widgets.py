"""Border flags and the interfaces every widget implements."""

from __future__ import annotations

import abc
import enum
from typing import Any

from gridtui.buffer import Buffer
from gridtui.layout import Rect


class Borders(enum.Flag):
    """Which borders of a block are visible; combine them with ``|``."""

    NONE = 0b0_0001
    TOP = 0b0_0010
    RIGHT = 0b0_0100
    BOTTOM = 0b0_1000
    LEFT = 0b1_0000
    ALL = TOP | RIGHT | BOTTOM | LEFT


class Widget(abc.ABC):
    """Something that draws itself into a buffer."""

    @abc.abstractmethod
    def render(self, area: Rect, buf: Buffer) -> None:
        """Draw the widget into ``area`` of ``buf``."""


class StatefulWidget(abc.ABC):
    """A widget that reads and updates state kept between two draws."""

    @abc.abstractmethod
    def render(self, area: Rect, buf: Buffer, state: Any) -> None:
        """Draw the widget into ``area`` of ``buf``, using and updating ``state``."""