"""Colours, text modifiers and incremental styles."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from functools import reduce
from operator import or_
from typing import Optional, Union


class Color(enum.Enum):
    """The named terminal colours."""

    RESET = enum.auto()
    BLACK = enum.auto()
    RED = enum.auto()
    GREEN = enum.auto()
    YELLOW = enum.auto()
    BLUE = enum.auto()
    MAGENTA = enum.auto()
    CYAN = enum.auto()
    GRAY = enum.auto()
    DARK_GRAY = enum.auto()
    LIGHT_RED = enum.auto()
    LIGHT_GREEN = enum.auto()
    LIGHT_YELLOW = enum.auto()
    LIGHT_BLUE = enum.auto()
    LIGHT_MAGENTA = enum.auto()
    LIGHT_CYAN = enum.auto()
    WHITE = enum.auto()


def _check_byte(name: str, value: int) -> None:
    if not 0 <= value <= 255:
        raise ValueError(f"{name} must be in 0..255, got {value}")


@dataclass(frozen=True)
class Rgb:
    """A 24-bit colour."""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        _check_byte("r", self.r)
        _check_byte("g", self.g)
        _check_byte("b", self.b)


@dataclass(frozen=True)
class Indexed:
    """A colour from the 256-colour palette."""

    index: int

    def __post_init__(self) -> None:
        _check_byte("index", self.index)


ColorLike = Union[Color, Rgb, Indexed]


class Modifier(enum.Flag):
    """Text emphasis flags; combine them with ``|``."""

    BOLD = 1 << 0
    DIM = 1 << 1
    ITALIC = 1 << 2
    UNDERLINED = 1 << 3
    SLOW_BLINK = 1 << 4
    RAPID_BLINK = 1 << 5
    REVERSED = 1 << 6
    HIDDEN = 1 << 7
    CROSSED_OUT = 1 << 8


_NO_MODIFIERS = Modifier(0)
_ALL_MODIFIERS = reduce(or_, Modifier, _NO_MODIFIERS)


@dataclass(frozen=True)
class Style:
    """An incremental change to the look of a cell.

    Applying several styles one after the other merges them rather than
    keeping only the last one.
    """

    fg: Optional[ColorLike] = None
    bg: Optional[ColorLike] = None
    add_modifier: Modifier = _NO_MODIFIERS
    sub_modifier: Modifier = _NO_MODIFIERS

    @classmethod
    def reset(cls) -> Style:
        """A style that resets every property."""
        return cls(
            fg=Color.RESET,
            bg=Color.RESET,
            add_modifier=_NO_MODIFIERS,
            sub_modifier=_ALL_MODIFIERS,
        )

    def with_fg(self, color: ColorLike) -> Style:
        """Return a copy with the foreground colour set."""
        return replace(self, fg=color)

    def with_bg(self, color: ColorLike) -> Style:
        """Return a copy with the background colour set."""
        return replace(self, bg=color)

    def add(self, modifier: Modifier) -> Style:
        """Return a copy that adds the given modifiers."""
        return replace(
            self,
            add_modifier=self.add_modifier | modifier,
            sub_modifier=self.sub_modifier & ~modifier,
        )

    def remove(self, modifier: Modifier) -> Style:
        """Return a copy that removes the given modifiers."""
        return replace(
            self,
            add_modifier=self.add_modifier & ~modifier,
            sub_modifier=self.sub_modifier | modifier,
        )

    def patch(self, other: Style) -> Style:
        """Combine with ``other`` as if the two were applied in order."""
        return Style(
            fg=other.fg if other.fg is not None else self.fg,
            bg=other.bg if other.bg is not None else self.bg,
            add_modifier=(self.add_modifier & ~other.sub_modifier) | other.add_modifier,
            sub_modifier=(self.sub_modifier & ~other.add_modifier) | other.sub_modifier,
        )