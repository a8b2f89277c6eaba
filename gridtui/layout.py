"""Rectangles, constraints and a layout engine that splits an area into chunks."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Iterable, Optional, Union

_U16_MAX = 0xFFFF


class Corner(enum.Enum):
    """A corner of a rectangle."""

    TOP_LEFT = enum.auto()
    TOP_RIGHT = enum.auto()
    BOTTOM_RIGHT = enum.auto()
    BOTTOM_LEFT = enum.auto()


class Direction(enum.Enum):
    """The axis along which a layout places its chunks."""

    HORIZONTAL = enum.auto()
    VERTICAL = enum.auto()


class Alignment(enum.Enum):
    """Horizontal alignment of text."""

    LEFT = enum.auto()
    CENTER = enum.auto()
    RIGHT = enum.auto()


def _check_u16(name: str, value: int) -> None:
    if not 0 <= value <= _U16_MAX:
        raise ValueError(f"{name} must be in 0..{_U16_MAX}, got {value}")


@dataclass(frozen=True)
class Constraint:
    """Base of the size constraints a layout accepts."""

    def apply(self, length: int) -> int:
        """Apply the constraint to ``length`` and return the resulting size."""
        raise NotImplementedError


@dataclass(frozen=True)
class Percentage(Constraint):
    """A share of the available length, in percent."""

    percent: int

    def __post_init__(self) -> None:
        _check_u16("percent", self.percent)

    def apply(self, length: int) -> int:
        return length * self.percent // 100


@dataclass(frozen=True)
class Ratio(Constraint):
    """A share of the available length given as a fraction."""

    numerator: int
    denominator: int

    def __post_init__(self) -> None:
        if self.numerator < 0 or self.denominator <= 0:
            raise ValueError("a ratio needs a non-negative numerator and a positive denominator")

    def apply(self, length: int) -> int:
        return (self.numerator * length // self.denominator) & _U16_MAX


@dataclass(frozen=True)
class Length(Constraint):
    """A fixed length."""

    length: int

    def __post_init__(self) -> None:
        _check_u16("length", self.length)

    def apply(self, length: int) -> int:
        return min(length, self.length)


@dataclass(frozen=True)
class Max(Constraint):
    """An upper bound on the length."""

    maximum: int

    def __post_init__(self) -> None:
        _check_u16("maximum", self.maximum)

    def apply(self, length: int) -> int:
        return min(length, self.maximum)


@dataclass(frozen=True)
class Min(Constraint):
    """A lower bound on the length."""

    minimum: int

    def __post_init__(self) -> None:
        _check_u16("minimum", self.minimum)

    def apply(self, length: int) -> int:
        return max(length, self.minimum)


@dataclass(frozen=True)
class Margin:
    """Space kept free on each side of an area."""

    vertical: int = 0
    horizontal: int = 0


@dataclass(frozen=True)
class Rect:
    """A rectangle of terminal cells."""

    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    def __post_init__(self) -> None:
        _check_u16("x", self.x)
        _check_u16("y", self.y)
        _check_u16("width", self.width)
        _check_u16("height", self.height)

    @classmethod
    def new(cls, x: int, y: int, width: int, height: int) -> Rect:
        """Create a rect whose area fits in 16 bits, keeping the aspect ratio when clipping."""
        if width * height > _U16_MAX:
            aspect_ratio = width / height
            height_f = math.sqrt(_U16_MAX / aspect_ratio)
            width_f = height_f * aspect_ratio
            width, height = int(width_f), int(height_f)
        return cls(x, y, width, height)

    def area(self) -> int:
        """Number of cells; raises OverflowError if it does not fit in 16 bits."""
        result = self.width * self.height
        if result > _U16_MAX:
            raise OverflowError(f"area of {self} does not fit in 16 bits")
        return result

    def left(self) -> int:
        return self.x

    def right(self) -> int:
        return min(self.x + self.width, _U16_MAX)

    def top(self) -> int:
        return self.y

    def bottom(self) -> int:
        return min(self.y + self.height, _U16_MAX)

    def inner(self, margin: Margin) -> Rect:
        """The rect shrunk by ``margin``, or an empty rect if the margin does not fit."""
        if self.width < 2 * margin.horizontal or self.height < 2 * margin.vertical:
            return Rect()
        return Rect(
            self.x + margin.horizontal,
            self.y + margin.vertical,
            self.width - 2 * margin.horizontal,
            self.height - 2 * margin.vertical,
        )

    def union(self, other: Rect) -> Rect:
        """The smallest rect holding both rects."""
        x1 = min(self.x, other.x)
        y1 = min(self.y, other.y)
        x2 = max(self.x + self.width, other.x + other.width)
        y2 = max(self.y + self.height, other.y + other.height)
        return Rect(x1, y1, x2 - x1, y2 - y1)

    def intersection(self, other: Rect) -> Rect:
        """The overlap of two rects; raises ValueError when they do not overlap."""
        x1 = max(self.x, other.x)
        y1 = max(self.y, other.y)
        x2 = min(self.x + self.width, other.x + other.width)
        y2 = min(self.y + self.height, other.y + other.height)
        return Rect(x1, y1, x2 - x1, y2 - y1)

    def intersects(self, other: Rect) -> bool:
        return (
            self.x < other.x + other.width
            and self.x + self.width > other.x
            and self.y < other.y + other.height
            and self.y + self.height > other.y
        )


@dataclass(frozen=True)
class Layout:
    """Splits an area into chunks along one direction according to constraints."""

    direction: Direction = Direction.VERTICAL
    margin: Margin = field(default_factory=Margin)
    constraints: tuple[Constraint, ...] = ()
    expand_to_fill: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "constraints", tuple(self.constraints))

    def with_margin(self, margin: int) -> Layout:
        """Return a copy with the same margin on every side."""
        return Layout(self.direction, Margin(margin, margin), self.constraints, self.expand_to_fill)

    def split(self, area: Rect) -> list[Rect]:
        """Split ``area`` into one rect per constraint."""
        return list(_split_cached(area, self))


@lru_cache(maxsize=None)
def _split_cached(area: Rect, layout: Layout) -> tuple[Rect, ...]:
    return tuple(_split(area, layout))


# --- constraint solver -----------------------------------------------------

_REQUIRED = 1_001_001_000.0
_WEAK = 1.0
_EPSILON = 1.0e-8


def _near_zero(value: float) -> bool:
    return abs(value) < _EPSILON


class _Variable:
    __slots__ = ()

    def __add__(self, other: _Operand) -> _Expr:
        return _Expr.of(self) + other

    def __sub__(self, other: _Operand) -> _Expr:
        return _Expr.of(self) - other


@dataclass(frozen=True)
class _Expr:
    terms: tuple[tuple[_Variable, float], ...] = ()
    constant: float = 0.0

    @staticmethod
    def of(value: _Operand) -> _Expr:
        if isinstance(value, _Expr):
            return value
        if isinstance(value, _Variable):
            return _Expr(((value, 1.0),))
        return _Expr((), float(value))

    def __add__(self, other: _Operand) -> _Expr:
        o = _Expr.of(other)
        return _Expr(self.terms + o.terms, self.constant + o.constant)

    def __sub__(self, other: _Operand) -> _Expr:
        o = _Expr.of(other)
        negated = tuple((var, -coeff) for var, coeff in o.terms)
        return _Expr(self.terms + negated, self.constant - o.constant)


_Operand = Union[_Expr, _Variable, float, int]


class _Relation(enum.Enum):
    LE = enum.auto()
    GE = enum.auto()
    EQ = enum.auto()


class _Kind(enum.Enum):
    EXTERNAL = enum.auto()
    SLACK = enum.auto()
    ERROR = enum.auto()
    DUMMY = enum.auto()


class _Symbol:
    __slots__ = ("kind",)

    def __init__(self, kind: _Kind) -> None:
        self.kind = kind


class _Tag:
    __slots__ = ("marker", "other")

    def __init__(self) -> None:
        self.marker: Optional[_Symbol] = None
        self.other: Optional[_Symbol] = None


class _Row:
    __slots__ = ("constant", "cells")

    def __init__(self, constant: float = 0.0, cells: Optional[dict[_Symbol, float]] = None) -> None:
        self.constant = constant
        self.cells: dict[_Symbol, float] = dict(cells) if cells else {}

    def copy(self) -> _Row:
        return _Row(self.constant, self.cells)

    def insert_symbol(self, symbol: _Symbol, coeff: float = 1.0) -> None:
        value = self.cells.get(symbol, 0.0) + coeff
        if _near_zero(value):
            self.cells.pop(symbol, None)
        else:
            self.cells[symbol] = value

    def insert_row(self, other: _Row, coeff: float = 1.0) -> None:
        self.constant += other.constant * coeff
        for symbol, value in other.cells.items():
            self.insert_symbol(symbol, value * coeff)

    def remove(self, symbol: _Symbol) -> None:
        self.cells.pop(symbol, None)

    def reverse_sign(self) -> None:
        self.constant = -self.constant
        self.cells = {symbol: -value for symbol, value in self.cells.items()}

    def solve_for(self, symbol: _Symbol) -> None:
        coeff = -1.0 / self.cells.pop(symbol)
        self.constant *= coeff
        self.cells = {s: value * coeff for s, value in self.cells.items()}

    def solve_for_pair(self, lhs: _Symbol, rhs: _Symbol) -> None:
        self.insert_symbol(lhs, -1.0)
        self.solve_for(rhs)

    def coefficient_for(self, symbol: _Symbol) -> float:
        return self.cells.get(symbol, 0.0)

    def substitute(self, symbol: _Symbol, row: _Row) -> None:
        coeff = self.cells.pop(symbol, None)
        if coeff is not None:
            self.insert_row(row, coeff)


class _Solver:
    """An incremental simplex solver for linear constraints with strengths."""

    def __init__(self) -> None:
        self._rows: dict[_Symbol, _Row] = {}
        self._symbols: dict[_Variable, _Symbol] = {}
        self._objective = _Row()
        self._artificial: Optional[_Row] = None

    def add(self, lhs: _Operand, relation: _Relation, rhs: _Operand, strength: float) -> None:
        strength = min(max(strength, 0.0), _REQUIRED)
        row, tag = self._create_row(_Expr.of(lhs) - rhs, relation, strength)
        subject = self._choose_subject(row, tag)
        if subject is None and all(s.kind is _Kind.DUMMY for s in row.cells):
            if not _near_zero(row.constant):
                raise RuntimeError("layout constraints are unsatisfiable")
            subject = tag.marker
        if subject is None:
            if not self._add_with_artificial_variable(row):
                raise RuntimeError("layout constraints are unsatisfiable")
        else:
            row.solve_for(subject)
            self._substitute(subject, row)
            self._rows[subject] = row
        self._optimize(self._objective)

    def value_of(self, var: _Variable) -> float:
        symbol = self._symbols.get(var)
        row = self._rows.get(symbol) if symbol is not None else None
        return row.constant if row is not None else 0.0

    def _symbol_for(self, var: _Variable) -> _Symbol:
        symbol = self._symbols.get(var)
        if symbol is None:
            symbol = self._symbols[var] = _Symbol(_Kind.EXTERNAL)
        return symbol

    def _create_row(self, expr: _Expr, relation: _Relation, strength: float) -> tuple[_Row, _Tag]:
        row = _Row(expr.constant)
        for var, coeff in expr.terms:
            if _near_zero(coeff):
                continue
            symbol = self._symbol_for(var)
            other = self._rows.get(symbol)
            if other is not None:
                row.insert_row(other, coeff)
            else:
                row.insert_symbol(symbol, coeff)

        tag = _Tag()
        if relation is _Relation.EQ:
            if strength < _REQUIRED:
                plus, minus = _Symbol(_Kind.ERROR), _Symbol(_Kind.ERROR)
                tag.marker, tag.other = plus, minus
                row.insert_symbol(plus, -1.0)
                row.insert_symbol(minus, 1.0)
                self._objective.insert_symbol(plus, strength)
                self._objective.insert_symbol(minus, strength)
            else:
                dummy = _Symbol(_Kind.DUMMY)
                tag.marker = dummy
                row.insert_symbol(dummy)
        else:
            coeff = 1.0 if relation is _Relation.LE else -1.0
            slack = _Symbol(_Kind.SLACK)
            tag.marker = slack
            row.insert_symbol(slack, coeff)
            if strength < _REQUIRED:
                error = _Symbol(_Kind.ERROR)
                tag.other = error
                row.insert_symbol(error, -coeff)
                self._objective.insert_symbol(error, strength)

        if row.constant < 0.0:
            row.reverse_sign()
        return row, tag

    @staticmethod
    def _choose_subject(row: _Row, tag: _Tag) -> Optional[_Symbol]:
        for symbol in row.cells:
            if symbol.kind is _Kind.EXTERNAL:
                return symbol
        for candidate in (tag.marker, tag.other):
            if (
                candidate is not None
                and candidate.kind in (_Kind.SLACK, _Kind.ERROR)
                and row.coefficient_for(candidate) < 0.0
            ):
                return candidate
        return None

    def _add_with_artificial_variable(self, row: _Row) -> bool:
        art = _Symbol(_Kind.SLACK)
        self._rows[art] = row.copy()
        self._artificial = row.copy()
        self._optimize(self._artificial)
        success = _near_zero(self._artificial.constant)
        self._artificial = None

        leaving_row = self._rows.pop(art, None)
        if leaving_row is not None:
            if not leaving_row.cells:
                return success
            entering = next(
                (s for s in leaving_row.cells if s.kind in (_Kind.SLACK, _Kind.ERROR)), None
            )
            if entering is None:
                return False
            leaving_row.solve_for_pair(art, entering)
            self._substitute(entering, leaving_row)
            self._rows[entering] = leaving_row

        for other in self._rows.values():
            other.remove(art)
        self._objective.remove(art)
        return success

    def _substitute(self, symbol: _Symbol, row: _Row) -> None:
        for other in self._rows.values():
            other.substitute(symbol, row)
        self._objective.substitute(symbol, row)
        if self._artificial is not None:
            self._artificial.substitute(symbol, row)

    def _optimize(self, objective: _Row) -> None:
        while True:
            entering = next(
                (s for s, c in objective.cells.items() if s.kind is not _Kind.DUMMY and c < 0.0),
                None,
            )
            if entering is None:
                return
            leaving: Optional[_Symbol] = None
            best = math.inf
            for symbol, row in self._rows.items():
                if symbol.kind is _Kind.EXTERNAL:
                    continue
                coeff = row.coefficient_for(entering)
                if coeff < 0.0:
                    ratio = -row.constant / coeff
                    if ratio < best:
                        best, leaving = ratio, symbol
            if leaving is None:
                raise RuntimeError("layout objective is unbounded")
            row = self._rows.pop(leaving)
            row.solve_for_pair(leaving, entering)
            self._substitute(entering, row)
            self._rows[entering] = row


class _Element:
    __slots__ = ("x", "y", "width", "height")

    def __init__(self) -> None:
        self.x = _Variable()
        self.y = _Variable()
        self.width = _Variable()
        self.height = _Variable()

    def right(self) -> _Expr:
        return self.x + self.width

    def bottom(self) -> _Expr:
        return self.y + self.height


def _size_constraint(var: _Variable, constraint: Constraint, length: int):
    if isinstance(constraint, Length):
        return var, _Relation.EQ, float(constraint.length)
    if isinstance(constraint, Percentage):
        return var, _Relation.EQ, float(constraint.percent * length) / 100.0
    if isinstance(constraint, Ratio):
        return var, _Relation.EQ, float(length) * constraint.numerator / constraint.denominator
    if isinstance(constraint, Min):
        return var, _Relation.GE, float(constraint.minimum)
    if isinstance(constraint, Max):
        return var, _Relation.LE, float(constraint.maximum)
    raise TypeError(f"unsupported constraint {constraint!r}")


def _split(area: Rect, layout: Layout) -> list[Rect]:
    eq, ge, le = _Relation.EQ, _Relation.GE, _Relation.LE
    elements = [_Element() for _ in layout.constraints]
    dest = area.inner(layout.margin)
    horizontal = layout.direction is Direction.HORIZONTAL

    ccs: list[tuple] = []
    for elt in elements:
        ccs.append((elt.width, ge, 0.0, _REQUIRED))
        ccs.append((elt.height, ge, 0.0, _REQUIRED))
        ccs.append((elt.x, ge, float(dest.left()), _REQUIRED))
        ccs.append((elt.y, ge, float(dest.top()), _REQUIRED))
        ccs.append((elt.right(), le, float(dest.right()), _REQUIRED))
        ccs.append((elt.bottom(), le, float(dest.bottom()), _REQUIRED))
    if elements:
        first = elements[0]
        if horizontal:
            ccs.append((first.x, eq, float(dest.left()), _REQUIRED))
        else:
            ccs.append((first.y, eq, float(dest.top()), _REQUIRED))
        if layout.expand_to_fill:
            last = elements[-1]
            if horizontal:
                ccs.append((last.right(), eq, float(dest.right()), _REQUIRED))
            else:
                ccs.append((last.bottom(), eq, float(dest.bottom()), _REQUIRED))

    for prev, nxt in zip(elements, elements[1:]):
        if horizontal:
            ccs.append((prev.x + prev.width, eq, nxt.x, _REQUIRED))
        else:
            ccs.append((prev.y + prev.height, eq, nxt.y, _REQUIRED))
    for elt, constraint in zip(elements, layout.constraints):
        if horizontal:
            ccs.append((elt.y, eq, float(dest.y), _REQUIRED))
            ccs.append((elt.height, eq, float(dest.height), _REQUIRED))
            ccs.append((*_size_constraint(elt.width, constraint, dest.width), _WEAK))
        else:
            ccs.append((elt.x, eq, float(dest.x), _REQUIRED))
            ccs.append((elt.width, eq, float(dest.width), _REQUIRED))
            ccs.append((*_size_constraint(elt.height, constraint, dest.height), _WEAK))

    solver = _Solver()
    for lhs, relation, rhs, strength in ccs:
        solver.add(lhs, relation, rhs, strength)

    def value(var: _Variable) -> int:
        raw = solver.value_of(var)
        if math.copysign(1.0, raw) < 0:
            return 0
        return min(int(raw), _U16_MAX)

    results = [
        [value(elt.x), value(elt.y), value(elt.width), value(elt.height)] for elt in elements
    ]
    if layout.expand_to_fill and results:
        last = results[-1]
        if horizontal:
            last[2] = dest.right() - last[0]
        else:
            last[3] = dest.bottom() - last[1]
    return [Rect(*r) for r in results]


def _as_constraints(items: Iterable[Constraint]) -> tuple[Constraint, ...]:
    return tuple(items)