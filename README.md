# gridtui

`gridtui` is a small toolkit for drawing text user interfaces in a terminal.
Widgets do not write to the terminal themselves. Each one draws into an
in-memory grid of cells, a `Buffer`. The `Terminal` compares the new frame with
the previous one and sends only the cells that changed to a backend.

## Installation

```
pip install gridtui
```

To run the test suite:

```
pip install "gridtui[test]"
pytest
```

## Modules

- `gridtui.style`: `Color`, `Rgb`, `Indexed`, the `Modifier` flags and `Style`.
  A `Style` is an incremental change. `with_fg`, `with_bg`, `add` and `remove`
  return modified copies, `Style.reset()` resets everything, and `patch`
  combines two styles as if they were applied one after the other.
- `gridtui.text`: `Span` (one style), `Spans` (one line of spans) and `Text`
  (several lines). `graphemes` splits a string into grapheme clusters and
  `text_width` measures its width in terminal columns.
- `gridtui.layout`: `Rect`, `Margin`, `Direction`, `Alignment`, `Corner` and
  the constraints `Percentage`, `Ratio`, `Length`, `Max` and `Min`.
  `Layout.split` divides an area into one rect per constraint using a linear
  constraint solver. Results are cached per area and layout.
- `gridtui.buffer`: `Cell` and `Buffer`, the grid that widgets draw into.
  `Buffer.diff` gives the `(x, y, cell)` updates needed to go from one buffer
  to another, and it handles wide graphemes.
- `gridtui.reflow`: the line composers `WordWrapper` and `LineTruncator`. They
  pack a stream of `StyledGrapheme`s into lines no wider than a given width.
- `gridtui.widgets`: the `Borders` flags and the abstract `Widget` and
  `StatefulWidget` interfaces.
- `gridtui.backend`: the abstract `Backend` interface and `AnsiBackend`, which
  writes ANSI escape sequences to a text stream. It also provides the helpers
  `color_sequence` and `modifier_diff`.
- `gridtui.terminal`: `Terminal`, `Frame`, `CompletedFrame`, `Viewport` and
  `TerminalOptions`.

## Drawing into a buffer

```python
from gridtui.buffer import Buffer
from gridtui.layout import Rect
from gridtui.style import Color, Style

buf = Buffer.empty(Rect(0, 0, 10, 5))
buf.set_string(3, 0, "string", Style().with_fg(Color.RED).with_bg(Color.WHITE))
assert buf.get(5, 0).symbol == "r"
```

`Buffer.get` and `Buffer.index_of` raise `IndexError` for coordinates outside
the buffer's area.

## Splitting an area

```python
from gridtui.layout import Direction, Layout, Length, Min, Rect

chunks = Layout(
    direction=Direction.VERTICAL,
    constraints=[Length(5), Min(0)],
).split(Rect(2, 2, 10, 10))
# [Rect(x=2, y=2, width=10, height=5), Rect(x=2, y=7, width=10, height=5)]
```

## Wrapping text

```python
from gridtui.reflow import WordWrapper
from gridtui.style import Style
from gridtui.text import Span

span = Span.raw("abcd efghij klmnopabcd efgh")
for line, width in WordWrapper(span.styled_graphemes(Style()), 20, trim=True):
    print("".join(g.symbol for g in line), width)
```

The composers treat a `"\n"` grapheme as a line break. `Span.styled_graphemes`
drops newlines, so put a `StyledGrapheme("\n", style)` between lines yourself.

## Rendering in a terminal

```python
import sys

from gridtui.backend import AnsiBackend
from gridtui.style import Color, Style
from gridtui.terminal import Terminal
from gridtui.widgets import Widget


class Greeting(Widget):
    def render(self, area, buf):
        buf.set_string(area.x, area.y, "Hello from gridtui!", Style().with_fg(Color.GREEN))


with Terminal(AnsiBackend(sys.stdout)) as terminal:
    terminal.draw(lambda frame: frame.render_widget(Greeting(), frame.size()))
```

`Terminal.draw` first follows the backend's size, unless the viewport was made
with `Viewport.fixed`. It then calls your function with a `Frame`, writes the
difference from the previous frame to the backend and swaps its buffers. Call
`Frame.set_cursor` to show the cursor at a position. If you do not, the cursor
is hidden. Closing the terminal, or leaving the `with` block, shows it again.

## What gridtui does not do

gridtui gives you the drawing machinery, not a widget library. It has no
bordered block, paragraph, list or chart widgets and no sets of box-drawing
symbols. You write widgets yourself by implementing `Widget` or
`StatefulWidget` and drawing into the `Buffer` you are given. gridtui also
does not read keyboard or mouse input. The only thing it reads from the
terminal is the cursor position report in `AnsiBackend.get_cursor`.