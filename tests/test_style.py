import functools
import itertools

import pytest

from gridtui.style import Color, Indexed, Modifier, Rgb, Style

EMPTY = Modifier(0)


def _patched(base, *others):
    """Apply each of ``others`` on top of ``base`` in order."""
    return functools.reduce(Style.patch, others, base)


def _styles():
    return [
        Style(),
        Style().with_fg(Color.YELLOW),
        Style().with_bg(Color.YELLOW),
        Style().add(Modifier.BOLD),
        Style().remove(Modifier.BOLD),
        Style().add(Modifier.ITALIC),
        Style().remove(Modifier.ITALIC),
        Style().add(Modifier.ITALIC | Modifier.BOLD),
        Style().remove(Modifier.ITALIC | Modifier.BOLD),
    ]


def test_combined_patch_gives_same_result_as_individual_patch():
    styles = _styles()
    for a, b, c, d in itertools.product(styles, repeat=4):
        combined = _patched(a, _patched(b, _patched(c, d)))
        assert _patched(Style(), a, b, c, d) == _patched(Style(), combined)


def test_fg_patch():
    style = Style().with_fg(Color.BLUE)
    diff = Style().with_fg(Color.RED)
    assert _patched(style, diff) == Style().with_fg(Color.RED)


def test_bg_patch():
    style = Style().with_bg(Color.BLUE)
    diff = Style().with_bg(Color.RED)
    assert _patched(style, diff) == Style().with_bg(Color.RED)


def test_add_modifier_patch():
    style = Style().add(Modifier.BOLD)
    diff = Style().add(Modifier.ITALIC)
    patched = _patched(style, diff)
    assert patched.add_modifier == Modifier.BOLD | Modifier.ITALIC
    assert patched.sub_modifier == EMPTY


def test_remove_modifier_patch():
    style = Style().add(Modifier.BOLD | Modifier.ITALIC)
    diff = Style().remove(Modifier.ITALIC)
    patched = _patched(style, diff)
    assert patched.add_modifier == Modifier.BOLD
    assert patched.sub_modifier == Modifier.ITALIC


def test_combined_styles_example():
    style_1 = Style().with_fg(Color.YELLOW)
    style_2 = Style().with_bg(Color.RED)
    combined = _patched(style_1, style_2)
    assert _patched(Style(), style_1, style_2) == _patched(Style(), combined)
    assert combined == Style(fg=Color.YELLOW, bg=Color.RED)


def test_reset_style():
    reset = Style.reset()
    assert reset.fg == Color.RESET
    assert reset.bg == Color.RESET
    assert reset.add_modifier == EMPTY
    for modifier in Modifier:
        assert modifier in reset.sub_modifier


def test_reset_clears_previous_modifiers_on_patch():
    base = Style().with_fg(Color.BLUE).add(Modifier.BOLD | Modifier.ITALIC)
    patched = _patched(base, Style.reset().with_fg(Color.YELLOW))
    assert patched.fg == Color.YELLOW
    assert patched.bg == Color.RESET
    assert patched.add_modifier == EMPTY


def test_add_then_remove_moves_flag():
    style = Style().add(Modifier.BOLD).remove(Modifier.BOLD)
    assert style.add_modifier == EMPTY
    assert style.sub_modifier == Modifier.BOLD


def test_builders_do_not_mutate():
    original = Style()
    original.with_fg(Color.RED).add(Modifier.DIM)
    assert original == Style()


def test_rgb_and_indexed_colours_patch():
    style = _patched(Style().with_fg(Rgb(1, 2, 3)), Style().with_bg(Indexed(200)))
    assert style.fg == Rgb(1, 2, 3)
    assert style.bg == Indexed(200)


@pytest.mark.parametrize("args", [(256, 0, 0), (0, -1, 0), (0, 0, 300)])
def test_rgb_out_of_range(args):
    with pytest.raises(ValueError):
        Rgb(*args)


def test_indexed_out_of_range():
    with pytest.raises(ValueError):
        Indexed(256)