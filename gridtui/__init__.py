"""Cell-buffer terminal UI toolkit: styles, text, layouts, buffers, line composers, backends and a diffing terminal."""

__version__ = "0.1.0"