"""
Terminal Surface

Full-screen urwid raw display driven without a MainLoop: callers draw a
widget, then block on input for at most one idle tick.
"""

import logging
from typing import List, Sequence, Tuple

import urwid
from urwid import raw_display

logger = logging.getLogger("TerminalSurface")


class TerminalSurface:
    """Draws widgets and reads keys on the real terminal."""

    def __init__(self, palette: Sequence[Tuple[str, str, str]], tick_seconds: float = 0.25):
        self.tick_seconds = tick_seconds
        self.screen = raw_display.Screen()
        self.screen.register_palette(list(palette))
        self.screen.set_input_timeouts(max_wait=tick_seconds)
        self._started = False

    def start(self):
        if not self._started:
            self.screen.start()
            self._started = True

    def stop(self):
        if self._started:
            self.screen.stop()
            self._started = False

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False

    def size(self) -> Tuple[int, int]:
        return self.screen.get_cols_rows()

    def draw(self, widget: urwid.Widget):
        size = self.size()
        canvas = widget.render(size, focus=True)
        self.screen.draw_screen(size, canvas)

    def read_keys(self) -> List:
        """Keys pressed since the last call; empty after an idle tick."""
        keys = self.screen.get_input()
        return [key for key in keys if key != "window resize"]

    def set_palette(self, palette: Sequence[Tuple[str, str, str]]):
        self.screen.register_palette(list(palette))
        # Cached cells still carry the old attributes
        self.screen.clear()
