"""
Selection Widget

Generic paginated list picker. One call to select() owns the screen until
the user picks an item or backs out; in between it redraws on every key and
on every idle tick so the footer stays live.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence

import urwid

from podterm.config.i18n import t

logger = logging.getLogger("SelectionWidget")


class _Cancelled:
    def __repr__(self):
        return "CANCELLED"

    def __bool__(self):
        return False


CANCELLED = _Cancelled()

RenderLine = Callable[[Any], str]
FooterProvider = Callable[[], Any]
# (key, item under cursor) -> True when the key was consumed
GlobalKeyHandler = Callable[[str, Any], bool]


@dataclass
class SelectionState:
    items: Sequence[Any]
    page_size: int
    selected_index: int = 0
    viewport_top: int = 0

    def move(self, delta: int):
        self.selected_index += delta
        self.clamp()

    def move_to(self, index: int):
        self.selected_index = index
        self.clamp()

    def clamp(self):
        last = len(self.items) - 1
        if self.selected_index > last:
            self.selected_index = last
        if self.selected_index < 0:
            self.selected_index = 0

        if self.selected_index < self.viewport_top:
            self.viewport_top = self.selected_index
        if self.selected_index >= self.viewport_top + self.page_size:
            self.viewport_top = self.selected_index - self.page_size + 1
        if self.viewport_top < 0:
            self.viewport_top = 0

    @property
    def current(self) -> Any:
        return self.items[self.selected_index]

    def visible_range(self) -> range:
        end = min(self.viewport_top + self.page_size, len(self.items))
        return range(self.viewport_top, end)


def build_header(header_text: str, title: str, help_text: str) -> urwid.Widget:
    rows = [
        urwid.AttrMap(urwid.Text(f" podterm  {header_text}"), "header"),
        urwid.Divider(),
        urwid.Text(("title", title)),
    ]
    if help_text:
        rows.append(urwid.Text(("help", help_text)))
    rows.append(urwid.Divider())
    return urwid.Pile(rows)


def build_footer(footer: Any) -> Optional[urwid.Widget]:
    if footer is None or footer == "":
        return None
    return urwid.Pile(
        [urwid.Divider("─"), urwid.AttrMap(urwid.Text(footer), "status")]
    )


def build_screen(
    header_text: str,
    title: str,
    help_text: str,
    body_rows: List[urwid.Widget],
    footer: Any = None,
    focus_row: int = 0,
) -> urwid.Frame:
    walker = urwid.SimpleFocusListWalker(body_rows or [urwid.Text("")])
    if body_rows:
        walker.set_focus(min(max(focus_row, 0), len(body_rows) - 1))
    return urwid.Frame(
        body=urwid.ListBox(walker),
        header=build_header(header_text, title, help_text),
        footer=build_footer(footer),
    )


class SelectionWidget:
    """
    Reusable list picker bound to a surface.

    The surface needs draw(widget) and read_keys() -> list of keys; the
    latter returns an empty list when the idle tick elapses.
    """

    NAV_UP = ("up",)
    NAV_DOWN = ("down",)
    NAV_PAGE_UP = ("page up",)
    NAV_PAGE_DOWN = ("page down",)
    NAV_HOME = ("home",)
    NAV_END = ("end",)
    NAV_SELECT = ("enter",)
    NAV_CANCEL = ("esc",)

    def __init__(self, surface, header_text: Optional[str] = None):
        self.surface = surface
        self.header_text = header_text if header_text is not None else t("app.header")
        self.state: Optional[SelectionState] = None

    def select(
        self,
        title: str,
        help_text: str,
        items: Sequence[Any],
        render_line: RenderLine,
        page_size: int = 15,
        footer_provider: Optional[FooterProvider] = None,
        global_key_handler: Optional[GlobalKeyHandler] = None,
    ) -> Any:
        """Return the chosen element of items, or CANCELLED."""
        if not items:
            return CANCELLED

        state = SelectionState(items=items, page_size=max(1, int(page_size)))
        self.state = state

        while True:
            state.clamp()
            self.surface.draw(
                self.render(title, help_text, state, render_line, footer_provider)
            )

            for key in self.surface.read_keys():
                # Mouse events arrive as tuples
                if not isinstance(key, str):
                    continue

                if global_key_handler is not None:
                    try:
                        consumed = global_key_handler(key, state.current)
                    except Exception:
                        logger.exception(f"Global key handler failed on '{key}'")
                        consumed = True
                    if consumed:
                        continue

                if key in self.NAV_UP:
                    state.move(-1)
                elif key in self.NAV_DOWN:
                    state.move(1)
                elif key in self.NAV_PAGE_UP:
                    state.move(-state.page_size)
                elif key in self.NAV_PAGE_DOWN:
                    state.move(state.page_size)
                elif key in self.NAV_HOME:
                    state.move_to(0)
                elif key in self.NAV_END:
                    state.move_to(len(items) - 1)
                elif key in self.NAV_SELECT:
                    return state.current
                elif key in self.NAV_CANCEL:
                    return CANCELLED

    def render(
        self,
        title: str,
        help_text: str,
        state: SelectionState,
        render_line: RenderLine,
        footer_provider: Optional[FooterProvider] = None,
    ) -> urwid.Widget:
        rows = []
        for i in state.visible_range():
            text = render_line(state.items[i])
            if i == state.selected_index:
                rows.append(urwid.AttrMap(urwid.Text(f"> {text}"), "highlight"))
            else:
                rows.append(urwid.AttrMap(urwid.Text(f"  {text}"), "normal"))

        footer = footer_provider() if footer_provider else None
        return build_screen(
            self.header_text,
            title,
            help_text,
            rows,
            footer=footer,
            focus_row=state.selected_index - state.viewport_top,
        )
