"""
Dialogs

Message, text prompt, yes/no confirmation and "wait for background work"
screens. Like the selection widget they own the surface until they return
and keep redrawing on idle ticks.
"""

import logging
import threading
from typing import Any, Callable, Optional

import urwid

from podterm.config.i18n import t
from podterm.ui.selection import CANCELLED, build_screen

logger = logging.getLogger("Dialogs")

SPINNER_FRAMES = ["◐", "◓", "◑", "◒"]


class Dialogs:
    def __init__(
        self,
        surface,
        header_text: Optional[str] = None,
        footer_provider: Optional[Callable[[], Any]] = None,
        global_key_handler: Optional[Callable[[str, Any], bool]] = None,
    ):
        self.surface = surface
        self.header_text = header_text if header_text is not None else t("app.header")
        self.footer_provider = footer_provider
        self.global_key_handler = global_key_handler

    def _global_key(self, key: str) -> bool:
        if self.global_key_handler is None:
            return False
        try:
            return bool(self.global_key_handler(key, None))
        except Exception:
            logger.exception(f"Global key handler failed on '{key}'")
            return True

    def _footer(self):
        return self.footer_provider() if self.footer_provider else None

    def _draw(self, title: str, help_text: str, rows, focus_row: int = 0):
        self.surface.draw(
            build_screen(
                self.header_text,
                title,
                help_text,
                rows,
                footer=self._footer(),
                focus_row=focus_row,
            )
        )

    def show_message(self, message: str, style: str = "info", title: str = ""):
        """Show a message until a key other than a playback key is pressed."""
        rows = [
            urwid.Text((style, message)),
            urwid.Divider(),
            urwid.Text(("help", t("app.any_key"))),
        ]
        while True:
            self._draw(title, "", rows)
            for key in self.surface.read_keys():
                if not isinstance(key, str):
                    continue
                if self._global_key(key):
                    continue
                return

    def prompt_text(self, title: str, help_text: str, default: str = "") -> Optional[str]:
        """Single-line input. Returns the text on Enter, None on Esc."""
        edit = urwid.Edit("", edit_text=default)
        box = urwid.LineBox(edit, title=t("input.label"), title_align="left")
        while True:
            self._draw(title, help_text, [box])
            cols = self.surface.size()[0]
            for key in self.surface.read_keys():
                if not isinstance(key, str):
                    continue
                if key == "esc":
                    return None
                if key == "enter":
                    return edit.edit_text
                edit.keypress((max(cols - 2, 1),), key)

    def confirm(self, title: str, question: str, default_yes: bool = True) -> Optional[bool]:
        """Yes/No question. Returns None on Esc."""
        default_label = t("confirm.default_yes") if default_yes else t("confirm.default_no")
        rows = [
            urwid.Text(question),
            urwid.Divider(),
            urwid.Text(("help", default_label)),
        ]
        while True:
            self._draw(title, t("confirm.help"), rows)
            for key in self.surface.read_keys():
                if not isinstance(key, str):
                    continue
                if key == "esc":
                    return None
                if key == "enter":
                    return default_yes
                if key in ("y", "Y", "s", "S"):
                    return True
                if key in ("n", "N"):
                    return False

    def run_in_background(self, title: str, func: Callable, *args, **kwargs) -> Any:
        """
        Run func on a worker thread while showing a spinner.

        Returns func's result, or CANCELLED when the user presses Esc (the
        worker keeps running and its result is dropped). Exceptions raised by
        func are re-raised here.
        """
        outcome = {}

        def worker():
            try:
                outcome["result"] = func(*args, **kwargs)
            except Exception as e:
                outcome["error"] = e

        thread = threading.Thread(target=worker, name="ui-worker", daemon=True)
        thread.start()

        frame = 0
        while thread.is_alive():
            spinner = SPINNER_FRAMES[frame % len(SPINNER_FRAMES)]
            self._draw(title, t("app.loading_help"), [urwid.Text(f"{spinner}  {t('app.loading')}")])
            frame += 1

            for key in self.surface.read_keys():
                if not isinstance(key, str):
                    continue
                if self._global_key(key):
                    continue
                if key == "esc":
                    logger.info(f"Stopped waiting for '{title}'")
                    return CANCELLED

        if "error" in outcome:
            raise outcome["error"]
        return outcome.get("result")
