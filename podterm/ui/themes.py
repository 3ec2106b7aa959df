"""
Theme Loader

Built-in urwid palettes plus user themes from themes/*.yaml:

    name: Solarized
    palette:
      header: [black, dark cyan]
      highlight: [black, yellow]
      status: [white, dark blue]

Entries missing from a YAML theme are taken from the classic palette.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml

logger = logging.getLogger("ThemeLoader")

PALETTE_ENTRIES = (
    "header",
    "title",
    "help",
    "normal",
    "highlight",
    "status",
    "error",
    "success",
    "info",
)

PaletteEntry = Tuple[str, str, str]

BUILTIN_THEMES: Dict[str, Dict[str, Tuple[str, str]]] = {
    "classic": {
        "header": ("black", "dark cyan"),
        "title": ("yellow,bold", ""),
        "help": ("dark gray", ""),
        "normal": ("", ""),
        "highlight": ("black", "dark cyan"),
        "status": ("black", "dark cyan"),
        "error": ("light red,bold", ""),
        "success": ("light green", ""),
        "info": ("light blue", ""),
    },
    "mono": {
        "header": ("standout", ""),
        "title": ("bold", ""),
        "help": ("", ""),
        "normal": ("", ""),
        "highlight": ("standout", ""),
        "status": ("standout", ""),
        "error": ("bold", ""),
        "success": ("bold", ""),
        "info": ("", ""),
    },
    "amber": {
        "header": ("black", "brown"),
        "title": ("yellow,bold", ""),
        "help": ("brown", ""),
        "normal": ("yellow", ""),
        "highlight": ("black", "yellow"),
        "status": ("black", "brown"),
        "error": ("light red,bold", ""),
        "success": ("yellow,bold", ""),
        "info": ("brown", ""),
    },
}


class Theme:
    def __init__(self, name: str, colors: Dict[str, Tuple[str, str]]):
        self.name = name
        self.colors = colors

    def palette(self) -> List[PaletteEntry]:
        return [(entry, fg, bg) for entry, (fg, bg) in self.colors.items()]


class ThemeLoader:
    """Loads the built-in themes and any valid YAML themes from a directory."""

    def __init__(self, themes_dir: Optional[Path] = None):
        self.themes_dir = Path(themes_dir) if themes_dir else None
        self.themes: List[Theme] = [
            Theme(name, dict(colors)) for name, colors in BUILTIN_THEMES.items()
        ]
        self.themes.extend(self._load_user_themes())
        self.current_idx = 0

    def _load_user_themes(self) -> List[Theme]:
        if not self.themes_dir or not self.themes_dir.is_dir():
            return []
        themes = []
        for path in sorted(self.themes_dir.glob("*.yaml")) + sorted(
            self.themes_dir.glob("*.yml")
        ):
            try:
                themes.append(self.load_file(path))
            except (OSError, ValueError, yaml.YAMLError) as e:
                logger.warning(f"Skipping theme {path.name}: {e}")
        return themes

    @staticmethod
    def load_file(path: Path) -> Theme:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError("theme file must be a mapping")

        palette = data.get("palette") or {}
        if not isinstance(palette, dict):
            raise ValueError("'palette' must be a mapping of entry -> [fg, bg]")

        colors = dict(BUILTIN_THEMES["classic"])
        for entry, value in palette.items():
            if entry not in PALETTE_ENTRIES:
                raise ValueError(f"unknown palette entry '{entry}'")
            if isinstance(value, str):
                colors[entry] = (value, "")
            elif isinstance(value, (list, tuple)) and 1 <= len(value) <= 2:
                fg = str(value[0] or "")
                bg = str(value[1] or "") if len(value) == 2 else ""
                colors[entry] = (fg, bg)
            else:
                raise ValueError(f"bad colors for '{entry}': {value!r}")

        name = str(data.get("name") or path.stem)
        return Theme(name, colors)

    def names(self) -> List[str]:
        return [theme.name for theme in self.themes]

    @property
    def current(self) -> Theme:
        return self.themes[self.current_idx]

    def select(self, name: str) -> Theme:
        """Make the named theme current (unknown names keep the current one)."""
        for idx, theme in enumerate(self.themes):
            if theme.name.lower() == (name or "").lower():
                self.current_idx = idx
                break
        return self.current

    def cycle(self, direction: int = 1) -> Theme:
        self.current_idx = (self.current_idx + direction) % len(self.themes)
        return self.current
