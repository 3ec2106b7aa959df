"""
Internationalization (i18n) module for podterm.

Provides a simple translation system with English and Spanish support.
Set PODTERM_LANG environment variable to change language (default: en).
"""

import os
from typing import Dict

# Default language (can be overridden by PODTERM_LANG env var)
LANG = os.environ.get("PODTERM_LANG", "en")

STRINGS: Dict[str, Dict[str, str]] = {
    # =========================================================================
    # ENGLISH (Default)
    # =========================================================================
    "en": {
        "app.header": "Up/Down: move  Enter: select  Esc: back/quit  P: play/pause  S: stop  ←/→: seek  T: theme",
        "app.any_key": "Press any key...",
        "app.loading": "Loading...",
        "app.loading_help": "Esc: stop waiting",
        # Main menu
        "menu.title": "Select an action",
        "menu.help": "Up/Down: move   Enter: select   Esc: quit",
        "menu.open": "Open subscription",
        "menu.add": "Add subscription",
        "menu.remove": "Remove subscription",
        "menu.quit": "Quit",
        # Subscriptions
        "subs.pick": "Select a feed",
        "subs.pick_help": "Up/Down: move   Enter: select   Esc: back",
        "subs.none": "No subscriptions yet.",
        "subs.none_remove": "No subscriptions to remove.",
        "subs.add_title": "Add subscription",
        "subs.add_help": "Paste the RSS/Atom feed URL. Enter: confirm   Esc: back",
        "subs.already": "Already subscribed.",
        "subs.added": "Subscribed:",
        "subs.add_failed": "Failed to subscribe:",
        "subs.remove_pick": "Remove which feed?",
        "subs.remove_help": "Up/Down: move   Enter: remove   Esc: back",
        "subs.remove_confirm": "Remove this subscription?",
        "subs.removed": "Removed.",
        # Episodes
        "episodes.title": "Episodes",
        "episodes.help": "Up/Down: move   PgUp/PgDn: page   Enter: select   Esc: back",
        "episodes.refresh_failed": "Feed refresh failed:",
        "episodes.none": "No playable episodes found (no enclosures).",
        "episodes.played": "(played)",
        "episodes.no_date": "---- -- --",
        # Episode actions
        "actions.title": "Episode actions",
        "actions.help": "Up/Down: move   Enter: select   Esc: back",
        "actions.play": "Play (download if needed)",
        "actions.stream": "Stream without downloading",
        "actions.toggle": "Play/Pause (P)",
        "actions.stop": "Stop (S)",
        "actions.seek_back": "Seek -{seconds}s (Left)",
        "actions.seek_forward": "Seek +{seconds}s (Right)",
        "actions.mark_played": "Mark played",
        "actions.back": "Back",
        "actions.marked": "Marked played.",
        "actions.already_marked": "Already marked played.",
        # Confirm
        "confirm.help": "Y/N: choose   Enter: accept default   Esc: back",
        "confirm.default_yes": "Default: Yes",
        "confirm.default_no": "Default: No",
        # Input
        "input.label": "Input",
        # Player status
        "player.playing": "Playing",
        "player.paused": "Paused",
        "player.stopped": "Stopped",
        "player.downloading": "Downloading",
        "player.failed": "Last error:",
        "player.theme": "Theme",
    },
    # =========================================================================
    # SPANISH
    # =========================================================================
    "es": {
        "app.header": "↑/↓: mover  Enter: elegir  Esc: volver/salir  P: play/pausa  S: detener  ←/→: saltar  T: tema",
        "app.any_key": "Presioná cualquier tecla...",
        "app.loading": "Cargando...",
        "app.loading_help": "Esc: dejar de esperar",
        "menu.title": "Elegí una acción",
        "menu.help": "↑/↓: mover   Enter: elegir   Esc: salir",
        "menu.open": "Abrir suscripción",
        "menu.add": "Agregar suscripción",
        "menu.remove": "Quitar suscripción",
        "menu.quit": "Salir",
        "subs.pick": "Elegí un feed",
        "subs.pick_help": "↑/↓: mover   Enter: elegir   Esc: volver",
        "subs.none": "Todavía no hay suscripciones.",
        "subs.none_remove": "No hay suscripciones para quitar.",
        "subs.add_title": "Agregar suscripción",
        "subs.add_help": "Pegá la URL del feed RSS/Atom. Enter: confirmar   Esc: volver",
        "subs.already": "Ya estás suscripto.",
        "subs.added": "Suscripto:",
        "subs.add_failed": "No se pudo suscribir:",
        "subs.remove_pick": "¿Qué feed quitar?",
        "subs.remove_help": "↑/↓: mover   Enter: quitar   Esc: volver",
        "subs.remove_confirm": "¿Quitar esta suscripción?",
        "subs.removed": "Quitada.",
        "episodes.title": "Episodios",
        "episodes.help": "↑/↓: mover   RePág/AvPág: página   Enter: elegir   Esc: volver",
        "episodes.refresh_failed": "Falló la actualización del feed:",
        "episodes.none": "No hay episodios reproducibles (sin enclosures).",
        "episodes.played": "(escuchado)",
        "episodes.no_date": "---- -- --",
        "actions.title": "Acciones del episodio",
        "actions.help": "↑/↓: mover   Enter: elegir   Esc: volver",
        "actions.play": "Reproducir (descargar si hace falta)",
        "actions.stream": "Escuchar sin descargar",
        "actions.toggle": "Play/Pausa (P)",
        "actions.stop": "Detener (S)",
        "actions.seek_back": "Retroceder {seconds}s (Izq)",
        "actions.seek_forward": "Avanzar {seconds}s (Der)",
        "actions.mark_played": "Marcar como escuchado",
        "actions.back": "Volver",
        "actions.marked": "Marcado como escuchado.",
        "actions.already_marked": "Ya estaba marcado como escuchado.",
        "confirm.help": "S/N: elegir   Enter: opción por defecto   Esc: volver",
        "confirm.default_yes": "Por defecto: Sí",
        "confirm.default_no": "Por defecto: No",
        "input.label": "Entrada",
        "player.playing": "Reproduciendo",
        "player.paused": "Pausado",
        "player.stopped": "Detenido",
        "player.downloading": "Descargando",
        "player.failed": "Último error:",
        "player.theme": "Tema",
    },
}


def t(key: str, **kwargs) -> str:
    """
    Get translated string for the given key.

    Falls back to English, then to the key itself. Keyword arguments are
    substituted with str.format.
    """
    lang_strings = STRINGS.get(LANG, STRINGS["en"])
    text = lang_strings.get(key) or STRINGS["en"].get(key) or key
    if kwargs:
        try:
            text = text.format(**kwargs)
        except (KeyError, ValueError):
            pass
    return text


def get_language() -> str:
    """Get current language code."""
    return LANG


def set_language(lang: str) -> None:
    """Set current language (runtime change)."""
    global LANG
    if lang in STRINGS:
        LANG = lang
