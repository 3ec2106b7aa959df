"""
Navigation Controller

The menu graph: main menu -> feed -> episode list -> episode actions.
Every screen is a SelectionWidget (or a dialog) sharing one playback
orchestrator and one set of global playback keys.
"""

import logging
from typing import Any, List

from podterm.config.i18n import t
from podterm.core.models import (
    Episode,
    Subscription,
    find_subscription,
    sort_subscriptions,
)
from podterm.ui.dialogs import Dialogs
from podterm.ui.selection import CANCELLED, SelectionWidget
from podterm.ui.status import format_status

logger = logging.getLogger("NavigationController")

MAIN_ACTIONS = ["menu.open", "menu.add", "menu.remove", "menu.quit"]
EPISODE_ACTIONS = [
    "actions.play",
    "actions.stream",
    "actions.toggle",
    "actions.stop",
    "actions.seek_back",
    "actions.seek_forward",
    "actions.mark_played",
    "actions.back",
]


class NavigationController:
    def __init__(self, surface, store, feeds, orchestrator, config, themes=None):
        self.surface = surface
        self.store = store
        self.feeds = feeds
        self.orchestrator = orchestrator
        self.config = config
        self.themes = themes

        self.page_size = int(config.get("ui.page_size", 15))
        self.menu_page_size = int(config.get("ui.menu_page_size", 10))
        self.seek_seconds = float(config.get("playback.seek_seconds", 15))

        self.subscriptions: List[Subscription] = store.load_subscriptions()
        self.state = store.load_state()

        self.selector = SelectionWidget(surface)
        self.dialogs = Dialogs(
            surface,
            footer_provider=self.footer,
            global_key_handler=self.handle_global_key,
        )

    # ---------- shared hooks ----------
    def footer(self) -> str:
        return format_status(self.orchestrator.status())

    def handle_global_key(self, key: str, item: Any = None) -> bool:
        """Playback keys work on every screen, whatever the cursor is on."""
        action = self.config.get_action_for_key(key)
        if action is None:
            return False

        if action == "play_pause":
            self.orchestrator.toggle_pause()
        elif action == "stop":
            self.orchestrator.stop()
        elif action == "seek_backward":
            self.orchestrator.seek_by(-self.seek_seconds)
        elif action == "seek_forward":
            self.orchestrator.seek_by(self.seek_seconds)
        elif action == "cycle_theme":
            if not self.themes:
                return False
            theme = self.themes.cycle()
            self.surface.set_palette(theme.palette())
            logger.info(f"{t('player.theme')}: {theme.name}")
        else:
            return False
        return True

    def _select(self, title: str, help_text: str, items, render_line, page_size: int):
        return self.selector.select(
            title,
            help_text,
            items,
            render_line,
            page_size=page_size,
            footer_provider=self.footer,
            global_key_handler=self.handle_global_key,
        )

    # ---------- main menu ----------
    def run(self):
        logger.info(
            f"Session started with {len(self.subscriptions)} subscriptions, "
            f"{len(self.state.played_episode_ids)} played episodes"
        )
        try:
            while True:
                choice = self._select(
                    t("menu.title"),
                    t("menu.help"),
                    MAIN_ACTIONS,
                    t,
                    self.menu_page_size,
                )
                if choice is CANCELLED or choice == "menu.quit":
                    break
                if choice == "menu.open":
                    self.open_subscription()
                elif choice == "menu.add":
                    self.add_subscription()
                elif choice == "menu.remove":
                    self.remove_subscription()
        finally:
            self.orchestrator.stop()
            self._save_state()
            logger.info("Session ended")

    # ---------- subscriptions ----------
    def open_subscription(self):
        if not self.subscriptions:
            self.dialogs.show_message(t("subs.none"), "info")
            return

        while True:
            sub = self._select(
                t("subs.pick"),
                t("subs.pick_help"),
                self.subscriptions,
                lambda s: s.display_title,
                self.page_size,
            )
            if sub is CANCELLED:
                return
            self.browse_feed(sub)

    def add_subscription(self):
        url = self.dialogs.prompt_text(t("subs.add_title"), t("subs.add_help"))
        if url is None:
            return
        url = url.strip()
        if not url:
            return

        if find_subscription(self.subscriptions, url):
            self.dialogs.show_message(t("subs.already"), "info")
            return

        try:
            result = self.dialogs.run_in_background(
                t("subs.add_title"), self.feeds.fetch_feed, url
            )
        except Exception as e:
            logger.warning(f"Subscribing to {url} failed: {e}")
            self.dialogs.show_message(f"{t('subs.add_failed')} {e}", "error")
            return
        if result is CANCELLED:
            return

        title, _ = result
        # The list may have changed while the fetch ran
        if find_subscription(self.subscriptions, url):
            self.dialogs.show_message(t("subs.already"), "info")
            return

        self.subscriptions.append(Subscription(title=title, feed_url=url))
        sort_subscriptions(self.subscriptions)
        if self._save_subscriptions():
            logger.info(f"Subscribed to '{title}' ({url})")
            self.dialogs.show_message(f"{t('subs.added')} {title}", "success")

    def remove_subscription(self):
        if not self.subscriptions:
            self.dialogs.show_message(t("subs.none_remove"), "info")
            return

        sub = self._select(
            t("subs.remove_pick"),
            t("subs.remove_help"),
            self.subscriptions,
            lambda s: s.display_title,
            self.page_size,
        )
        if sub is CANCELLED:
            return

        answer = self.dialogs.confirm(
            t("subs.remove_pick"),
            f"{t('subs.remove_confirm')}\n\n{sub.display_title}\n{sub.feed_url}",
            default_yes=False,
        )
        if not answer:
            return

        self.subscriptions.remove(sub)
        if self._save_subscriptions():
            logger.info(f"Removed subscription '{sub.display_title}'")
            self.dialogs.show_message(t("subs.removed"), "success")

    # ---------- episodes ----------
    def browse_feed(self, sub: Subscription):
        while True:
            try:
                result = self.dialogs.run_in_background(
                    sub.display_title, self.feeds.fetch_feed, sub.feed_url
                )
            except Exception as e:
                logger.warning(f"Refreshing {sub.feed_url} failed: {e}")
                self.dialogs.show_message(
                    f"{t('episodes.refresh_failed')} {e}", "error", title=sub.display_title
                )
                return
            if result is CANCELLED:
                return

            _, episodes = result
            if not episodes:
                self.dialogs.show_message(
                    t("episodes.none"), "info", title=sub.display_title
                )
                return

            episode = self._select(
                f"{t('episodes.title')}: {sub.display_title}",
                t("episodes.help"),
                episodes,
                self.episode_line,
                self.page_size,
            )
            if episode is CANCELLED:
                return
            self.episode_menu(episode)

    def episode_line(self, episode: Episode) -> str:
        date = (
            episode.published.strftime("%Y-%m-%d")
            if episode.published
            else t("episodes.no_date")
        )
        marker = "♪" if self._is_current(episode) else " "
        played = f"{t('episodes.played')} " if self.state.is_played(episode) else ""
        return f"{marker} {date}  {played}{episode.title}"

    def _is_current(self, episode: Episode) -> bool:
        current = self.orchestrator.current_episode
        return current is not None and current.audio_url == episode.audio_url

    def action_label(self, action: str) -> str:
        seconds = int(self.seek_seconds)
        return t(action, seconds=seconds)

    def episode_menu(self, episode: Episode):
        while True:
            cmd = self._select(
                f"{t('actions.title')}: {episode.title}",
                f"{episode.audio_url}\n{t('actions.help')}",
                EPISODE_ACTIONS,
                self.action_label,
                self.menu_page_size,
            )
            if cmd is CANCELLED or cmd == "actions.back":
                return

            if cmd == "actions.play":
                self.orchestrator.request_play(episode)
            elif cmd == "actions.stream":
                self.orchestrator.request_stream(episode)
            elif cmd == "actions.toggle":
                self.orchestrator.toggle_pause()
            elif cmd == "actions.stop":
                self.orchestrator.stop()
            elif cmd == "actions.seek_back":
                self.orchestrator.seek_by(-self.seek_seconds)
            elif cmd == "actions.seek_forward":
                self.orchestrator.seek_by(self.seek_seconds)
            elif cmd == "actions.mark_played":
                self.mark_played(episode)

    def mark_played(self, episode: Episode):
        if self.state.mark_played(episode):
            self._save_state()
            self.dialogs.show_message(t("actions.marked"), "success")
        else:
            self.dialogs.show_message(t("actions.already_marked"), "info")

    # ---------- persistence ----------
    def _save_subscriptions(self) -> bool:
        try:
            self.store.save_subscriptions(self.subscriptions)
        except OSError as e:
            logger.error(f"Could not save subscriptions: {e}")
            self.dialogs.show_message(str(e), "error")
            return False
        return True

    def _save_state(self) -> bool:
        try:
            self.store.save_state(self.state)
        except OSError as e:
            logger.error(f"Could not save state: {e}")
            return False
        return True
