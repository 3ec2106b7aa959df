#!/usr/bin/env python3
"""
podterm - terminal podcast client

Wires the stores, feed service, downloader, VLC engine and playback
orchestrator together and hands the terminal to the navigation controller.
"""

import shutil
import sys
import time
import traceback

from podterm.core.config import AppPaths, ConfigManager
from podterm.core.downloader import EpisodeDownloader
from podterm.core.feeds import FeedService
from podterm.core.logger import setup_logging
from podterm.core.orchestrator import PlaybackOrchestrator
from podterm.core.player import EpisodePlayer
from podterm.core.store import DataStore
from podterm.ui.navigation import NavigationController
from podterm.ui.surface import TerminalSurface
from podterm.ui.themes import ThemeLoader

MIN_WIDTH = 60
MIN_HEIGHT = 20


def main():
    cols, lines = shutil.get_terminal_size()
    if cols < MIN_WIDTH or lines < MIN_HEIGHT:
        print(f"\n⚠️  Terminal: {cols}x{lines}")
        print(f"   Recommended: {MIN_WIDTH}x{MIN_HEIGHT} or larger")
        print("   Starting in 2 seconds...")
        time.sleep(2)

    paths = AppPaths.create()
    logger = setup_logging(paths.log_dir)
    orchestrator = None
    try:
        config = ConfigManager(paths)

        themes = ThemeLoader(paths.themes_dir)
        theme = themes.select(config.get("ui.theme", "classic"))

        store = DataStore(paths)
        feeds = FeedService(timeout=config.get("feeds.timeout_seconds", 30))
        downloader = EpisodeDownloader(
            store,
            timeout_seconds=config.get("download.timeout_seconds", 1800),
            socket_timeout=config.get("download.socket_timeout", 30),
        )
        player = EpisodePlayer()
        orchestrator = PlaybackOrchestrator(player, downloader)
        logger.info(f"Starting podterm (data in {paths.root}, {player.get_backend_version()})")

        with TerminalSurface(
            theme.palette(), tick_seconds=config.get("ui.tick_seconds", 0.25)
        ) as surface:
            NavigationController(
                surface, store, feeds, orchestrator, config, themes=themes
            ).run()
    except KeyboardInterrupt:
        print("\n👋 Goodbye!")
    except Exception as e:
        logger.critical("Critical Error: %s", e, exc_info=(type(e), e, e.__traceback__))
        print(f"\n❌ Critical Error: {e}")
        traceback.print_exception(type(e), e, e.__traceback__)
        sys.exit(1)
    finally:
        if orchestrator is not None:
            orchestrator.shutdown()


if __name__ == "__main__":
    main()
