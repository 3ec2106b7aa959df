"""
Episode Downloader

Makes sure an episode's enclosure exists in the local cache, fetching it
with yt-dlp and reporting fractional progress.
"""

import logging
import time
from pathlib import Path
from typing import Callable, Optional

import yt_dlp
from yt_dlp.utils import DownloadCancelled

from podterm.core.errors import DownloadError
from podterm.core.models import Episode
from podterm.core.store import DataStore

logger = logging.getLogger("EpisodeDownloader")

ProgressCallback = Callable[[float], None]


class EpisodeDownloader:
    """Cache-first episode fetcher."""

    def __init__(
        self,
        store: DataStore,
        timeout_seconds: float = 1800,
        socket_timeout: float = 30,
    ):
        self.store = store
        self.timeout_seconds = timeout_seconds

        # Keep yt-dlp quiet, it would write over the UI
        self._null_logger = logging.getLogger("yt-dlp")
        self._null_logger.setLevel(logging.CRITICAL)

        self.ydl_opts = {
            "format": "bestaudio/best",
            "quiet": True,
            "no_warnings": True,
            "noprogress": True,
            "noplaylist": True,
            "logger": self._null_logger,
            "socket_timeout": socket_timeout,
        }

    def is_cached(self, episode: Episode) -> Optional[Path]:
        path = self.store.cache_path_for(episode)
        if path.exists() and path.stat().st_size > 0:
            return path
        return None

    def ensure_local(
        self, episode: Episode, on_progress: Optional[ProgressCallback] = None
    ) -> Path:
        """
        Return the local path of the episode audio, downloading it if needed.

        Args:
            episode: Episode whose enclosure should be available locally
            on_progress: Called with a fraction in [0, 1] while downloading

        Returns:
            Path to the cached file

        Raises:
            DownloadError: transfer failed, produced no file, or exceeded the deadline
        """
        cached = self.is_cached(episode)
        if cached:
            logger.info(f"Cache hit for '{episode.title}': {cached}")
            return cached

        path = self.store.cache_path_for(episode)
        deadline = time.monotonic() + self.timeout_seconds

        opts = self.ydl_opts.copy()
        # outtmpl is a template; escape literal percent signs
        opts["outtmpl"] = str(path).replace("%", "%%")
        opts["progress_hooks"] = [self._create_progress_hook(on_progress, deadline)]

        logger.info(f"Downloading '{episode.title}' from {episode.audio_url}")
        try:
            with yt_dlp.YoutubeDL(opts) as ydl:
                ydl.download([episode.audio_url])
        except DownloadCancelled as e:
            raise DownloadError(
                f"Download of '{episode.title}' timed out after {self.timeout_seconds:.0f}s"
            ) from e
        except Exception as e:
            raise DownloadError(f"Failed to download {episode.audio_url}: {e}") from e

        if not path.exists() or path.stat().st_size == 0:
            raise DownloadError(f"Download of '{episode.title}' produced no file")

        if on_progress:
            on_progress(1.0)
        logger.info(f"Downloaded '{episode.title}' -> {path}")
        return path

    def _create_progress_hook(
        self, callback: Optional[ProgressCallback], deadline: float
    ):
        """Create a progress hook for yt-dlp."""

        def hook(d):
            if time.monotonic() > deadline:
                raise DownloadCancelled("deadline exceeded")
            if callback is None:
                return

            if d["status"] == "downloading":
                total = d.get("total_bytes") or d.get("total_bytes_estimate") or 0
                downloaded = d.get("downloaded_bytes") or 0
                if total > 0:
                    callback(downloaded / total)
            elif d["status"] == "finished":
                callback(1.0)

        return hook
