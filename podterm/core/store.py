"""
Data Store

Whole-document JSON persistence for subscriptions and played state, plus the
cache path derivation for downloaded episodes.
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import re
import tempfile
import threading
from pathlib import Path
from typing import Any, List
from urllib.parse import urlparse

from podterm.core.config import AppPaths
from podterm.core.models import AppState, Episode, Subscription

logger = logging.getLogger("DataStore")

STORE_LOCK = threading.RLock()

_UNSAFE_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def read_json(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def write_json_atomic(path: Path, data: Any) -> None:
    """
    Atomic JSON write: write temp file -> fsync -> os.replace().

    This avoids corrupt/partial JSON if the process crashes mid-write.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=str(path.parent),
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    finally:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass


def make_safe_filename(name: str, max_length: int = 50) -> str:
    name = _UNSAFE_FILENAME_CHARS.sub("_", name)
    return name[:max_length] if len(name) > max_length else name


class DataStore:
    """Loads and saves subscriptions and state as whole documents."""

    def __init__(self, paths: AppPaths):
        self.paths = paths

    def _read_document(self, path: Path) -> Any:
        if not path.exists():
            return None
        try:
            with STORE_LOCK:
                return read_json(path)
        except (OSError, ValueError) as e:
            logger.warning(f"Treating malformed document {path} as empty: {e}")
            return None

    def load_subscriptions(self) -> List[Subscription]:
        data = self._read_document(self.paths.subscriptions_path)
        if not isinstance(data, list):
            if data is not None:
                logger.warning("subscriptions.json is not a list, ignoring it")
            return []

        subs: List[Subscription] = []
        for entry in data:
            if not isinstance(entry, dict):
                continue
            feed_url = entry.get("feed_url") or entry.get("FeedUrl")
            if not feed_url:
                continue
            title = entry.get("title") or entry.get("Title") or ""
            subs.append(Subscription(title=str(title), feed_url=str(feed_url)))
        return subs

    def save_subscriptions(self, subs: List[Subscription]) -> None:
        payload = [{"title": s.title, "feed_url": s.feed_url} for s in subs]
        with STORE_LOCK:
            write_json_atomic(self.paths.subscriptions_path, payload)
        logger.info(f"Saved {len(subs)} subscriptions")

    def load_state(self) -> AppState:
        data = self._read_document(self.paths.state_path)
        if not isinstance(data, dict):
            if data is not None:
                logger.warning("state.json is not an object, ignoring it")
            return AppState()

        ids = data.get("played_episode_ids") or data.get("PlayedEpisodeIds") or []
        if not isinstance(ids, list):
            return AppState()
        return AppState(played_episode_ids={str(i) for i in ids})

    def save_state(self, state: AppState) -> None:
        payload = {"played_episode_ids": sorted(state.played_episode_ids)}
        with STORE_LOCK:
            write_json_atomic(self.paths.state_path, payload)

    def cache_path_for(self, episode: Episode) -> Path:
        """Stable cache location: <cache>/<feed>/<sha256(audio_url)><ext>."""
        digest = hashlib.sha256(episode.audio_url.encode("utf-8")).hexdigest().upper()

        ext = ".mp3"
        try:
            suffix = Path(urlparse(episode.audio_url).path).suffix
            if suffix and len(suffix) <= 6:
                ext = suffix
        except ValueError:
            pass

        folder = self.paths.cache_dir / make_safe_filename(episode.feed_title)
        folder.mkdir(parents=True, exist_ok=True)
        return folder / f"{digest}{ext}"
