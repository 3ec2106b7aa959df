"""
Feed Service

Fetches RSS/Atom feeds over HTTP and turns their items into playable
episodes (items without an audio enclosure are skipped).
"""

import logging
import threading
from datetime import datetime, timezone
from typing import List, Optional, Tuple

import feedparser
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from podterm import __version__
from podterm.core.errors import FeedError
from podterm.core.models import Episode, sort_episodes

logger = logging.getLogger("FeedService")

USER_AGENT = f"podterm/{__version__} (+https://pypi.org/project/podterm/)"
HTTP_RETRY_TOTAL = 3
HTTP_BACKOFF_FACTOR = 0.5
HTTP_RETRY_STATUS_CODES = (429, 500, 502, 503, 504)
UNTITLED = "(untitled)"
# Playlist formats used by radio-style enclosures
LIVE_STREAM_TYPES = (
    "audio/x-mpegurl",
    "audio/mpegurl",
    "application/x-mpegurl",
    "application/vnd.apple.mpegurl",
    "audio/x-scpls",
)


def _build_session() -> requests.Session:
    retry = Retry(
        total=HTTP_RETRY_TOTAL,
        backoff_factor=HTTP_BACKOFF_FACTOR,
        status_forcelist=HTTP_RETRY_STATUS_CODES,
        allowed_methods=frozenset({"GET", "HEAD"}),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session = requests.Session()
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers["User-Agent"] = USER_AGENT
    return session


class FeedService:
    """Retrieves a feed and extracts its title and episodes."""

    def __init__(self, timeout: float = 30, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self._session = session
        self._session_lock = threading.Lock()

    @property
    def session(self) -> requests.Session:
        with self._session_lock:
            if self._session is None:
                self._session = _build_session()
            return self._session

    def fetch_feed(self, feed_url: str) -> Tuple[str, List[Episode]]:
        """Download and parse a feed. Raises FeedError on any failure."""
        feed_url = feed_url.strip()
        if not feed_url.lower().startswith(("http://", "https://")):
            raise FeedError(f"Not an http(s) URL: {feed_url}")

        logger.info(f"Fetching feed {feed_url}")
        try:
            resp = self.session.get(feed_url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise FeedError(f"Could not fetch {feed_url}: {e}") from e

        return self.parse_feed(resp.content, feed_url)

    def parse_feed(self, content: bytes, feed_url: str) -> Tuple[str, List[Episode]]:
        parsed = feedparser.parse(content)
        if parsed.bozo and not parsed.entries and not parsed.feed:
            raise FeedError(
                f"Not a valid feed: {feed_url} ({parsed.get('bozo_exception')})"
            )

        feed_title = (parsed.feed.get("title") or "").strip() or feed_url

        episodes: List[Episode] = []
        for entry in parsed.entries:
            enclosure = _enclosure(entry)
            if enclosure is None:
                continue
            audio_url = enclosure["href"]

            title = (entry.get("title") or "").strip() or UNTITLED
            episode_id = (entry.get("id") or "").strip() or audio_url
            episodes.append(
                Episode(
                    feed_title=feed_title,
                    title=title,
                    published=_published(entry),
                    audio_url=audio_url,
                    id=episode_id,
                    live=_is_live(enclosure),
                )
            )

        logger.info(f"Feed '{feed_title}': {len(episodes)} playable episodes")
        return feed_title, sort_episodes(episodes)


def _enclosure(entry) -> Optional[dict]:
    """First enclosure with an href, preferring audio/* types."""
    enclosures = list(entry.get("enclosures") or [])
    if not enclosures:
        enclosures = [
            link
            for link in entry.get("links") or []
            if link.get("rel") == "enclosure"
        ]

    fallback = None
    for enc in enclosures:
        href = (enc.get("href") or enc.get("url") or "").strip()
        if not href:
            continue
        found = {
            "href": href,
            "type": (enc.get("type") or "").lower(),
            "length": enc.get("length"),
        }
        if found["type"].startswith("audio/"):
            return found
        if fallback is None:
            fallback = found
    return fallback


def _is_live(enclosure: dict) -> bool:
    """Playlist enclosures, or ones that declare no length, have no fixed end."""
    if enclosure["type"] in LIVE_STREAM_TYPES:
        return True
    return not str(enclosure["length"] or "").strip()


def _published(entry) -> Optional[datetime]:
    stamp = entry.get("published_parsed") or entry.get("updated_parsed")
    if not stamp:
        return None
    try:
        return datetime(*stamp[:6], tzinfo=timezone.utc)
    except (TypeError, ValueError):
        return None
