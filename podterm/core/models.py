from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Set


@dataclass(frozen=True)
class Subscription:
    title: str
    feed_url: str

    @property
    def display_title(self) -> str:
        return self.title.strip() or self.feed_url

    def same_feed(self, feed_url: str) -> bool:
        return self.feed_url.casefold() == feed_url.strip().casefold()


@dataclass(frozen=True)
class Episode:
    feed_title: str
    title: str
    published: Optional[datetime]
    audio_url: str
    id: Optional[str] = None
    # Stream without a known end: no seeking, no duration
    live: bool = False

    @property
    def played_key(self) -> str:
        """Identity used for played tracking: guid when present, else the enclosure URL."""
        return self.id or self.audio_url


@dataclass
class AppState:
    played_episode_ids: Set[str] = field(default_factory=set)

    def mark_played(self, episode: Episode) -> bool:
        """Add the episode to the played set. Returns False if it already was."""
        key = episode.played_key
        if key in self.played_episode_ids:
            return False
        self.played_episode_ids.add(key)
        return True

    def is_played(self, episode: Episode) -> bool:
        return episode.played_key in self.played_episode_ids


def sort_episodes(episodes: Iterable[Episode]) -> List[Episode]:
    """Newest first; undated episodes last, keeping feed order among themselves."""
    episodes = list(episodes)
    dated = [e for e in episodes if e.published is not None]
    undated = [e for e in episodes if e.published is None]
    dated.sort(key=lambda e: e.published, reverse=True)
    return dated + undated


def sort_subscriptions(subscriptions: List[Subscription]) -> None:
    subscriptions.sort(key=lambda s: s.display_title.casefold())


def find_subscription(
    subscriptions: Iterable[Subscription], feed_url: str
) -> Optional[Subscription]:
    """Case-insensitive lookup by feed URL."""
    for sub in subscriptions:
        if sub.same_feed(feed_url):
            return sub
    return None
