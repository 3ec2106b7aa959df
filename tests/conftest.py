"""Shared fakes for the terminal, the playback engine and the network."""

import threading
import time
from collections import deque
from datetime import datetime, timezone
from pathlib import Path

import pytest

from podterm.core.config import AppPaths, ConfigManager
from podterm.core.models import Episode
from podterm.core.store import DataStore


class FakeSurface:
    """
    Scripted stand-in for TerminalSurface.

    Each entry of ``keys`` is one read_keys() batch: a list of keys, a single
    key string, or a callable returning either (evaluated when reached).
    Once the script is exhausted every read is an idle tick; too many idle
    ticks in a row raise so a stuck loop fails the test instead of hanging.
    """

    def __init__(self, keys=(), size=(80, 24), max_idle=400, hold_for_workers=True):
        self.batches = deque(keys)
        self.cols_rows = size
        self.max_idle = max_idle
        self.hold_for_workers = hold_for_workers
        self.frames = []
        self.palettes = []
        self.idle_reads = 0

    def size(self):
        return self.cols_rows

    def draw(self, widget):
        canvas = widget.render(self.cols_rows, focus=True)
        lines = []
        for line in canvas.text:
            if isinstance(line, bytes):
                line = line.decode("utf-8", "replace")
            lines.append(line.rstrip())
        self.frames.append("\n".join(lines))

    def read_keys(self):
        # Scripted keys belong to the screen after the spinner
        if self.hold_for_workers and _ui_worker_running():
            return self._idle()

        if self.batches:
            self.idle_reads = 0
            batch = self.batches.popleft()
            if callable(batch):
                batch = batch()
            if batch is None:
                return []
            if isinstance(batch, str):
                return [batch]
            return list(batch)

        return self._idle()

    def _idle(self):
        self.idle_reads += 1
        if self.idle_reads > self.max_idle:
            raise RuntimeError("FakeSurface ran out of scripted keys")
        time.sleep(0.005)
        return []

    def set_palette(self, palette):
        self.palettes.append(list(palette))

    @property
    def last_frame(self) -> str:
        return self.frames[-1] if self.frames else ""

    def saw(self, text: str) -> bool:
        return any(text in frame for frame in self.frames)


def _ui_worker_running() -> bool:
    return any(
        thread.name == "ui-worker" and thread.is_alive()
        for thread in threading.enumerate()
    )


class FakeEngine:
    """Records transport calls; position and duration are plain attributes."""

    def __init__(self):
        self.calls = []
        self.on_end_callback = None
        self.position = 0.0
        self.duration = 0.0
        self.fail_on_play = None
        self.cleaned_up = False
        self.live = None

    def play_file(self, path):
        if self.fail_on_play:
            raise self.fail_on_play
        self.calls.append(("play_file", path))
        return True

    def play_stream(self, url, live=False):
        if self.fail_on_play:
            raise self.fail_on_play
        self.live = live
        self.calls.append(("play_stream", url))
        return True

    def toggle_pause(self):
        self.calls.append(("toggle_pause",))

    def stop(self):
        self.calls.append(("stop",))

    def seek_by(self, seconds):
        self.calls.append(("seek_by", seconds))

    def cleanup(self):
        self.cleaned_up = True

    def played(self):
        return [call for call in self.calls if call[0] in ("play_file", "play_stream")]


class FakeFetcher:
    """
    ensure_local() stand-in.

    Per-episode behaviour is configured through ``steps`` (progress fractions
    to report), ``gates`` (an Event to wait on before finishing) and
    ``errors`` (an exception to raise).
    """

    def __init__(self):
        self.steps = {}
        self.gates = {}
        self.errors = {}
        self.started = {}
        self.after_step = None
        self.active = 0
        self.max_active = 0
        self.requested = []
        self._lock = threading.Lock()

    def block(self, episode) -> threading.Event:
        gate = threading.Event()
        self.gates[episode.audio_url] = gate
        self.started[episode.audio_url] = threading.Event()
        return gate

    def ensure_local(self, episode, on_progress=None):
        with self._lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
            self.requested.append(episode)
        try:
            started = self.started.get(episode.audio_url)
            if started is not None:
                started.set()
            for fraction in self.steps.get(episode.audio_url, []):
                if on_progress:
                    on_progress(fraction)
                if self.after_step:
                    self.after_step()
            gate = self.gates.get(episode.audio_url)
            if gate is not None:
                assert gate.wait(5), "test never released the download"
            error = self.errors.get(episode.audio_url)
            if error is not None:
                raise error
            return Path("/cache") / f"{episode.title}.mp3"
        finally:
            with self._lock:
                self.active -= 1


class FakeFeeds:
    """fetch_feed() stand-in keyed by URL."""

    def __init__(self, feeds=None):
        self.feeds = dict(feeds or {})
        self.calls = []

    def fetch_feed(self, url):
        self.calls.append(url)
        result = self.feeds.get(url)
        if result is None:
            raise LookupError(f"no such feed: {url}")
        if isinstance(result, Exception):
            raise result
        return result


def make_episode(
    title="Episode", feed_title="Feed", day=None, url=None, episode_id=None, live=False
):
    published = datetime(2024, 1, day, tzinfo=timezone.utc) if day else None
    audio_url = url or f"https://cdn.example.com/{title.replace(' ', '-').lower()}.mp3"
    return Episode(
        feed_title=feed_title,
        title=title,
        published=published,
        audio_url=audio_url,
        id=episode_id,
        live=live,
    )


@pytest.fixture
def paths(tmp_path: Path) -> AppPaths:
    return AppPaths.create(tmp_path / "podterm")


@pytest.fixture
def store(paths: AppPaths) -> DataStore:
    return DataStore(paths)


@pytest.fixture
def config(paths: AppPaths) -> ConfigManager:
    return ConfigManager(paths)


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()
