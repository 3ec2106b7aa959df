"""
Playback Orchestrator

Owns "what is currently requested to play" and turns play requests into
"stop old -> make file local -> start new" sequences on a background thread.

Requests are numbered with a monotonically increasing token. Only the
worker holding the current token may touch the engine or publish progress;
anything else that completes late is a stale completion and is dropped.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from podterm.core.models import Episode

logger = logging.getLogger("PlaybackOrchestrator")


class PlaybackPhase(Enum):
    IDLE = "idle"
    DOWNLOADING = "downloading"
    PLAYING = "playing"
    PAUSED = "paused"


@dataclass(frozen=True)
class PlaybackStatus:
    phase: PlaybackPhase
    episode: Optional[Episode] = None
    percent: int = 0
    position: float = 0.0
    duration: float = 0.0
    error: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.phase != PlaybackPhase.IDLE


class PlaybackOrchestrator:
    """
    Serializes play requests against one engine and one fetcher.

    Args:
        engine: object with play_file/play_stream/toggle_pause/stop/seek_by,
            position and duration, and an on_end_callback attribute
        fetcher: object with ensure_local(episode, on_progress) -> path
    """

    def __init__(self, engine, fetcher):
        self._engine = engine
        self._fetcher = fetcher

        # Held for a whole stop -> fetch -> start sequence
        self._gate = threading.Lock()
        # Held for token checks paired with engine transitions
        self._state_lock = threading.RLock()

        self._token = 0
        self._playing_token = 0
        self._ended_token = 0
        self._phase = PlaybackPhase.IDLE
        self._episode: Optional[Episode] = None
        self._progress = 0.0
        self._task: Optional[threading.Thread] = None
        self.last_error: Optional[str] = None

        engine.on_end_callback = self._on_engine_end

    # ---------- requests ----------
    def request_play(self, episode: Episode) -> threading.Thread:
        """Download (if needed) and play the episode. Returns the worker thread."""
        return self._launch(episode, stream=False)

    def request_stream(self, episode: Episode) -> threading.Thread:
        """Play the episode straight from its enclosure URL."""
        return self._launch(episode, stream=True)

    def _launch(self, episode: Episode, stream: bool) -> threading.Thread:
        with self._state_lock:
            self._token += 1
            token = self._token
            self._episode = episode
            self._progress = 0.0
            self._phase = PlaybackPhase.DOWNLOADING
            self.last_error = None

        logger.info(f"Request #{token}: {'stream' if stream else 'play'} '{episode.title}'")
        task = threading.Thread(
            target=self._run_request,
            args=(token, episode, stream),
            name=f"playback-{token}",
            daemon=True,
        )
        self._task = task
        task.start()
        return task

    def _run_request(self, token: int, episode: Episode, stream: bool):
        with self._gate:
            with self._state_lock:
                if token != self._token:
                    logger.debug(f"Request #{token} superseded before it started")
                    return
                self._engine.stop()

            try:
                if stream:
                    source = episode.audio_url
                else:
                    source = self._fetcher.ensure_local(
                        episode,
                        on_progress=lambda fraction: self._report_progress(
                            token, fraction
                        ),
                    )
            except Exception as e:
                logger.warning(f"Request #{token} failed to fetch '{episode.title}': {e}")
                self._fail(token, e)
                return

            with self._state_lock:
                if token != self._token:
                    logger.info(f"Discarding stale completion of request #{token}")
                    return
                try:
                    if stream:
                        self._engine.play_stream(source, live=episode.live)
                    else:
                        self._engine.play_file(source)
                except Exception as e:
                    logger.exception(f"Engine failed to start '{episode.title}'")
                    self._fail(token, e)
                    return
                self._playing_token = token
                self._progress = 1.0
                self._phase = PlaybackPhase.PLAYING
                logger.info(f"Request #{token} playing '{episode.title}'")

    def _fail(self, token: int, error: Exception):
        with self._state_lock:
            if token != self._token:
                return
            self._reset()
            self.last_error = str(error)

    def _reset(self):
        self._episode = None
        self._progress = 0.0
        self._phase = PlaybackPhase.IDLE

    def _report_progress(self, token: int, fraction: float):
        with self._state_lock:
            if token != self._token or self._phase != PlaybackPhase.DOWNLOADING:
                return
            try:
                fraction = min(1.0, max(0.0, float(fraction)))
            except (TypeError, ValueError):
                return
            if fraction > self._progress:
                self._progress = fraction

    # ---------- transport ----------
    def toggle_pause(self):
        with self._state_lock:
            if self._phase == PlaybackPhase.PLAYING:
                self._engine.toggle_pause()
                self._phase = PlaybackPhase.PAUSED
            elif self._phase == PlaybackPhase.PAUSED:
                self._engine.toggle_pause()
                self._phase = PlaybackPhase.PLAYING

    def stop(self):
        """Go idle now; an in-flight download keeps running but its result is dropped."""
        with self._state_lock:
            self._token += 1
            self._engine.stop()
            self._reset()
        logger.info("Playback stopped")

    def seek_by(self, seconds: float):
        if self._phase in (PlaybackPhase.PLAYING, PlaybackPhase.PAUSED):
            self._engine.seek_by(seconds)

    def _on_engine_end(self):
        # Runs on the engine's event thread, which must not call back into
        # the engine; just record which request ran out.
        self._ended_token = self._playing_token

    # ---------- observation ----------
    @property
    def current_episode(self) -> Optional[Episode]:
        return self._episode

    def status(self) -> PlaybackStatus:
        """Snapshot for the render loop."""
        if self._ended_token and self._ended_token == self._token:
            with self._state_lock:
                if self._ended_token == self._token and self._phase in (
                    PlaybackPhase.PLAYING,
                    PlaybackPhase.PAUSED,
                ):
                    logger.info("Episode finished")
                    self._reset()

        phase = self._phase
        episode = self._episode
        if phase == PlaybackPhase.IDLE:
            return PlaybackStatus(phase=phase, error=self.last_error)

        position = duration = 0.0
        if phase in (PlaybackPhase.PLAYING, PlaybackPhase.PAUSED):
            position = self._engine.position
            duration = self._engine.duration
        return PlaybackStatus(
            phase=phase,
            episode=episode,
            percent=int(self._progress * 100),
            position=position,
            duration=duration,
        )

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Join the most recent worker. Returns True if it finished."""
        task = self._task
        if task is None:
            return True
        task.join(timeout)
        return not task.is_alive()

    def shutdown(self):
        self.stop()
        cleanup = getattr(self._engine, "cleanup", None)
        if cleanup:
            cleanup()
