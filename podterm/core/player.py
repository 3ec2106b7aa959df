"""
Episode Player Engine using VLC (python-vlc binding).
"""

import logging
from enum import Enum

import vlc

logger = logging.getLogger("EpisodePlayer")


class PlayerState(Enum):
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"


class EpisodePlayer:
    """Single-track audio engine. Times are in seconds."""

    def __init__(self):
        logger.info("Initializing EpisodePlayer with VLC backend")
        self.state = PlayerState.STOPPED
        self.on_end_callback = None
        self._is_live_stream = False

        self._instance = vlc.Instance("--no-video", "--quiet", "--intf", "dummy")
        if self._instance is None:
            raise RuntimeError("libVLC could not be initialized")
        self._player = self._instance.media_player_new()

        # Register end-of-media event
        self._event_mgr = self._player.event_manager()
        self._event_mgr.event_attach(vlc.EventType.MediaPlayerEndReached, self._on_end)

    def get_backend_version(self) -> str:
        """Return libVLC version string if available."""
        try:
            version = vlc.libvlc_get_version() or b""
        except Exception:
            return ""
        if isinstance(version, bytes):
            return version.decode("utf-8", "replace")
        return version

    def _on_end(self, event):
        logger.info("End of media reached")
        self.state = PlayerState.STOPPED
        if self.on_end_callback:
            self.on_end_callback()

    def _play(self, source: str):
        media = self._instance.media_new(source)
        self._player.set_media(media)
        if self._player.play() == -1:
            self.state = PlayerState.STOPPED
            raise RuntimeError(f"VLC could not start playback of {source}")
        self.state = PlayerState.PLAYING

    def play_file(self, path):
        """Play a local audio file."""
        self.stop()
        self._is_live_stream = False
        logger.info(f"Playing file: {path}")
        self._play(str(path))

    def play_stream(self, url: str, live: bool = False):
        """Play a remote URL without downloading. Live streams cannot seek."""
        self.stop()
        self._is_live_stream = live
        logger.info(f"Streaming: {url[:80]}")
        self._play(url)

    def pause(self):
        if self.state == PlayerState.PLAYING:
            self._player.set_pause(True)
            self.state = PlayerState.PAUSED

    def resume(self):
        if self.state == PlayerState.PAUSED:
            self._player.set_pause(False)
            self.state = PlayerState.PLAYING

    def toggle_pause(self):
        if self.state == PlayerState.PLAYING:
            self.pause()
        elif self.state == PlayerState.PAUSED:
            self.resume()

    def stop(self):
        try:
            self._player.stop()
        except Exception as e:
            logger.debug(f"Stop failed: {e}")
        self.state = PlayerState.STOPPED

    def seek_by(self, seconds: float):
        """Relative seek clamped to [0, duration]; no-op for streams."""
        if self.state == PlayerState.STOPPED or self._is_live_stream:
            return
        duration = self.duration
        target = self.position + seconds
        if target < 0:
            target = 0.0
        if duration > 0 and target > duration:
            target = duration
        try:
            self._player.set_time(int(target * 1000))
        except Exception as e:
            logger.debug(f"Seek failed: {e}")

    @property
    def is_playing(self) -> bool:
        return self.state == PlayerState.PLAYING

    @property
    def position(self) -> float:
        if self.state == PlayerState.STOPPED:
            return 0.0
        return max(0, self._player.get_time() or 0) / 1000.0

    @property
    def duration(self) -> float:
        if self.state == PlayerState.STOPPED or self._is_live_stream:
            return 0.0
        return max(0, self._player.get_length() or 0) / 1000.0

    def cleanup(self):
        try:
            self.stop()
        except Exception:
            pass
        try:
            self._player.release()
        except Exception:
            pass
        try:
            self._instance.release()
        except Exception:
            pass
