"""Tests for the now-playing footer text."""

from conftest import make_episode
from podterm.core.orchestrator import PlaybackPhase, PlaybackStatus
from podterm.ui.status import format_status, format_time

EPISODE = make_episode("Deep Dive")


def test_format_time() -> None:
    assert format_time(0) == "00:00"
    assert format_time(75.9) == "01:15"
    assert format_time(3725) == "01:02:05"
    assert format_time(-3) == "00:00"


def test_idle() -> None:
    assert format_status(PlaybackStatus(PlaybackPhase.IDLE)) == "■ Stopped"


def test_idle_with_error() -> None:
    text = format_status(PlaybackStatus(PlaybackPhase.IDLE, error="HTTP 404"))
    assert text == "■ Stopped  Last error: HTTP 404"


def test_downloading() -> None:
    status = PlaybackStatus(PlaybackPhase.DOWNLOADING, episode=EPISODE, percent=42)
    assert format_status(status) == "⬇ Downloading  42%  Deep Dive"


def test_playing_with_duration() -> None:
    status = PlaybackStatus(
        PlaybackPhase.PLAYING, episode=EPISODE, percent=100, position=65, duration=600
    )
    assert format_status(status) == "▶ Playing  01:05 / 10:00  Deep Dive"


def test_paused_stream_has_no_duration() -> None:
    status = PlaybackStatus(PlaybackPhase.PAUSED, episode=EPISODE, position=5)
    assert format_status(status) == "⏸ Paused  00:05  Deep Dive"


def test_long_titles_are_clipped() -> None:
    status = PlaybackStatus(
        PlaybackPhase.DOWNLOADING, episode=make_episode("x" * 200), percent=1
    )
    text = format_status(status)
    assert text.endswith("…")
    assert len(text) < 100
