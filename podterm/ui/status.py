"""Now-playing strip shown at the bottom of every screen."""

from podterm.config.i18n import t
from podterm.core.orchestrator import PlaybackPhase, PlaybackStatus

TITLE_WIDTH = 60


def format_time(seconds: float) -> str:
    if seconds < 0:
        seconds = 0
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    else:
        return f"{minutes:02d}:{secs:02d}"


def _clip(text: str, width: int = TITLE_WIDTH) -> str:
    return text if len(text) <= width else text[: width - 1] + "…"


def format_status(status: PlaybackStatus) -> str:
    if status.phase == PlaybackPhase.IDLE:
        line = f"■ {t('player.stopped')}"
        if status.error:
            line += f"  {t('player.failed')} {_clip(status.error)}"
        return line

    title = _clip(status.episode.title) if status.episode else ""
    if status.phase == PlaybackPhase.DOWNLOADING:
        return f"⬇ {t('player.downloading')} {status.percent:3d}%  {title}"

    icon, label = ("▶", t("player.playing"))
    if status.phase == PlaybackPhase.PAUSED:
        icon, label = ("⏸", t("player.paused"))
    clock = format_time(status.position)
    if status.duration > 0:
        clock += f" / {format_time(status.duration)}"
    return f"{icon} {label}  {clock}  {title}"
