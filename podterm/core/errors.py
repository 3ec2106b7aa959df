class PodtermError(Exception):
    """Base class for errors podterm reports to the user."""


class FeedError(PodtermError):
    """A feed could not be fetched or parsed."""


class DownloadError(PodtermError):
    """An episode could not be made available locally."""
