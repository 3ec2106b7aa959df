"""podterm - terminal podcast player."""

__version__ = "0.3.0"
