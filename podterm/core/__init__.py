"""Core services: models, persistence, feeds, downloads and playback."""
