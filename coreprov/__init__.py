"""coreprov — keep a single core binary installed and current."""

__version__ = "0.1.0"
