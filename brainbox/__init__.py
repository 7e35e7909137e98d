"""Personal content-catalog client with hybrid semantic search."""

__version__ = "0.1.0"
