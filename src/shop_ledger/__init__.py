"""Financial metrics engine for a small online shop dashboard."""

__version__ = "0.1.0"
