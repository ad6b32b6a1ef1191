"""Client for a remote image compression and conversion service."""

__version__ = "0.1.0"
