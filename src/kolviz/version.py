"""Version information for KolViz."""

__version__ = "0.3.0"
