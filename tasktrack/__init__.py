"""tasktrack: personal task tracker core and API."""

__version__ = "0.1.0"
