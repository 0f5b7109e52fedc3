"""Combine the main packages of a Go module into one multi-call program."""

__version__ = "1.0.0"
