"""Bookmarker: build and embed PDF outlines."""

__version__ = "1.0.0"
