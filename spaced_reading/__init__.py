"""Spaced reading tracker: spaced repetition for whole books."""

__version__ = "0.1.0"
