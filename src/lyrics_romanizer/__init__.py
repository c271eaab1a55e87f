"""Lyrics Romanizer - romanize song lyrics and text in non-Latin scripts."""

__version__ = "2.0.0"
