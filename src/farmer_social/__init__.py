"""Farmer Social API: moderated posts, comments, likes and notifications."""

__version__ = "1.0.0"
