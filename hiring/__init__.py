"""Recruitment back end: job board, applications and candidate scoring."""

__version__ = "0.3.0"
