"""Fuzzy matching, scoring, ANSI color extraction, chunked item storage and query history."""

__version__ = "0.35.0"