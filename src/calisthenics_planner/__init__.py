"""Periodized calisthenics program generator."""

__version__ = "0.4.0"
