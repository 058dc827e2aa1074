"""Scholaro: study-prep accounts, practice tests and a university directory."""

__version__ = "1.0.0"
