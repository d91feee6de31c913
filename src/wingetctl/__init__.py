"""Structured client for the Windows Package Manager (winget) command line."""

__version__ = "0.1.0"
