"""A small interactive shell with pipelines, persistent history and robust descriptor I/O helpers."""

__version__ = "0.1.0"
__all__ = ["history", "parsing", "rio", "shell"]