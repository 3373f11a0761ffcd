"""Terminal viewer for very large text files, with JSON and XML pretty-printing."""

__version__ = "0.1.0"