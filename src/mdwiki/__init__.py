"""mdwiki - a file-backed Markdown content server with in-browser editing."""

__version__ = "0.1.0"
