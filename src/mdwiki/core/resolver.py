"""Request classification.

Maps a URL path, its query parameters and the request method to one of the
handling modes. Query intent is checked before the filesystem is touched.
"""

import os
import posixpath
import stat
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from mdwiki.core.types import URLPath

MARKDOWN_SUFFIX = ".md"
SAVE_METHODS = frozenset({"POST"})


class RouteMode(Enum):
    """How a request is handled."""

    EDIT = "edit"
    SAVE = "save"
    DIRECTORY = "directory"
    RAW = "raw"
    MARKDOWN = "markdown"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a request."""

    mode: RouteMode
    path: Path
    mtime: float | None = None


def normalize_url_path(url_path: str) -> URLPath:
    """Collapse ``.`` and ``..`` segments so the path stays under ``/``.

    Args:
        url_path: Decoded request path (e.g., "/notes/../hello")

    Returns:
        Normalized path without leading slash (e.g., "hello"), "" for the root
    """
    normalized = posixpath.normpath("/" + url_path.lstrip("/"))
    return URLPath(normalized.lstrip("/"))


class ContentResolver:
    """Classifies requests against a document root."""

    def __init__(self, doc_root: Path) -> None:
        """Initialize resolver.

        Args:
            doc_root: Directory documents and raw files are served from
        """
        self._doc_root = doc_root

    @property
    def doc_root(self) -> Path:
        """Directory documents are served from."""
        return self._doc_root

    def raw_path(self, url_path: str) -> Path:
        """Filesystem path a URL maps to as-is."""
        relative = normalize_url_path(url_path)
        return self._doc_root / relative if relative else self._doc_root

    def markdown_path(self, url_path: str) -> Path:
        """Filesystem path of the Markdown document for a URL."""
        relative = normalize_url_path(url_path)
        return self._doc_root / f"{relative}{MARKDOWN_SUFFIX}"

    def resolve(
        self,
        url_path: str,
        query: Mapping[str, str],
        method: str = "GET",
    ) -> Resolution:
        """Classify a request.

        Args:
            url_path: Decoded request path
            query: Query parameters
            method: HTTP method

        Returns:
            Resolution naming the handling mode and the target path
        """
        if query.get("edit") == "1":
            return Resolution(RouteMode.EDIT, self.raw_path(url_path))

        if query.get("post") == "1" and method.upper() in SAVE_METHODS:
            # The root has no document name; saving to it is refused downstream
            if not normalize_url_path(url_path):
                return Resolution(RouteMode.SAVE, self._doc_root)
            return Resolution(RouteMode.SAVE, self.markdown_path(url_path))

        raw_path = self.raw_path(url_path)
        raw_stat = _lstat(raw_path)
        if raw_stat is not None:
            if stat.S_ISDIR(raw_stat.st_mode):
                return Resolution(RouteMode.DIRECTORY, raw_path)
            return Resolution(RouteMode.RAW, raw_path)

        if normalize_url_path(url_path):
            md_path = self.markdown_path(url_path)
            md_stat = _lstat(md_path)
            if md_stat is not None and not stat.S_ISDIR(md_stat.st_mode):
                return Resolution(RouteMode.MARKDOWN, md_path, md_stat.st_mtime)

        return Resolution(RouteMode.NOT_FOUND, raw_path)


def _lstat(path: Path) -> os.stat_result | None:
    """Stat without following symlinks, None on any failure."""
    try:
        return path.lstat()
    except (OSError, ValueError):
        return None
