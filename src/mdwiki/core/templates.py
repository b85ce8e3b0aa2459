"""Page template cache with mtime invalidation.

Templates live in a single directory as ``<name>.html``. A compiled template
is reused until the source file's mtime moves past the mtime recorded at
compile time. Staleness is only detected on the next lookup.
"""

import logging
import threading
from dataclasses import dataclass
from pathlib import Path

import jinja2

from mdwiki.core.errors import TemplateError, TemplateNotFoundError

logger = logging.getLogger(__name__)

TEMPLATE_SUFFIX = ".html"


@dataclass(frozen=True)
class CachedTemplate:
    """Compiled template and the source mtime it was compiled from."""

    name: str
    template: jinja2.Template
    mtime: float


class TemplateCache:
    """Thread-safe cache of compiled page templates.

    Lookups for different names proceed independently. Concurrent misses for
    the same name serialize on a per-name lock and re-check the entry, so a
    template is compiled once per change.
    """

    def __init__(self, template_dir: Path) -> None:
        """Initialize cache for a template directory.

        Args:
            template_dir: Directory containing ``<name>.html`` templates
        """
        self._template_dir = template_dir
        self._entries: dict[str, CachedTemplate] = {}
        self._lock = threading.Lock()
        self._fill_locks: dict[str, threading.Lock] = {}
        self._env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            autoescape=True,
        )

    @property
    def template_dir(self) -> Path:
        """Directory containing page templates."""
        return self._template_dir

    def source_path(self, name: str) -> Path:
        """Return the source file for a template name.

        Raises:
            TemplateNotFoundError: If the name points outside the template directory
        """
        path = self._template_dir / f"{name}{TEMPLATE_SUFFIX}"
        root = self._template_dir.resolve()
        if root not in path.resolve().parents:
            raise TemplateNotFoundError(name)
        return path

    def get(self, name: str) -> jinja2.Template:
        """Return the compiled template for ``name``.

        Args:
            name: Template name without suffix (e.g., "default")

        Returns:
            Compiled Jinja2 template

        Raises:
            TemplateNotFoundError: If the template file can't be stat'ed
            TemplateError: If the template fails to compile
        """
        path = self.source_path(name)
        mtime = self._stat_mtime(name, path)

        entry = self._lookup(name, mtime)
        if entry is not None:
            return entry.template

        with self._fill_lock(name):
            entry = self._lookup(name, mtime)
            if entry is not None:
                return entry.template

            entry = self._compile(name, path, mtime)
            with self._lock:
                self._entries[name] = entry
            return entry.template

    def invalidate(self, name: str) -> None:
        """Drop a cached template."""
        with self._lock:
            self._entries.pop(name, None)

    def clear(self) -> None:
        """Drop all cached templates."""
        with self._lock:
            self._entries.clear()

    def _lookup(self, name: str, mtime: float) -> CachedTemplate | None:
        with self._lock:
            entry = self._entries.get(name)
        if entry is None or entry.mtime < mtime:
            return None
        return entry

    def _fill_lock(self, name: str) -> threading.Lock:
        with self._lock:
            return self._fill_locks.setdefault(name, threading.Lock())

    def _stat_mtime(self, name: str, path: Path) -> float:
        try:
            return path.stat().st_mtime
        except OSError as e:
            raise TemplateNotFoundError(name) from e

    def _compile(self, name: str, path: Path, mtime: float) -> CachedTemplate:
        """Read and compile a template source file.

        Args:
            name: Template name
            path: Template source path
            mtime: Source mtime observed before reading

        Returns:
            CachedTemplate with the compiled template
        """
        try:
            source = path.read_text(encoding="utf-8")
        except OSError as e:
            raise TemplateNotFoundError(name) from e

        try:
            template = self._env.from_string(source)
        except jinja2.TemplateSyntaxError as e:
            raise TemplateError(f"Failed to compile template {name}: {e}") from e

        logger.debug(f"Compiled template {name} (mtime {mtime})")
        return CachedTemplate(name=name, template=template, mtime=mtime)
