"""Hot-reloaded site configuration.

The site configuration is a YAML mapping handed to every page template as
``config``. It is loaded once at startup and then polled for mtime changes by
a background task. A broken file never replaces the last good snapshot.
"""

import asyncio
import logging
import threading
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from mdwiki.core.errors import ConfigLoadError

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 5.0


def read_site_config(path: Path) -> dict[str, Any]:
    """Read and parse a site configuration file.

    Args:
        path: Path to the YAML file

    Returns:
        Parsed mapping (empty for an empty file)

    Raises:
        ConfigLoadError: If the file can't be read or isn't a YAML mapping
    """
    try:
        content = path.read_bytes()
    except OSError as e:
        raise ConfigLoadError(f"Cannot read site config {path}: {e}") from e

    try:
        data = yaml.safe_load(content)
    except (yaml.YAMLError, RecursionError) as e:
        raise ConfigLoadError(f"Cannot parse site config {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(f"Site config {path} must be a mapping")
    return data


class SiteConfigStore:
    """Process-wide site configuration snapshot.

    The snapshot is an immutable mapping swapped as a whole, so readers always
    see a complete old or new configuration without taking a lock.
    """

    def __init__(self, path: Path, data: Mapping[str, Any], mtime: float) -> None:
        self._path = path
        self._snapshot: Mapping[str, Any] = MappingProxyType(dict(data))
        self._mtime = mtime
        self._lock = threading.Lock()

    @classmethod
    def load(cls, path: Path) -> "SiteConfigStore":
        """Load the initial configuration.

        Args:
            path: Path to the YAML site configuration

        Returns:
            SiteConfigStore holding the parsed configuration

        Raises:
            ConfigLoadError: If the file can't be read or parsed
        """
        try:
            mtime = path.stat().st_mtime
        except OSError as e:
            raise ConfigLoadError(f"Cannot read site config {path}: {e}") from e

        data = read_site_config(path)
        logger.info(f"Loaded site config from {path}")
        return cls(path, data, mtime)

    @property
    def path(self) -> Path:
        """Site configuration file."""
        return self._path

    @property
    def snapshot(self) -> Mapping[str, Any]:
        """Current configuration mapping."""
        return self._snapshot

    @property
    def mtime(self) -> float:
        """Mtime of the file the current snapshot was read from."""
        return self._mtime

    def replace(self, data: Mapping[str, Any], mtime: float) -> None:
        """Publish a new snapshot together with its source mtime."""
        snapshot = MappingProxyType(dict(data))
        with self._lock:
            self._snapshot = snapshot
            self._mtime = mtime

    def refresh(self) -> bool:
        """Reload the configuration if the file changed.

        Only a strictly newer mtime triggers a reload. On parse failure the
        previous snapshot and mtime are kept, so the same file is retried on
        the next call.

        Returns:
            True if a new snapshot was published
        """
        try:
            mtime = self._path.stat().st_mtime
        except OSError:
            return False

        with self._lock:
            if mtime <= self._mtime:
                return False

        try:
            data = read_site_config(self._path)
        except ConfigLoadError as e:
            logger.warning(f"Keeping previous site config: {e}")
            return False

        self.replace(data, mtime)
        logger.info(f"Site config updated from {self._path}")
        return True


class SiteConfigPoller:
    """Background task that refreshes a SiteConfigStore at a fixed interval."""

    def __init__(
        self,
        store: SiteConfigStore,
        interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        """Initialize the poller.

        Args:
            store: Store to refresh
            interval: Seconds between mtime checks
        """
        self._store = store
        self._interval = interval
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        """Whether the polling task is active."""
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start polling."""
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._poll())

    async def stop(self) -> None:
        """Cancel polling and wait for the task to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _poll(self) -> None:
        while True:
            try:
                await asyncio.to_thread(self._store.refresh)
            except Exception:
                logger.exception(f"Site config refresh failed for {self._store.path}")
            await asyncio.sleep(self._interval)
