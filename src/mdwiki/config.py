"""Server settings for mdwiki.

Supports TOML configuration format with auto-discovery. These settings decide
where the server listens and which directories it serves; the hot-reloaded
YAML site configuration handed to templates lives in ``core.site_config``.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from mdwiki.core.site_config import DEFAULT_POLL_INTERVAL

CONFIG_FILENAME = "mdwiki.toml"


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8010


@dataclass
class SiteConfig:
    """Site layout configuration."""

    doc_root: Path = field(default_factory=lambda: Path("_doc"))
    template_dir: Path = field(default_factory=lambda: Path("_template"))
    static_dir: Path = field(default_factory=lambda: Path("_static"))
    config_file: Path = field(default_factory=lambda: Path("config.yaml"))
    poll_interval: float = DEFAULT_POLL_INTERVAL


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    site: SiteConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for mdwiki.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> "Config":
        return cls(server=ServerConfig(), site=SiteConfig())

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        try:
            with path.open("rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {path}: {e}") from e

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            site=cls._parse_site(data.get("site"), config_dir),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8010)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_site(cls, data: object, config_dir: Path) -> SiteConfig:
        """Parse site configuration section.

        Args:
            data: Raw site section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            SiteConfig instance
        """
        if data is None:
            data = {}

        if not isinstance(data, dict):
            raise ValueError("site section must be a dictionary")

        paths: dict[str, Path] = {}
        for key, default in (
            ("doc_root", "_doc"),
            ("template_dir", "_template"),
            ("static_dir", "_static"),
            ("config_file", "config.yaml"),
        ):
            value = data.get(key, default)
            if not isinstance(value, str):
                raise ValueError(f"site.{key} must be a string")
            paths[key] = config_dir / value

        poll_interval = data.get("poll_interval", DEFAULT_POLL_INTERVAL)
        if isinstance(poll_interval, bool) or not isinstance(poll_interval, int | float):
            raise ValueError("site.poll_interval must be a number")
        if poll_interval <= 0:
            raise ValueError("site.poll_interval must be positive")

        return SiteConfig(poll_interval=float(poll_interval), **paths)

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        doc_root: Path | None = None,
        template_dir: Path | None = None,
        static_dir: Path | None = None,
        config_file: Path | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original Config
        is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            doc_root: Override site.doc_root
            template_dir: Override site.template_dir
            static_dir: Override site.static_dir
            config_file: Override site.config_file

        Returns:
            New Config instance with overrides applied
        """
        server = replace(
            self.server,
            host=host if host is not None else self.server.host,
            port=port if port is not None else self.server.port,
        )

        site = replace(
            self.site,
            doc_root=doc_root if doc_root is not None else self.site.doc_root,
            template_dir=template_dir if template_dir is not None else self.site.template_dir,
            static_dir=static_dir if static_dir is not None else self.site.static_dir,
            config_file=config_file if config_file is not None else self.site.config_file,
        )

        return replace(self, server=server, site=site)
