"""Shared test fixtures."""

from pathlib import Path

import pytest

from mdwiki.config import Config, ServerConfig, SiteConfig

DEFAULT_TEMPLATE = (
    "<title>{{ title }} | {{ config.SiteName }}</title>"
    "<nav>{{ toc }}</nav>"
    "<main>{{ content }}</main>"
    '<a href="{{ source_link }}">source</a>'
    '<a href="{{ edit_link }}">edit</a>'
)

EDITOR_SHELL = "<html><body><textarea name=\"content\"></textarea></body></html>"


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """Create a site with a document root, templates and site config."""
    (tmp_path / "_doc").mkdir()
    (tmp_path / "_static").mkdir()
    template_dir = tmp_path / "_template"
    template_dir.mkdir()
    (template_dir / "default.html").write_text(DEFAULT_TEMPLATE)
    (template_dir / "_edit.html").write_text(EDITOR_SHELL)
    (tmp_path / "config.yaml").write_text("SiteName: Test Wiki\n")
    return tmp_path


@pytest.fixture
def doc_root(site_dir: Path) -> Path:
    return site_dir / "_doc"


@pytest.fixture
def test_config(site_dir: Path) -> Config:
    """Create a test configuration pointing at site_dir."""
    return Config(
        server=ServerConfig(),
        site=SiteConfig(
            doc_root=site_dir / "_doc",
            template_dir=site_dir / "_template",
            static_dir=site_dir / "_static",
            config_file=site_dir / "config.yaml",
        ),
    )
