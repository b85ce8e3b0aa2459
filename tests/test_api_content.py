"""Tests for the content endpoint."""

import os
from pathlib import Path

import pytest
from aiohttp.test_utils import TestClient

from mdwiki.config import Config
from mdwiki.server import create_app


@pytest.fixture
def client(test_config: Config, aiohttp_client) -> TestClient:
    """Create test client with configured app."""
    app = create_app(test_config)
    return aiohttp_client(app)


def _snapshot_tree(root: Path) -> list[str]:
    return sorted(str(p.relative_to(root)) for p in root.rglob("*"))


class TestMarkdownMode:
    """Tests for rendered Markdown documents."""

    @pytest.mark.asyncio
    async def test__markdown_only__renders_page(self, doc_root: Path, client) -> None:
        """Render notes/hello.md for /notes/hello."""
        (doc_root / "notes").mkdir()
        (doc_root / "notes" / "hello.md").write_text("Title: Hi\n---\n# Hello")

        test_client = await client
        response = await test_client.get("/notes/hello")

        assert response.status == 200
        assert response.headers["Content-Type"] == "text/html; charset=utf-8"
        html = await response.text()
        assert "<title>Hi | Test Wiki</title>" in html
        assert '<h1 id="hello">Hello</h1>' in html
        assert 'href="/notes/hello.md"' in html

    @pytest.mark.asyncio
    async def test__missing_template__returns_500(
        self, doc_root: Path, client
    ) -> None:
        """Return 500 when the named template does not exist."""
        (doc_root / "page.md").write_text("Template: missing\n---\nx")

        test_client = await client
        response = await test_client.get("/page")

        assert response.status == 500

    @pytest.mark.asyncio
    async def test__template_edit__visible_on_next_request(
        self, site_dir: Path, doc_root: Path, client
    ) -> None:
        """Pick up template changes without a restart."""
        (doc_root / "page.md").write_text("Title: T\n---\nx")
        template = site_dir / "_template" / "default.html"

        test_client = await client
        first = await (await test_client.get("/page")).text()

        template.write_text("NEW {{ title }}")
        mtime = template.stat().st_mtime + 10
        os.utime(template, (mtime, mtime))
        second = await (await test_client.get("/page")).text()

        assert "<title>" in first
        assert second == "NEW T"

    @pytest.mark.asyncio
    async def test__rendered_page__last_modified_from_document(
        self, doc_root: Path, client
    ) -> None:
        """Send the document mtime as Last-Modified."""
        page = doc_root / "page.md"
        page.write_text("Title: T\n---\nx")
        os.utime(page, (1_700_000_000, 1_700_000_000))

        test_client = await client
        response = await test_client.get("/page")

        assert response.status == 200
        assert response.headers["Last-Modified"] == "Tue, 14 Nov 2023 22:13:20 GMT"

    @pytest.mark.asyncio
    async def test__deeply_nested_header__renders_with_defaults(
        self, doc_root: Path, client
    ) -> None:
        """Render the body when the header nests too deep to parse."""
        (doc_root / "page.md").write_bytes(
            b"Title: " + b"[" * 5000 + b"]" * 5000 + b"\n---\n# Body"
        )

        test_client = await client
        response = await test_client.get("/page")

        assert response.status == 200
        html = await response.text()
        assert '<h1 id="body">Body</h1>' in html

    @pytest.mark.asyncio
    async def test__script_in_document__not_in_page(
        self, doc_root: Path, client
    ) -> None:
        """Drop script elements written in the document body."""
        (doc_root / "page.md").write_text(
            "Title: T\n---\n<script>alert(1)</script>\n\nText"
        )

        test_client = await client
        html = await (await test_client.get("/page")).text()

        assert "alert(1)" not in html
        assert "<p>Text</p>" in html


class TestRawMode:
    """Tests for static file passthrough."""

    @pytest.mark.asyncio
    async def test__raw_file__served(self, doc_root: Path, client) -> None:
        """Serve an existing file byte for byte."""
        (doc_root / "data.txt").write_bytes(b"plain bytes")

        test_client = await client
        response = await test_client.get("/data.txt")

        assert response.status == 200
        assert await response.read() == b"plain bytes"

    @pytest.mark.asyncio
    async def test__raw_beats_markdown(self, doc_root: Path, client) -> None:
        """Serve the raw file when both raw and Markdown exist."""
        (doc_root / "about").write_text("raw about")
        (doc_root / "about.md").write_text("Title: About\n---\n# About")

        test_client = await client
        response = await test_client.get("/about")

        assert response.status == 200
        assert await response.text() == "raw about"

    @pytest.mark.asyncio
    async def test__markdown_source__served_raw(self, doc_root: Path, client) -> None:
        """Serve the .md source for the source link."""
        (doc_root / "hello.md").write_text("Title: Hi\n---\n# Hello")

        test_client = await client
        response = await test_client.get("/hello.md")

        assert response.status == 200
        assert await response.text() == "Title: Hi\n---\n# Hello"

    @pytest.mark.asyncio
    async def test__conditional_request__returns_304(
        self, doc_root: Path, client
    ) -> None:
        """Honor If-Modified-Since for raw files."""
        path = doc_root / "data.txt"
        path.write_text("x")
        os.utime(path, (1_700_000_000, 1_700_000_000))

        test_client = await client
        first = await test_client.get("/data.txt")
        last_modified = first.headers["Last-Modified"]
        second = await test_client.get(
            "/data.txt", headers={"If-Modified-Since": last_modified}
        )

        assert second.status == 304


class TestDirectoryMode:
    """Tests for directory requests."""

    @pytest.mark.asyncio
    async def test__directory__empty_success(self, doc_root: Path, client) -> None:
        """Return an empty 200 for directories."""
        (doc_root / "notes").mkdir()

        test_client = await client
        response = await test_client.get("/notes")

        assert response.status == 200
        assert await response.text() == ""

    @pytest.mark.asyncio
    async def test__root__empty_success(self, client) -> None:
        """Treat the root as a directory."""
        test_client = await client
        response = await test_client.get("/")

        assert response.status == 200
        assert await response.text() == ""


class TestNotFound:
    """Tests for unresolvable paths."""

    @pytest.mark.asyncio
    async def test__missing__returns_404_without_mutation(
        self, site_dir: Path, client
    ) -> None:
        """Return 404 and leave the filesystem alone."""
        before = _snapshot_tree(site_dir)

        test_client = await client
        response = await test_client.get("/nothing/here")

        assert response.status == 404
        assert await response.text() == "Not found"
        assert _snapshot_tree(site_dir) == before

    @pytest.mark.asyncio
    async def test__traversal__returns_404(self, site_dir: Path, client) -> None:
        """Never serve files outside the document root."""
        test_client = await client
        response = await test_client.get("/../config.yaml")

        assert response.status == 404


class TestEditMode:
    """Tests for the editor shell."""

    @pytest.mark.asyncio
    async def test__edit_query__serves_editor(self, client) -> None:
        """Serve the editor shell regardless of document existence."""
        test_client = await client
        response = await test_client.get("/does/not/exist?edit=1")

        assert response.status == 200
        assert "<textarea" in await response.text()

    @pytest.mark.asyncio
    async def test__editor_missing__returns_404(self, site_dir: Path, client) -> None:
        """Return 404 when the editor shell is absent."""
        (site_dir / "_template" / "_edit.html").unlink()

        test_client = await client
        response = await test_client.get("/page?edit=1")

        assert response.status == 404


class TestSaveMode:
    """Tests for posting document content."""

    @pytest.mark.asyncio
    async def test__post__creates_directory_and_file(
        self, doc_root: Path, client
    ) -> None:
        """Write the posted content to <path>.md and answer 1."""
        test_client = await client
        response = await test_client.post(
            "/notes/hello?post=1", data={"content": "# Updated"}
        )

        assert response.status == 200
        assert await response.text() == "1"
        assert (doc_root / "notes").is_dir()
        assert (doc_root / "notes" / "hello.md").read_bytes() == b"# Updated"

    @pytest.mark.asyncio
    async def test__post__saved_page_renders(self, doc_root: Path, client) -> None:
        """Render the saved document on the next GET."""
        test_client = await client
        await test_client.post(
            "/fresh?post=1", data={"content": "Title: Fresh\n---\n# New"}
        )
        response = await test_client.get("/fresh")

        assert response.status == 200
        assert "<title>Fresh | Test Wiki</title>" in await response.text()

    @pytest.mark.asyncio
    async def test__post_without_content__writes_empty_file(
        self, doc_root: Path, client
    ) -> None:
        """Treat a missing content field as empty content."""
        test_client = await client
        response = await test_client.post("/empty?post=1", data={"other": "x"})

        assert response.status == 200
        assert (doc_root / "empty.md").read_bytes() == b""

    @pytest.mark.asyncio
    async def test__write_failure__returns_500(self, doc_root: Path, client) -> None:
        """Return 500 when the parent path is a file."""
        (doc_root / "notes").write_text("not a directory")

        test_client = await client
        response = await test_client.post(
            "/notes/hello?post=1", data={"content": "x"}
        )

        assert response.status == 500
        assert await response.text() == "Internal error"

    @pytest.mark.asyncio
    async def test__save_root__returns_500(self, doc_root: Path, client) -> None:
        """Refuse to save a document for the root path."""
        test_client = await client
        response = await test_client.post("/?post=1", data={"content": "x"})

        assert response.status == 500
        assert list(doc_root.iterdir()) == []

    @pytest.mark.asyncio
    async def test__get_with_post_query__not_saved(
        self, doc_root: Path, client
    ) -> None:
        """Ignore post=1 on GET."""
        test_client = await client
        response = await test_client.get("/notes/hello?post=1")

        assert response.status == 404
        assert not (doc_root / "notes").exists()


class TestStaticRoute:
    """Tests for /_static/."""

    @pytest.mark.asyncio
    async def test__static_file__served(self, site_dir: Path, client) -> None:
        """Serve files from the static directory with the prefix stripped."""
        (site_dir / "_static" / "style.css").write_text("body {}")

        test_client = await client
        response = await test_client.get("/_static/style.css")

        assert response.status == 200
        assert await response.text() == "body {}"

    @pytest.mark.asyncio
    async def test__missing_static_file__returns_404(self, client) -> None:
        """Return 404 for unknown static assets."""
        test_client = await client
        response = await test_client.get("/_static/nope.css")

        assert response.status == 404
