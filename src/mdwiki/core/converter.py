"""Markdown to HTML conversion.

Thin wrapper around Python-Markdown producing page content and a table of
contents fragment.
"""

import re
from dataclasses import dataclass

import markdown
from markdown.extensions import Extension
from markdown.extensions.toc import TocExtension
from markdown.postprocessors import Postprocessor

MARKDOWN_EXTENSIONS = [
    "tables",
    "fenced_code",
    "sane_lists",
    "smarty",
]

SCRIPT_RE = re.compile(
    r"<script\b[^>]*>.*?</script\s*>|<script\b[^>]*/?>",
    re.IGNORECASE | re.DOTALL,
)


class SkipScriptPostprocessor(Postprocessor):
    """Remove ``<script>`` elements from the rendered output."""

    def run(self, text: str) -> str:
        return SCRIPT_RE.sub("", text)


class SkipScriptExtension(Extension):
    def extendMarkdown(self, md: markdown.Markdown) -> None:
        # Below raw_html (30) so stashed HTML blocks are already restored
        md.postprocessors.register(SkipScriptPostprocessor(md), "skip_script", 5)


@dataclass
class MarkdownResult:
    """Rendered Markdown content."""

    content: str
    toc: str


def render_markdown(body: bytes | str) -> MarkdownResult:
    """Render a Markdown body to HTML content and a ToC fragment.

    A new converter is created per call; ``markdown.Markdown`` instances keep
    per-document state and must not be shared between concurrent requests.
    Raw ``<script>`` elements are dropped from the content.

    Args:
        body: Markdown source, bytes are decoded as UTF-8

    Returns:
        MarkdownResult with content HTML and ToC HTML
    """
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")

    md = markdown.Markdown(
        extensions=[*MARKDOWN_EXTENSIONS, TocExtension(), SkipScriptExtension()],
        output_format="xhtml",
    )
    content = md.convert(body)
    toc = getattr(md, "toc", "")
    return MarkdownResult(content=content, toc=toc)
