"""Frontmatter splitting for Markdown documents.

A document is a YAML metadata block followed by a line starting with ``---``
and the Markdown body:

    Title: Hello
    Template: wide
    ---
    # Hello
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

FRONTMATTER_MARKER = b"\n---"
DEFAULT_TEMPLATE = "default"


@dataclass
class FrontmatterSplit:
    """Result of splitting a document at its frontmatter marker."""

    header: bytes
    body: bytes
    metadata: dict[str, Any]
    has_marker: bool


@dataclass
class Document:
    """A Markdown document read from disk."""

    path: Path
    raw: bytes
    metadata: dict[str, Any] = field(default_factory=dict)
    body: bytes = b""
    mtime: float = 0.0

    @property
    def title(self) -> str:
        """Title from metadata, empty when absent or not a string."""
        title = self.metadata.get("Title")
        return title if isinstance(title, str) else ""

    @property
    def template_name(self) -> str:
        """Template name from metadata, ``default`` when absent or not a string."""
        name = self.metadata.get("Template")
        return name if isinstance(name, str) else DEFAULT_TEMPLATE


def split_frontmatter(content: bytes) -> FrontmatterSplit:
    """Split document bytes into metadata and body.

    Everything before the first ``\\n---`` is metadata, everything after the
    marker is body. Without a marker the whole document is body and the
    metadata is empty.

    Args:
        content: Full document bytes

    Returns:
        FrontmatterSplit with header, body and parsed metadata
    """
    index = content.find(FRONTMATTER_MARKER)
    if index < 0:
        return FrontmatterSplit(header=b"", body=content, metadata={}, has_marker=False)

    header = content[:index]
    body = content[index + len(FRONTMATTER_MARKER):]
    return FrontmatterSplit(
        header=header,
        body=body,
        metadata=parse_metadata(header),
        has_marker=True,
    )


def parse_metadata(header: bytes) -> dict[str, Any]:
    """Parse a metadata block, returning an empty mapping when it is unusable."""
    try:
        data = yaml.safe_load(header)
    except (yaml.YAMLError, RecursionError) as e:
        logger.debug(f"Ignoring malformed frontmatter: {e}")
        return {}

    if not isinstance(data, dict):
        return {}
    return data


def load_document(path: Path) -> Document:
    """Read and split a document from disk.

    Args:
        path: Path to the Markdown file

    Returns:
        Document with metadata and body

    Raises:
        OSError: If the file cannot be read
    """
    raw = path.read_bytes()
    mtime = path.stat().st_mtime
    split = split_frontmatter(raw)
    return Document(
        path=path,
        raw=raw,
        metadata=split.metadata,
        body=split.body,
        mtime=mtime,
    )
