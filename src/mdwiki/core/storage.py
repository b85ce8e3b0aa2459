"""Persisting edited documents."""

import logging
import os
import tempfile
from pathlib import Path

from mdwiki.core.errors import PersistenceError

logger = logging.getLogger(__name__)


def save_document(doc_root: Path, path: Path, content: str) -> None:
    """Write posted content verbatim to a Markdown file.

    Parent directories are created as needed. The file is written to a
    temporary sibling and moved into place, so readers see either the old or
    the new content. Concurrent saves to the same path: last writer wins.

    Args:
        doc_root: Document root the target must live under
        path: Target Markdown file
        content: Document text

    Raises:
        PersistenceError: If the target is outside doc_root or writing fails
    """
    if doc_root.resolve() not in path.resolve().parents:
        raise PersistenceError(f"Refusing to save outside document root: {path}")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PersistenceError(f"Cannot create directory {path.parent}: {e}") from e

    tmp_name: str | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "wb",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_name = f.name
            f.write(content.encode("utf-8"))
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise PersistenceError(f"Cannot write {path}: {e}") from e

    logger.info(f"Saved {path} ({len(content)} chars)")
