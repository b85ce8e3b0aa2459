"""Bundled starter site.

Locates the skeleton site shipped inside the mdwiki package and copies it
into a new site directory.
"""

import shutil
from importlib.resources import files
from pathlib import Path


def get_skeleton_dir() -> Path:
    """Return path to the bundled skeleton site.

    Returns:
        Path to the skeleton directory

    Raises:
        FileNotFoundError: If the skeleton is not bundled.
    """
    skeleton = files("mdwiki").joinpath("skeleton")
    if not skeleton.is_dir():
        msg = "Bundled skeleton site not found. Reinstall mdwiki."
        raise FileNotFoundError(msg)
    return Path(str(skeleton))


def copy_skeleton(target_dir: Path) -> list[Path]:
    """Copy the skeleton site into ``target_dir`` without overwriting.

    Args:
        target_dir: Directory to initialize (created if missing)

    Returns:
        Files created, relative to target_dir
    """
    skeleton = get_skeleton_dir()
    created: list[Path] = []
    for source in sorted(skeleton.rglob("*")):
        if not source.is_file() or source.name == "__init__.py":
            continue
        relative = source.relative_to(skeleton)
        destination = target_dir / relative
        if destination.exists():
            continue
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, destination)
        created.append(relative)
    return created
