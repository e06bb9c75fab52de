"""Small filesystem helpers for staging directories."""

import shutil
from pathlib import Path


def copy_file(src: Path, dst: Path) -> None:
    """Copy a single file's contents, creating parent directories as needed."""
    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(src, dst)


def copy_tree(src: Path, dst: Path) -> int:
    """Copy every file under src into dst, preserving relative paths.

    Returns:
        Number of files copied

    Raises:
        FileNotFoundError: If src is not a directory
    """
    if not src.is_dir():
        raise FileNotFoundError(f"Source directory not found: {src}")

    copied = 0
    for path in sorted(src.rglob("*")):
        if path.is_dir():
            continue
        copy_file(path, dst / path.relative_to(src))
        copied += 1
    return copied
