"""File utilities."""
from __future__ import annotations

import os
import tempfile
from pathlib import Path


def ensure_dir(path: str | Path) -> Path:
    """Ensure directory exists and return Path."""
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def write_text_atomic(path: str | Path, content: str, encoding: str = "utf-8") -> Path:
    """Write ``content`` to ``path`` so readers never observe a partial file.

    The text goes to a temporary file in the same directory, which then
    replaces the target in a single rename.
    """
    target = Path(path)
    ensure_dir(target.parent)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as fh:
            fh.write(content)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, target)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
    return target


def read_text_file(path: str | Path, encoding: str = "utf-8") -> str:
    """Read a whole text file, raising FileNotFoundError if it is missing."""
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"Missing file: {path}")
    return p.read_text(encoding=encoding)
