"""Helpers for reading and writing line-oriented files."""

from __future__ import annotations

import os
from collections.abc import Iterable


def read_lines(filename: str | os.PathLike[str]) -> list[str]:
    """Return the stripped, non-empty, non-comment lines of a file."""
    with open(filename, encoding="utf-8") as handle:
        stripped = (line.strip() for line in handle)
        return [line for line in stripped if line and not line.startswith("#")]


def write_lines(filename: str | os.PathLike[str], lines: Iterable[str]) -> None:
    """Write each line followed by a newline, creating parent directories."""
    directory = os.path.dirname(os.fspath(filename)) or "."
    os.makedirs(directory, mode=0o755, exist_ok=True)
    with open(filename, "w", encoding="utf-8") as handle:
        handle.writelines(f"{line}\n" for line in lines)


def file_exists(filename: str | os.PathLike[str]) -> bool:
    """Return True if the path exists."""
    return os.path.exists(filename)


def ensure_directory(path: str | os.PathLike[str]) -> None:
    """Create the directory and its parents if they do not exist."""
    os.makedirs(path, mode=0o755, exist_ok=True)