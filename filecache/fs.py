"""Filesystem primitives shared by every bin: directory setup, atomic writes, scans."""
from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Iterator

from filecache.constants import TMP_PREFIX, TMP_SUFFIX

log = logging.getLogger("filecache")


class CacheDirectoryError(RuntimeError):
    """A bin directory cannot be created or used at all."""


def ensure_directory(path: Path, mode: int = 0o775) -> Path:
    """Creates path (and parents) if missing. Losing a creation race is fine."""
    path = Path(path)
    try:
        path.mkdir(mode=mode, parents=True, exist_ok=True)
    except OSError as e:
        raise CacheDirectoryError(f"Cannot create cache directory {path}: {e}") from e
    if not path.is_dir():
        raise CacheDirectoryError(f"Cache path exists but is not a directory: {path}")
    return path


def harden(path: Path, mode: int) -> None:
    try:
        os.chmod(path, mode)
    except OSError as e:
        log.debug("chmod %o failed for %s: %s", mode, path, e)


def write_atomic(path: Path, data: bytes, mode: int = 0o664) -> None:
    """Replaces path with data as a whole file.

    The bytes go to a dot-prefixed temp file in the same directory, are
    fsynced and renamed over the target with os.replace, so concurrent readers
    see either the old or the new content, never a partial one. Raises OSError.
    """
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(prefix=TMP_PREFIX + path.name + ".", suffix=TMP_SUFFIX, dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise
    harden(path, mode)


def remove_file(path: Path) -> bool:
    """Unlinks path if present. Returns True when something was removed."""
    try:
        os.unlink(path)
        return True
    except FileNotFoundError:
        return False


def scan(directory: Path, prefix: str = "", suffix: str = "") -> Iterator[os.DirEntry]:
    """Yields regular files in directory whose names match prefix and suffix.

    In-flight temp files are skipped unless prefix selects them explicitly.
    """
    with os.scandir(directory) as it:
        for entry in it:
            name = entry.name
            if not name.startswith(prefix) or not name.endswith(suffix):
                continue
            if name.startswith(TMP_PREFIX) and not prefix.startswith(TMP_PREFIX):
                continue
            if entry.is_file(follow_symlinks=False):
                yield entry


def has_entries(directory: Path) -> bool:
    """True if directory holds anything besides in-flight temp files."""
    with os.scandir(directory) as it:
        for entry in it:
            if not entry.name.startswith(TMP_PREFIX):
                return True
    return False


def remove_tree(directory: Path) -> None:
    try:
        shutil.rmtree(directory)
    except FileNotFoundError:
        pass
