"""Bin wiring: where bins live on disk and one CacheStore per bin per process."""
from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable

from filecache.codec import Codec, codec_for
from filecache.settings import Settings
from filecache.store import CacheStore

log = logging.getLogger("filecache")

DEFAULT_BIN = "cache"
STORAGE_SUBDIR = "filecache"

_stores: dict[str, CacheStore] = {}
_stores_lock = threading.Lock()


def bin_directory_name(bin_name: str) -> str:
    """Every bin except the default one lives in a "cache_"-prefixed directory."""
    if bin_name == DEFAULT_BIN:
        return bin_name
    return f"{DEFAULT_BIN}_{bin_name}"


def resolve_storage_root(settings: Settings) -> Path:
    """Root directory holding all bins.

    Explicit storage dir wins; otherwise the private files path when it
    exists, falling back to the public files path. Never raises.
    """
    if settings.filecache_storage_dir:
        return Path(settings.filecache_storage_dir).expanduser()

    base = None
    if settings.file_private_path:
        private = Path(settings.file_private_path).expanduser()
        if private.is_dir():
            base = private.resolve()
        else:
            log.warning("Private files path %s does not exist, using public path", private)
    if base is None:
        base = Path(settings.file_public_path or "files").expanduser()
    return base / STORAGE_SUBDIR


def construct(
    bin_name: str,
    settings: Settings | None = None,
    codec: Codec | None = None,
    clock: Callable[[], float] | None = None,
) -> CacheStore:
    """Builds the store for bin_name, creating its directory.

    Raises fs.CacheDirectoryError when the directory cannot be created.
    """
    settings = settings or Settings()
    directory = resolve_storage_root(settings) / bin_directory_name(bin_name)
    store = CacheStore(
        directory,
        codec=codec or codec_for(settings.filecache_codec),
        payload_ext=settings.filecache_payload_ext,
        file_mode=settings.filecache_file_mode,
        dir_mode=settings.filecache_dir_mode,
        clock=clock,
        bin_name=bin_name,
    )
    log.info("Cache bin %s ready: %s", bin_name, directory)
    return store


def get_store(bin_name: str = DEFAULT_BIN) -> CacheStore:
    """Process-wide store for bin_name, constructed on first use from Settings()."""
    with _stores_lock:
        store = _stores.get(bin_name)
        if store is None:
            store = construct(bin_name)
            _stores[bin_name] = store
        return store


def reset_stores() -> None:
    with _stores_lock:
        _stores.clear()
