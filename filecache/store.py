from __future__ import annotations

import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterable, Union

from filecache import fs
from filecache.codec import Codec, PickleCodec
from filecache.constants import EXPIRE_SUFFIX, PERMANENT
from filecache.keys import normalize
from filecache.results import Absent, Found, Ignored, Lookup, Ok, WriteResult

log = logging.getLogger("filecache")

Expiration = Union[int, float, datetime, None]


class CacheStore:
    """One bin: a directory of payload files plus optional .expire markers.

    Expiration is lazy: get() never looks at markers, an expired entry stays
    readable until collect() reaps it. Every steady-state operation degrades
    to a miss or a no-op on storage and codec errors; only construction raises
    (fs.CacheDirectoryError) when the directory cannot be set up.

    Payload and marker are separate files with no transaction between them.
    Two writers racing on one cid can leave A's payload next to B's marker.
    """

    def __init__(
        self,
        directory: str | Path,
        codec: Codec | None = None,
        payload_ext: str = ".cache",
        file_mode: int = 0o664,
        dir_mode: int = 0o775,
        clock: Callable[[], float] | None = None,
        bin_name: str | None = None,
    ):
        self.directory = Path(directory)
        self.codec = codec or PickleCodec()
        self.payload_ext = payload_ext
        self.file_mode = int(file_mode)
        self.dir_mode = int(dir_mode)
        self.clock = clock or time.time
        self.bin = bin_name or self.directory.name

        fs.ensure_directory(self.directory, self.dir_mode)

    def __repr__(self) -> str:
        return f"CacheStore(bin={self.bin!r}, directory={str(self.directory)!r})"

    def _payload_path(self, cid: str) -> Path:
        return self.directory / f"{normalize(cid)}{self.payload_ext}"

    @staticmethod
    def _marker_path(payload: Path) -> Path:
        return payload.with_name(payload.name + EXPIRE_SUFFIX)

    @staticmethod
    def _deadline(expire: Expiration) -> int | None:
        """None for permanent entries, otherwise the Unix timestamp to store."""
        if expire is None:
            return None
        if isinstance(expire, datetime):
            return int(expire.timestamp())
        if expire == PERMANENT:
            return None
        return int(expire)

    # --- single entries ---

    def lookup(self, cid: str) -> Lookup:
        path = self._payload_path(cid)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return Absent()
        except OSError as e:
            log.warning("Cache read failed for %s: %s", path, e)
            return Absent(f"unreadable: {e}")

        try:
            value = self.codec.deserialize(raw)
        except Exception as e:
            log.debug("Malformed cache entry %s: %s", path, e)
            return Absent("malformed")
        try:
            empty = not value
        except Exception:
            # truth value undefined (arrays, frames): a real stored value
            empty = False
        if empty:
            return Absent("empty")
        return Found(value)

    def get(self, cid: str) -> Any:
        """Returns the cached value or None on a miss (missing, empty or malformed)."""
        result = self.lookup(cid)
        if isinstance(result, Found):
            return result.value
        return None

    def set(self, cid: str, value: Any, expire: Expiration = PERMANENT) -> WriteResult:
        """Stores value, replacing any previous entry for cid.

        expire is PERMANENT, TEMPORARY or an absolute Unix timestamp (or a
        datetime). Failures are logged and returned as Ignored, never raised.
        """
        path = self._payload_path(cid)
        marker = self._marker_path(path)
        try:
            deadline = self._deadline(expire)
            data = self.codec.serialize(value)
        except Exception as e:
            log.warning("Cannot prepare cache entry %r: %s", cid, e)
            return Ignored(f"serialize: {e}")

        try:
            # payload first: a marker is never visible without its payload
            fs.write_atomic(path, data, self.file_mode)
            if deadline is None:
                fs.remove_file(marker)
            else:
                fs.write_atomic(marker, str(deadline).encode("ascii"), self.file_mode)
        except OSError as e:
            log.warning("Cache write failed for %s: %s", path, e)
            return Ignored(f"write: {e}")
        return Ok(str(path))

    def delete(self, cid: str) -> None:
        path = self._payload_path(cid)
        for p in (path, self._marker_path(path)):
            try:
                fs.remove_file(p)
            except OSError as e:
                log.warning("Cache delete failed for %s: %s", p, e)

    # --- bulk ---

    def get_multiple(self, cids: Iterable[str]) -> tuple[dict[str, Any], set[str]]:
        """Returns (found, remaining): values for hits, and the cids still missing.

        Any unexpected failure turns the whole batch into a miss.
        """
        requested = set(cids)
        try:
            found = {}
            for cid in requested:
                value = self.get(cid)
                if value is not None:
                    found[cid] = value
            return found, requested - found.keys()
        except Exception as e:
            log.warning("Cache get_multiple failed in %s: %s", self.directory, e)
            return {}, requested

    def delete_multiple(self, cids: Iterable[str]) -> None:
        for cid in cids:
            self.delete(cid)

    def delete_prefix(self, prefix: str) -> int:
        """Removes every file whose raw name starts with prefix.

        The prefix is matched against safe identifiers (filenames), not cids:
        hashed cids cannot be prefix-matched.
        """
        removed = 0
        try:
            entries = list(fs.scan(self.directory, prefix=prefix))
        except OSError as e:
            log.warning("Cannot scan %s: %s", self.directory, e)
            return 0
        for entry in entries:
            try:
                if fs.remove_file(Path(entry.path)):
                    removed += 1
            except OSError as e:
                log.warning("Cache delete failed for %s: %s", entry.path, e)
        log.debug("delete_prefix(%r) removed %d files from %s", prefix, removed, self.directory)
        return removed

    def flush(self) -> None:
        """Drops every entry of the bin by recreating its directory."""
        try:
            fs.remove_tree(self.directory)
            fs.ensure_directory(self.directory, self.dir_mode)
        except (OSError, fs.CacheDirectoryError) as e:
            log.warning("Cache flush failed for %s: %s", self.directory, e)
            return
        log.info("Cache bin flushed: %s", self.bin)

    # --- garbage collection ---

    def _read_deadline(self, marker: Path) -> float:
        text = marker.read_text(encoding="ascii", errors="replace").strip()
        try:
            return float(text)
        except ValueError:
            # unparsable markers count as long expired
            return 0.0

    def collect(self) -> int:
        """Reaps entries whose marker deadline has passed. Returns the count."""
        if not self.directory.is_dir():
            return 0
        now = self.clock()
        reaped = 0
        try:
            markers = list(fs.scan(self.directory, suffix=EXPIRE_SUFFIX))
        except OSError as e:
            log.warning("Cannot scan %s: %s", self.directory, e)
            return 0

        for entry in markers:
            marker = Path(entry.path)
            try:
                if self._read_deadline(marker) >= now:
                    continue
                fs.remove_file(marker)
                fs.remove_file(marker.with_name(marker.name[: -len(EXPIRE_SUFFIX)]))
            except FileNotFoundError:
                continue
            except OSError as e:
                log.warning("Cache GC failed for %s: %s", marker, e)
                continue
            reaped += 1

        if reaped:
            log.debug("Cache GC reaped %d entries from %s", reaped, self.bin)
        return reaped

    garbage_collection = collect

    def is_empty(self) -> bool:
        self.collect()
        try:
            return not fs.has_entries(self.directory)
        except FileNotFoundError:
            return True
        except OSError as e:
            log.warning("Cannot scan %s: %s", self.directory, e)
            return True
