"""Tests for readers racing writers on one cid."""
import threading

from filecache.store import CacheStore


def test_readers_never_see_partial_payloads(store: CacheStore) -> None:
    """Concurrent set() on one cid: every get() returns one whole written value."""
    values = [bytes([ord("a") + i]) * 512_000 for i in range(4)]
    store.set("shared", values[0])
    stop = threading.Event()
    errors: list[str] = []

    def writer(value: bytes) -> None:
        for _ in range(10):
            store.set("shared", value)

    def reader() -> None:
        while not stop.is_set():
            got = store.get("shared")
            if got not in values:
                errors.append("missing" if got is None else f"torn payload of {len(got)} bytes")

    readers = [threading.Thread(target=reader) for _ in range(2)]
    writers = [threading.Thread(target=writer, args=(v,)) for v in values]
    for t in readers + writers:
        t.start()
    for t in writers:
        t.join()
    stop.set()
    for t in readers:
        t.join()

    assert errors == []
    assert store.get("shared") in values
    assert not [p for p in store.directory.iterdir() if p.name.endswith(".tmp")]
    assert [p.name for p in store.directory.iterdir()] == ["shared.cache"]
