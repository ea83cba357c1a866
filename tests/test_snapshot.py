"""Tests for the ticker snapshot store."""

import threading

from ticker_bot.models import Asset
from ticker_bot.snapshot import SnapshotStore


def _assets(prefix, n):
    return [Asset(id=f"{prefix}{i}", name=f"{prefix} {i}", symbol=f"{prefix}{i}") for i in range(n)]


def test_replace_installs_new_snapshot(bitcoin, ethereum):
    store = SnapshotStore()
    assert store.all() == ()

    assert store.replace([bitcoin, ethereum]) is True
    assert store.all() == (bitcoin, ethereum)
    assert len(store) == 2


def test_empty_replace_keeps_previous_snapshot(bitcoin):
    store = SnapshotStore()
    store.replace([bitcoin])

    assert store.replace([]) is False
    assert store.all() == (bitcoin,)


def test_empty_replace_on_fresh_store_is_noop():
    store = SnapshotStore()
    assert store.replace(iter(())) is False
    assert store.all() == ()


def test_snapshot_is_not_affected_by_caller_list_mutation(bitcoin, ethereum):
    store = SnapshotStore()
    source = [bitcoin]
    store.replace(source)
    source.append(ethereum)
    assert store.all() == (bitcoin,)


def test_readers_never_see_a_mixed_snapshot():
    a = tuple(_assets("a", 500))
    b = tuple(_assets("b", 700))
    store = SnapshotStore(a)

    seen = []
    errors = []
    stop = threading.Event()

    def reader():
        while not stop.is_set():
            snap = store.all()
            if snap != a and snap != b:
                errors.append(snap)
            seen.append(len(snap))

    def writer():
        for i in range(200):
            store.replace(b if i % 2 == 0 else a)

    readers = [threading.Thread(target=reader) for _ in range(4)]
    for t in readers:
        t.start()
    w = threading.Thread(target=writer)
    w.start()
    w.join(timeout=10.0)
    stop.set()
    for t in readers:
        t.join(timeout=5.0)

    assert not errors
    assert set(seen) <= {500, 700}
