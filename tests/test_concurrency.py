from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from docstore import DocumentStore, ReaderWriterLock


def _wait_until(cond, timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if cond():
            return True
        time.sleep(0.005)
    return False


def test_lock_release_without_acquire_raises():
    lock = ReaderWriterLock()
    with pytest.raises(RuntimeError):
        lock.release_read()
    with pytest.raises(RuntimeError):
        lock.release_write()


def test_lock_readers_share():
    lock = ReaderWriterLock()
    lock.acquire_read()
    lock.acquire_read()
    assert lock.readers == 2
    lock.release_read()
    lock.release_read()
    assert lock.readers == 0


def test_lock_writer_waits_for_reader_and_blocks_new_readers():
    lock = ReaderWriterLock()
    order: list[str] = []

    def writer():
        with lock.writing():
            order.append("writer")

    def late_reader():
        with lock.reading():
            order.append("reader")

    lock.acquire_read()
    w = threading.Thread(target=writer)
    w.start()
    assert _wait_until(lambda: lock.writers_waiting == 1)

    r = threading.Thread(target=late_reader)
    r.start()
    time.sleep(0.1)
    # neither may run while the first reader holds the lock
    assert order == []

    lock.release_read()
    w.join(5)
    r.join(5)
    # writer-preferring: the queued writer goes before the late reader
    assert order == ["writer", "reader"]
    assert lock.readers == 0
    assert lock.write_held is False


def test_concurrent_selects_do_not_block_each_other(store):
    n = 4
    barrier = threading.Barrier(n, timeout=5)

    def pred(doc):
        # Every reader must be inside select at the same time to get past the barrier.
        if doc["guid"] == "A":
            barrier.wait()
        return doc.get("department") == "IT"

    with ThreadPoolExecutor(max_workers=n) as pool:
        futures = [pool.submit(store.select, pred) for _ in range(n)]
        results = [f.result(timeout=10) for f in futures]

    assert all([d["guid"] for d in r] == ["A", "C"] for r in results)


def test_writer_waits_for_running_reader(store):
    entered = threading.Event()
    release = threading.Event()
    inserted = threading.Event()

    def slow_pred(doc):
        entered.set()
        release.wait(5)
        return True

    def insert():
        store.insert({"guid": "D"})
        inserted.set()

    reader = threading.Thread(target=store.select, args=(slow_pred,))
    reader.start()
    assert entered.wait(5)

    writer = threading.Thread(target=insert)
    writer.start()
    assert not inserted.wait(0.2)

    release.set()
    assert inserted.wait(5)
    reader.join(5)
    writer.join(5)
    assert store.exists("D")


def test_concurrent_inserts_are_all_kept(db_path):
    threads, per_thread = 8, 50

    with DocumentStore(db_path) as db:

        def work(t: int) -> None:
            for i in range(per_thread):
                db.insert({"thread": t, "i": i})

        with ThreadPoolExecutor(max_workers=threads) as pool:
            list(pool.map(work, range(threads)))

        docs = db.records()
        assert len(docs) == 3 + threads * per_thread
        assert len({d["guid"] for d in docs}) == len(docs)
        for t in range(threads):
            assert [d["i"] for d in docs if d.get("thread") == t] == list(range(per_thread))


def test_close_waits_for_running_reader(store):
    entered = threading.Event()
    release = threading.Event()

    def slow_pred(doc):
        entered.set()
        release.wait(5)
        return True

    with ThreadPoolExecutor(max_workers=2) as pool:
        fut = pool.submit(store.select, slow_pred)
        assert entered.wait(5)
        closer = pool.submit(store.close)
        time.sleep(0.1)
        assert store.closed is False
        release.set()
        assert len(fut.result(timeout=5)) == 3
        closer.result(timeout=5)

    assert store.closed is True
