"""
Unit tests for the reader/writer lock.

Covers:
    - readers share the lock
    - a writer waits for readers and excludes them while it holds the lock
    - a queued writer holds back readers that arrive after it
    - scoped acquisition releases on exceptions
    - unbalanced releases are rejected
"""

import threading
import time

import pytest

from slink_store.storage.locking import RWLock


def test_readers_share_the_lock():
    lock = RWLock()
    barrier = threading.Barrier(2, timeout=5)

    def reader():
        with lock.read():
            # Both readers must be inside at the same time to pass the barrier.
            barrier.wait()

    threads = [threading.Thread(target=reader) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)
    assert not barrier.broken


def test_writer_waits_for_reader():
    lock = RWLock()
    entered = threading.Event()

    def writer():
        with lock.write():
            entered.set()

    lock.acquire_read()
    t = threading.Thread(target=writer)
    t.start()
    try:
        assert not entered.wait(0.2)
    finally:
        lock.release_read()
    assert entered.wait(5)
    t.join(timeout=5)


def test_reader_waits_for_writer():
    lock = RWLock()
    entered = threading.Event()

    def reader():
        with lock.read():
            entered.set()

    lock.acquire_write()
    t = threading.Thread(target=reader)
    t.start()
    try:
        assert not entered.wait(0.2)
    finally:
        lock.release_write()
    assert entered.wait(5)
    t.join(timeout=5)


def test_waiting_writer_blocks_new_readers():
    lock = RWLock()
    order = []
    writer_done = threading.Event()
    second_reader_in = threading.Event()

    def writer():
        with lock.write():
            order.append("writer")
        writer_done.set()

    def second_reader():
        with lock.read():
            order.append("reader")
            second_reader_in.set()

    lock.acquire_read()
    w = threading.Thread(target=writer)
    w.start()
    # Wait until the writer is queued behind the first reader.
    for _ in range(500):
        with lock._cond:
            if lock._writers_waiting:
                break
        time.sleep(0.01)
    assert lock._writers_waiting == 1

    r = threading.Thread(target=second_reader)
    r.start()
    try:
        assert not second_reader_in.wait(0.2)
    finally:
        lock.release_read()
    assert writer_done.wait(5)
    assert second_reader_in.wait(5)
    w.join(timeout=5)
    r.join(timeout=5)
    assert order == ["writer", "reader"]


def test_scoped_acquisition_releases_on_error():
    lock = RWLock()
    with pytest.raises(RuntimeError, match="boom"):
        with lock.write():
            raise RuntimeError("boom")
    with pytest.raises(RuntimeError, match="boom"):
        with lock.read():
            raise RuntimeError("boom")

    done = threading.Event()

    def writer():
        with lock.write():
            done.set()

    t = threading.Thread(target=writer)
    t.start()
    assert done.wait(5)
    t.join(timeout=5)


def test_unbalanced_release_is_rejected():
    lock = RWLock()
    with pytest.raises(RuntimeError):
        lock.release_read()
    with pytest.raises(RuntimeError):
        lock.release_write()
