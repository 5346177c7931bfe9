from __future__ import annotations
import threading
from contextlib import contextmanager, ExitStack
from datetime import date
from typing import Iterable, Iterator

# One lock per (worker_id, date); writers that touch a worker's day hold it
# across job creation and the availability hold. An entry lives only while
# someone holds or waits on it.
_registry_guard = threading.Lock()
_locks: dict[tuple[int, date], threading.Lock] = {}
_users: dict[tuple[int, date], int] = {}


def _checkout(key: tuple[int, date]) -> threading.Lock:
    with _registry_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _locks[key] = lock
        _users[key] = _users.get(key, 0) + 1
        return lock


def _release(key: tuple[int, date]) -> None:
    with _registry_guard:
        _users[key] -= 1
        if _users[key] == 0:
            del _users[key]
            del _locks[key]


@contextmanager
def worker_day_lock(worker_id: int, day: date) -> Iterator[None]:
    key = (worker_id, day)
    lock = _checkout(key)
    try:
        with lock:
            yield
    finally:
        _release(key)


@contextmanager
def worker_day_locks(keys: Iterable[tuple[int, date]]) -> Iterator[None]:
    """Acquire several keyed locks in a stable order so two writers cannot deadlock."""
    with ExitStack() as stack:
        for worker_id, day in sorted(set(keys)):
            stack.enter_context(worker_day_lock(worker_id, day))
        yield
