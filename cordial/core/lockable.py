"""Reader/writer locking for entities shared between call sites."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class RWLock:
    """Writer-preferring reader/writer lock. Not reentrant."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            if self._readers <= 0:
                raise RuntimeError("release_read without matching acquire_read")
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            if not self._writer:
                raise RuntimeError("release_write without matching acquire_write")
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class Lockable:
    """Mixin giving each instance its own RWLock.

    The lock lives outside the dataclass fields so it never takes part in
    equality, repr, or copies.
    """

    __slots__ = ()

    @property
    def lock(self) -> RWLock:
        try:
            return self.__dict__["_rwlock"]
        except KeyError:
            lock = self.__dict__.setdefault("_rwlock", RWLock())
            return lock

    def read_locked(self):
        return self.lock.read_locked()

    def write_locked(self):
        return self.lock.write_locked()


@contextmanager
def read_then_write(source: Lockable, target: Lockable) -> Iterator[None]:
    """Hold *source* shared and *target* exclusive.

    Locks are taken in a stable order (object identity) so two merges running
    in opposite directions between the same pair cannot deadlock.
    """
    steps = [(id(source), source.lock.acquire_read, source.lock.release_read),
             (id(target), target.lock.acquire_write, target.lock.release_write)]
    steps.sort(key=lambda s: s[0])
    acquired = []
    try:
        for _, acquire, release in steps:
            acquire()
            acquired.append(release)
        yield
    finally:
        for release in reversed(acquired):
            release()
