# typedcoll/runtime/concurrency.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import threading
from contextlib import contextmanager


class _LockFactory:
    """
    Internal factory for producing the locks guarding process-wide tables.
    Re-entrant locks are used so that a factory running under the lock may call
    other factories (e.g. numeric() composing a union).
    """

    def create_lock(self) -> threading.Lock:
        """
        Return a new plain lock instance.
        """
        return threading.Lock()

    def create_rlock(self) -> threading.RLock:
        """
        Return a new re-entrant lock instance.
        """
        return threading.RLock()


def get_lock() -> threading.Lock:
    """
    Provide a new lock instance to be used for synchronization.
    """
    return _LockFactory().create_lock()


def get_rlock() -> threading.RLock:
    """
    Provide a new re-entrant lock instance to be used for synchronization.
    """
    return _LockFactory().create_rlock()


@contextmanager
def with_lock(lock):
    """
    A convenience context manager that acquires the given lock upon entry and
    releases it upon exit, ensuring safe access to shared resources.
    """
    lock.acquire()
    try:
        yield
    finally:
        lock.release()
