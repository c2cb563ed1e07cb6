"""
Single-flight job locks.

Guards scheduled jobs so the same job never runs twice at once inside
one process. Locks are keyed by job name; different jobs never block
each other.

The locks are thread locks because each Celery task drives its own event
loop, possibly on separate worker threads. They are only ever acquired
without blocking, so holding one across ``await``s never stalls a loop.
"""
import contextlib
import logging
import threading
from typing import Dict, Iterator

from core.domain.exceptions import JobAlreadyRunningError

logger = logging.getLogger(__name__)

_registry_lock = threading.Lock()
_job_locks: Dict[str, threading.Lock] = {}


def _lock_for(job_name: str) -> threading.Lock:
    with _registry_lock:
        lock = _job_locks.get(job_name)
        if lock is None:
            lock = threading.Lock()
            _job_locks[job_name] = lock
        return lock


def is_running(job_name: str) -> bool:
    """Whether ``job_name`` currently holds its lock."""
    return _lock_for(job_name).locked()


@contextlib.contextmanager
def single_flight(job_name: str) -> Iterator[None]:
    """
    Hold the lock for ``job_name`` for the duration of the block.

    Raises:
        JobAlreadyRunningError: If another caller holds the lock
    """
    lock = _lock_for(job_name)
    # Never block here: callers hold the lock across awaits.
    if not lock.acquire(blocking=False):
        raise JobAlreadyRunningError(f"Job '{job_name}' is already running")
    logger.debug("Acquired job lock: %s", job_name)
    try:
        yield
    finally:
        lock.release()
        logger.debug("Released job lock: %s", job_name)
