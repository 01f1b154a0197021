# qrorder/services/lock_service.py
import threading
import weakref
from contextlib import contextmanager
from typing import Iterator

from qrorder.utils.logging import get_logger

logger = get_logger(__name__)


class LockService:
    """
    - one re-entrant lock per table id, created on first use
    - unrelated tables never wait on each other
    - cart, ticket timestamp and table state changes for a table
      run under the same lock as reads that build its TableView
    - the registry only holds locks somebody is using, so arbitrary
      table ids from clients do not accumulate
    """

    def __init__(self):
        self._locks: weakref.WeakValueDictionary[str, threading.RLock] = (
            weakref.WeakValueDictionary()
        )
        self._registry_lock = threading.Lock()

    def _lock_for(self, table: str) -> threading.RLock:
        with self._registry_lock:
            lock = self._locks.get(table)
            if lock is None:
                lock = threading.RLock()
                self._locks[table] = lock
                logger.debug(f"Created lock for table {table}")
            return lock

    @contextmanager
    def table_lock(self, table: str) -> Iterator[None]:
        lock = self._lock_for(table)
        with lock:
            yield
