# ============================================================================
# PATH LOCKING SERVICE
# ============================================================================
# EPOCH: 1 - SCHEMA INFERENCE
# STATUS: Infrastructure - Concurrency control
# PURPOSE: Process-wide named locks scoped to resolved schema file paths
# CREATED: 19 OCT 2026
# ============================================================================
"""
Path Locking Service

Schema replacement reads a file, then deletes or backs it up, then loads
it again. Two managers targeting the same schema name must not interleave
those steps, so the sequence runs under a lock named after the resolved
file path.

Locks are:
- In-process (one registry per process, shared by every LockService)
- Keyed by a hash of the absolute, normalized path
- Re-entrant, so a holder may call back into locked operations
- Blocking by default, with non-blocking try semantics available
- Dropped from the registry once no thread holds or waits on them

Usage:
    from infrastructure.locking import LockService

    lock_service = LockService()

    with lock_service.path_lock("/data/Schemas/Blog.json") as acquired:
        if acquired:
            replace_schema_file()
"""

import hashlib
import logging
import os
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Union

logger = logging.getLogger(__name__)


PathLike = Union[str, "os.PathLike[str]"]


class LockService:
    """
    Named path locks shared across the process.

    Every instance sees the same registry, so two schema managers with
    separate LockService objects still serialize on the same file.
    """

    PATH_LOCK_PREFIX = "schema:path:"

    _registry: Dict[int, threading.RLock] = {}
    _users: Dict[int, int] = {}
    _holders: Dict[int, int] = {}
    _registry_lock = threading.Lock()

    @staticmethod
    def _hash_to_lock_id(key: str) -> int:
        """
        Convert a string key to a stable int64 lock id.

        Uses the first 8 bytes of SHA256, interpreted as signed int64.
        """
        h = hashlib.sha256(key.encode()).digest()[:8]
        return int.from_bytes(h, byteorder="big", signed=True)

    @classmethod
    def lock_id_for(cls, path: PathLike) -> int:
        resolved = os.path.normcase(os.path.abspath(os.fspath(path)))
        return cls._hash_to_lock_id(f"{cls.PATH_LOCK_PREFIX}{resolved}")

    @classmethod
    def _checkout(cls, lock_id: int) -> threading.RLock:
        """Get or create the lock for lock_id and count the caller as a user."""
        with cls._registry_lock:
            lock = cls._registry.get(lock_id)
            if lock is None:
                lock = threading.RLock()
                cls._registry[lock_id] = lock
            cls._users[lock_id] = cls._users.get(lock_id, 0) + 1
            return lock

    @classmethod
    def _checkin(cls, lock_id: int) -> None:
        with cls._registry_lock:
            cls._users[lock_id] -= 1
            if not cls._users[lock_id]:
                del cls._users[lock_id]
                del cls._registry[lock_id]

    @contextmanager
    def path_lock(self, path: PathLike, blocking: bool = True) -> Iterator[bool]:
        """
        Context manager holding the lock for a path.

        Args:
            path: File path; relative paths are resolved against the cwd
            blocking: If False, don't wait when another thread holds it

        Yields:
            True if the lock was acquired, False otherwise
        """
        lock_id = self.lock_id_for(path)
        lock = self._checkout(lock_id)
        acquired = lock.acquire(blocking=blocking)

        if acquired:
            with self._registry_lock:
                self._holders[lock_id] = self._holders.get(lock_id, 0) + 1
            logger.debug(f"Acquired path lock for {path} (lock_id={lock_id})")
        else:
            logger.debug(f"Path lock for {path} held elsewhere (lock_id={lock_id})")

        try:
            yield acquired
        finally:
            if acquired:
                with self._registry_lock:
                    self._holders[lock_id] -= 1
                    if not self._holders[lock_id]:
                        del self._holders[lock_id]
                lock.release()
            self._checkin(lock_id)

    @classmethod
    def registered_lock_count(cls) -> int:
        """Number of path locks currently in use by some thread."""
        with cls._registry_lock:
            return len(cls._registry)

    def is_path_locked(self, path: PathLike) -> bool:
        """Check whether any thread currently holds the lock for path."""
        with self._registry_lock:
            return self.lock_id_for(path) in self._holders


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "LockService",
]
