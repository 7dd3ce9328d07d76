"""
Advisory project lock for taskflow.

Uses flock on .taskflow/session.lock so two invocations can't interleave
graph writes. The file records the owner's PID; the kernel drops the flock
when the owner dies, so a lock left behind by a dead process is reclaimed on
the next acquire.
"""

import fcntl
import logging
import os
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from taskflow.lib.errors import SessionLockedError
from taskflow.lib.paths import lock_file_path

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.2


def pid_alive(pid: int) -> bool:
    """Check whether a process with this PID exists."""
    if pid <= 0:
        return False
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True  # exists, owned by someone else
    return True


def read_holder_pid(lock_file: Path) -> Optional[int]:
    """PID written by the last holder, or None if unreadable."""
    try:
        content = lock_file.read_text().strip()
        return int(content) if content else None
    except (OSError, ValueError):
        return None


class SessionLock:
    """Exclusive lock on a project's task graph."""

    def __init__(self, lock_file: Path, timeout: float = 10):
        self.lock_file = Path(lock_file)
        self.timeout = timeout
        self._fd = None

    @property
    def held(self) -> bool:
        return self._fd is not None

    def acquire(self) -> None:
        """Block until the lock is ours or timeout expires.

        Raises:
            SessionLockedError: another live process kept the lock past timeout
        """
        if self.held:
            return
        self.lock_file.parent.mkdir(parents=True, exist_ok=True)

        # Append mode so a waiting process doesn't truncate the holder's PID
        fd = open(self.lock_file, "a+")
        start = time.monotonic()
        while True:
            try:
                fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
                break
            except BlockingIOError:
                if time.monotonic() - start > self.timeout:
                    fd.close()
                    raise SessionLockedError(self.lock_file, read_holder_pid(self.lock_file), self.timeout)
                time.sleep(POLL_INTERVAL)

        previous = read_holder_pid(self.lock_file)
        if previous and previous != os.getpid() and not pid_alive(previous):
            logger.info(f"[LOCK] Reclaiming lock left by dead process {previous}")

        fd.seek(0)
        fd.truncate()
        fd.write(f"{os.getpid()}\n")
        fd.flush()
        self._fd = fd
        logger.debug(f"[LOCK] Acquired {self.lock_file}")

    def release(self) -> None:
        if self._fd is None:
            return
        try:
            self._fd.seek(0)
            self._fd.truncate()
            fcntl.flock(self._fd, fcntl.LOCK_UN)
        finally:
            self._fd.close()
            self._fd = None
        logger.debug(f"[LOCK] Released {self.lock_file}")

    def __enter__(self) -> "SessionLock":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


@contextmanager
def project_lock(root: Path, timeout: float = 10):
    """
    Acquire the project lock, yield, release on exit.

    Note: the lock file is never deleted. Deleting it would let two processes
    hold "exclusive" locks on different inodes with the same path.
    """
    lock = SessionLock(lock_file_path(root), timeout)
    with lock:
        yield lock
