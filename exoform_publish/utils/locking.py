"""
Run-level file lock for the published asset directory.
"""

import contextlib
import fcntl
import os
import time
from collections.abc import Iterator
from pathlib import Path


class LockTimeout(RuntimeError):
    """Raised when the lock is still held by another writer after the timeout."""


def lock_path_for(directory: Path) -> Path:
    """Sibling lock file for a directory, e.g. server/.assets.lock."""
    return directory.parent / f".{directory.name}.lock"


@contextlib.contextmanager
def exclusive_lock(lock_path: Path, timeout: float = 60.0) -> Iterator[None]:
    """
    Hold an exclusive flock on lock_path for the duration of the block.

    Polls until the lock is free or timeout seconds pass.

    Raises:
        LockTimeout: If another process holds the lock past the timeout
    """
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    fh = lock_path.open("a+")
    start = time.monotonic()
    try:
        while True:
            try:
                fcntl.flock(fh, fcntl.LOCK_EX | fcntl.LOCK_NB)
                break
            except BlockingIOError:
                if time.monotonic() - start >= timeout:
                    raise LockTimeout(f"publish lock timeout after {timeout}s: {lock_path}")
                time.sleep(0.05)

        # Only the holder records its pid
        fh.seek(0)
        fh.truncate()
        fh.write(f"pid={os.getpid()}\n")
        fh.flush()
        try:
            yield None
        finally:
            fcntl.flock(fh, fcntl.LOCK_UN)
    finally:
        fh.close()
