"""
Publishing to the server asset directory.

Replaces the whole published asset set with the staging directory's
contents. By default the new set is copied next to the live directory
and swapped in with two renames, so the server only ever sees the old
set, the new set, or (for the instant between the renames) no directory.
Where the filesystem refuses the rename (mount points, cross-device
links) the live directory is cleared and refilled in place instead.

A failure part way through can leave the published directory empty or
partial. It is reported as PublishError and never retried.
"""

import errno
import shutil
from pathlib import Path

from exoform_publish.config.settings import DEFAULT_LOCK_TIMEOUT
from exoform_publish.core.errors import PublishError
from exoform_publish.core.fs import (
    clear_directory,
    copy_contents,
    diff_snapshots,
    remove_entry,
    snapshot,
)
from exoform_publish.utils.locking import LockTimeout, exclusive_lock, lock_path_for
from exoform_publish.utils.logging import logger

# rename() errors that mean "swap unsupported here" rather than a real failure
SWAP_UNSUPPORTED = frozenset({errno.EBUSY, errno.EXDEV, errno.EPERM})


def sibling(server_dir: Path, suffix: str) -> Path:
    """Hidden working path next to the server directory."""
    return server_dir.parent / f".{server_dir.name}.{suffix}"


def remove_leftovers(server_dir: Path) -> None:
    """Delete working directories left by an interrupted publish."""
    for suffix in ("incoming", "previous"):
        path = sibling(server_dir, suffix)
        if path.exists() or path.is_symlink():
            logger.warning(f"Removing leftover {path.name} from an interrupted publish")
            remove_entry(path)


def resolve_live_dir(server_dir: Path) -> Path:
    """
    Directory that actually holds the published files.

    A symlinked server_dir (e.g. assets -> releases/v1) is published through
    its target so the link itself stays in place.
    """
    if not server_dir.is_symlink():
        return server_dir
    live = server_dir.resolve()
    logger.info(f"{server_dir} links to {live}; publishing into the link target")
    return live


def replace_in_place(staging: Path, server_dir: Path) -> None:
    """Clear server_dir, then copy every staging entry into it."""
    removed = clear_directory(server_dir)
    logger.info(f"  Removed {removed} entries from {server_dir}/")
    copied = copy_contents(staging, server_dir)
    logger.info(f"  Copied {len(copied)} entries into {server_dir}/")


def swap_into_place(staging: Path, server_dir: Path) -> bool:
    """
    Build the new set beside server_dir and rename it into place.

    Returns:
        True if swapped, False if the filesystem does not support the swap
        (nothing under server_dir has been touched in that case)
    """
    incoming = sibling(server_dir, "incoming")
    previous = sibling(server_dir, "previous")

    shutil.copytree(staging, incoming, symlinks=True)
    logger.info(f"  Copied new asset set to {incoming.name}")

    try:
        server_dir.rename(previous)
    except OSError as e:
        if e.errno not in SWAP_UNSUPPORTED:
            raise
        logger.warning(f"Cannot rename {server_dir}/ ({e.strerror}); replacing in place")
        shutil.rmtree(incoming)
        return False

    try:
        incoming.rename(server_dir)
    except OSError:
        logger.error(f"Failed to move new asset set into {server_dir}/; restoring previous set")
        previous.rename(server_dir)
        raise

    remove_entry(previous)
    logger.info(f"  Swapped new asset set into {server_dir}/")
    return True


def publish(
    staging: Path,
    server_dir: Path,
    *,
    atomic: bool = True,
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT,
) -> dict[str, str]:
    """
    Replace the contents of server_dir with the contents of staging.

    Args:
        staging: Complete staging directory
        server_dir: Published asset directory (created if absent)
        atomic: Swap directories by rename where supported
        lock_timeout: Seconds to wait for another publisher to finish

    Returns:
        Snapshot (relative path -> SHA-256) of the published set

    Raises:
        PublishError: If any step fails or the result does not match staging
    """
    if not staging.is_dir():
        raise PublishError(f"Staging directory not found: {staging}")

    try:
        expected = snapshot(staging)
        server_dir.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PublishError(f"Failed to prepare publish of {staging}: {e}") from e

    logger.info(f"Publishing {len(expected)} files to {server_dir}/")

    try:
        with exclusive_lock(lock_path_for(server_dir), timeout=lock_timeout):
            try:
                live = resolve_live_dir(server_dir)
                live.mkdir(parents=True, exist_ok=True)
                remove_leftovers(live)
                if not (atomic and swap_into_place(staging, live)):
                    replace_in_place(staging, live)
                actual = snapshot(live)
            except (OSError, shutil.Error) as e:
                logger.error(f"Publish to {server_dir}/ failed; it may be empty or partial")
                raise PublishError(f"Failed to publish to {server_dir}: {e}") from e
    except LockTimeout as e:
        raise PublishError(str(e)) from e
    except OSError as e:
        raise PublishError(f"Failed to lock {server_dir}: {e}") from e

    problems = diff_snapshots(expected, actual)
    if problems:
        logger.error(f"Published set in {server_dir}/ does not match staging")
        raise PublishError(
            f"Published set in {server_dir} does not match staging",
            diagnostic="\n".join(problems),
        )

    logger.info(f"Published {len(actual)} files to {server_dir}/")
    return actual
