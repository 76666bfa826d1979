"""
Static asset merging.

Copies the hand-written assets next to the generated files so the
staging directory can be served on its own.
"""

import shutil
from pathlib import Path

from exoform_publish.core.errors import FilesystemError
from exoform_publish.core.fs import copy_entry
from exoform_publish.utils.logging import logger


def merge_assets(source: Path, staging: Path) -> list[Path]:
    """
    Copy every entry of the asset directory into the staging directory.

    Files are copied flat; subdirectories are copied recursively only when
    the source contains them.

    Args:
        source: Static asset directory
        staging: Staging directory

    Returns:
        Destination paths of the copied entries

    Raises:
        FilesystemError: If the source is missing or unreadable, or a copy fails
    """
    if not source.is_dir():
        raise FilesystemError(f"Asset directory not found: {source}")

    try:
        entries = sorted(source.iterdir())
    except OSError as e:
        raise FilesystemError(f"Failed to read asset directory {source}: {e}") from e

    if not entries:
        logger.warning(f"No assets found in {source}/")

    copied = []
    for entry in entries:
        destination = staging / entry.name
        if destination.exists():
            logger.warning(f"  {entry.name} overwrites a generated file")
        try:
            copy_entry(entry, destination)
        except (OSError, shutil.Error) as e:
            raise FilesystemError(
                f"Failed to copy asset {entry} to {staging}: {e}"
            ) from e
        copied.append(destination)

    logger.info(f"Merged {len(copied)} assets into {staging}/")
    return copied
