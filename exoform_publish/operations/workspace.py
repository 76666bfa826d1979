"""
Staging directory preparation.

Every run starts from an empty staging directory so no file from an
earlier build can leak into a publish.
"""

from pathlib import Path

from exoform_publish.core.errors import FilesystemError
from exoform_publish.core.fs import clear_directory
from exoform_publish.utils.logging import logger


def prepare_staging_dir(path: Path) -> None:
    """
    Ensure the staging directory exists and is empty.

    Args:
        path: Staging directory (created with parents if missing)

    Raises:
        FilesystemError: If the path is not a directory or cannot be created or cleared
    """
    if path.exists() and not path.is_dir():
        raise FilesystemError(f"Staging path exists and is not a directory: {path}")

    try:
        path.mkdir(parents=True, exist_ok=True)
        removed = clear_directory(path)
    except OSError as e:
        raise FilesystemError(f"Failed to prepare staging directory {path}: {e}") from e

    if removed:
        logger.info(f"Cleared {removed} stale entries from {path}/")
    else:
        logger.info(f"Staging directory {path}/ is ready")
