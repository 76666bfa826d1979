"""
Published asset set validation.

Checks that the server asset directory holds exactly the files in the
staging directory, by name and content.
"""

from pathlib import Path

from exoform_publish.core.fs import diff_snapshots, snapshot
from exoform_publish.utils.logging import logger


def verify_published(staging: Path, server_dir: Path) -> bool:
    """
    Compare the published set against the staging directory.

    Args:
        staging: Staging directory of the last build
        server_dir: Published asset directory

    Returns:
        True if both hold the same files with the same content
    """
    for directory in (staging, server_dir):
        if not directory.is_dir():
            logger.error(f"Directory not found: {directory}")
            return False

    expected = snapshot(staging)
    actual = snapshot(server_dir)
    problems = diff_snapshots(expected, actual)

    if problems:
        logger.error(f"{server_dir}/ does not match {staging}/:")
        for line in problems:
            logger.error(f"  - {line}")
        return False

    logger.info(f"{server_dir}/ matches {staging}/ ({len(actual)} files)")
    return True
