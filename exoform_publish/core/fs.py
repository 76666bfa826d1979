"""
Filesystem helpers shared by the staging, asset and publish stages.
"""

import hashlib
import shutil
from pathlib import Path


def remove_entry(path: Path) -> None:
    """Remove a file, symlink or directory tree."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def clear_directory(path: Path) -> int:
    """
    Remove every entry directly inside a directory, keeping the directory.

    Returns:
        Number of entries removed
    """
    entries = sorted(path.iterdir())
    for entry in entries:
        remove_entry(entry)
    return len(entries)


def copy_entry(source: Path, destination: Path) -> None:
    """Copy a file or directory tree, preserving structure and metadata."""
    if source.is_dir() and not source.is_symlink():
        shutil.copytree(source, destination, symlinks=True, dirs_exist_ok=True)
    elif destination.is_dir() and not destination.is_symlink():
        raise IsADirectoryError(f"Cannot replace directory {destination} with a file")
    else:
        shutil.copy2(source, destination, follow_symlinks=False)


def copy_contents(source: Path, destination: Path) -> list[Path]:
    """
    Copy every entry of source into destination.

    Returns:
        Destination paths of the copied top-level entries
    """
    copied = []
    for entry in sorted(source.iterdir()):
        target = destination / entry.name
        copy_entry(entry, target)
        copied.append(target)
    return copied


def file_digest(path: Path) -> str:
    """SHA-256 of a file's content."""
    digest = hashlib.sha256()
    with path.open("rb") as fh:
        for chunk in iter(lambda: fh.read(1 << 16), b""):
            digest.update(chunk)
    return digest.hexdigest()


def snapshot(directory: Path) -> dict[str, str]:
    """
    Map every file under a directory to its content digest.

    Keys are POSIX paths relative to the directory.
    """
    return {
        path.relative_to(directory).as_posix(): file_digest(path)
        for path in sorted(directory.rglob("*"))
        if path.is_file()
    }


def diff_snapshots(expected: dict[str, str], actual: dict[str, str]) -> list[str]:
    """
    Describe how actual differs from expected.

    Returns:
        One line per missing, unexpected or changed file (empty when equal)
    """
    problems = []
    for name in sorted(expected.keys() - actual.keys()):
        problems.append(f"missing: {name}")
    for name in sorted(actual.keys() - expected.keys()):
        problems.append(f"unexpected: {name}")
    for name in sorted(expected.keys() & actual.keys()):
        if expected[name] != actual[name]:
            problems.append(f"content differs: {name}")
    return problems
