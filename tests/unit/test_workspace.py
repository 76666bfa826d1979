"""Tests for staging directory preparation."""

import pytest

from exoform_publish.core.errors import FilesystemError
from exoform_publish.operations import workspace
from exoform_publish.operations.workspace import prepare_staging_dir


def test_creates_missing_directory_with_parents(tmp_path):
    staging = tmp_path / "client" / "nested" / "build"
    prepare_staging_dir(staging)
    assert staging.is_dir()
    assert list(staging.iterdir()) == []


def test_removes_leftover_files(tmp_path):
    """Test a leftover old.wasm from a prior run is gone."""
    staging = tmp_path / "build"
    staging.mkdir()
    (staging / "old.wasm").write_bytes(b"\0asm")
    (staging / "old.js").write_text("// glue")
    nested = staging / "textures"
    nested.mkdir()
    (nested / "stone.png").write_bytes(b"png")

    prepare_staging_dir(staging)

    assert staging.is_dir()
    assert not (staging / "old.wasm").exists()
    assert list(staging.iterdir()) == []


def test_removes_symlinks_without_following(tmp_path):
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "keep.txt").write_text("keep")
    staging = tmp_path / "build"
    staging.mkdir()
    (staging / "link").symlink_to(outside, target_is_directory=True)

    prepare_staging_dir(staging)

    assert list(staging.iterdir()) == []
    assert (outside / "keep.txt").read_text() == "keep"


def test_empty_directory_is_fine(tmp_path):
    staging = tmp_path / "build"
    staging.mkdir()
    prepare_staging_dir(staging)
    prepare_staging_dir(staging)
    assert staging.is_dir()


def test_path_is_a_file(tmp_path):
    staging = tmp_path / "build"
    staging.write_text("not a directory")
    with pytest.raises(FilesystemError, match="not a directory"):
        prepare_staging_dir(staging)


def test_parent_is_a_file(tmp_path):
    (tmp_path / "client").write_text("not a directory")
    with pytest.raises(FilesystemError):
        prepare_staging_dir(tmp_path / "client" / "build")


def test_clear_denied(tmp_path, monkeypatch):
    """Test a staging directory that cannot be emptied stops the run."""
    staging = tmp_path / "build"
    staging.mkdir()
    (staging / "old.wasm").write_bytes(b"\0asm")

    def deny(path):
        raise PermissionError(13, "Permission denied", str(path / "old.wasm"))

    monkeypatch.setattr(workspace, "clear_directory", deny)

    with pytest.raises(FilesystemError, match="Permission denied"):
        prepare_staging_dir(staging)
