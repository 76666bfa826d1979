"""Tests for build target and pipeline configuration."""

from pathlib import Path

import pytest

from exoform_publish.config.settings import PipelineConfig
from exoform_publish.config.targets import (
    TARGETS,
    WASM_PLATFORM,
    BuildTarget,
    UnknownTargetError,
    get_target,
)


def test_build_target_defaults():
    """Test output name and platform defaults."""
    target = BuildTarget("exoform-client")
    assert target.output_name == "exoform-client"
    assert target.platform == WASM_PLATFORM
    assert target.artifact_name == "exoform-client.wasm"
    assert target.glue_name == "exoform-client.js"


def test_build_target_output_name_override():
    """Test generated files follow output_name, the binary follows name."""
    target = BuildTarget("exoform-client", output_name="client")
    assert target.artifact_name == "exoform-client.wasm"
    assert target.glue_name == "client.js"


def test_build_target_requires_name():
    with pytest.raises(ValueError):
        BuildTarget("")


def test_registered_targets():
    """Test the registry holds the known client variants."""
    assert "exoform-client" in TARGETS
    assert "sdfbox-client" in TARGETS
    assert get_target("exoform-client") is TARGETS["exoform-client"]


def test_unknown_target():
    with pytest.raises(UnknownTargetError, match="nope"):
        get_target("nope")


def test_config_default_layout():
    """Test the default layout mirrors the client/server checkout."""
    target = get_target("exoform-client")
    config = PipelineConfig.for_target(target, Path("/repo"))

    assert config.workspace_dir == Path("/repo/client")
    assert config.staging_dir == Path("/repo/client/build")
    assert config.assets_dir == Path("/repo/client/assets")
    assert config.server_dir == Path("/repo/server/assets")
    assert config.cargo_target_dir == Path("/repo/target")
    assert config.artifact_path(target) == Path(
        "/repo/target/wasm32-unknown-unknown/release/exoform-client.wasm"
    )


def test_config_overrides_ignore_none():
    target = get_target("exoform-client")
    config = PipelineConfig.for_target(
        target,
        Path("/repo"),
        server_dir=Path("/srv/www"),
        tool_timeout=None,
        atomic_publish=False,
    )
    assert config.server_dir == Path("/srv/www")
    assert config.tool_timeout is None
    assert config.atomic_publish is False
    assert config.staging_dir == Path("/repo/client/build")


def test_config_debug_profile():
    target = get_target("exoform-client")
    config = PipelineConfig.for_target(target, Path("/repo"), release=False)
    assert config.artifact_path(target).parent.name == "debug"


def test_config_rejects_staging_equal_to_server():
    """Test staging that is the server directory is refused before anything is cleared."""
    target = get_target("exoform-client")
    with pytest.raises(ValueError, match="same directory"):
        PipelineConfig.for_target(target, Path("/repo"), staging_dir=Path("/repo/server/assets"))


def test_config_rejects_server_inside_staging():
    target = get_target("exoform-client")
    with pytest.raises(ValueError, match="server_dir .* is inside staging_dir"):
        PipelineConfig.for_target(
            target, Path("/repo"), server_dir=Path("/repo/client/build/public")
        )


def test_config_rejects_assets_equal_to_staging():
    target = get_target("exoform-client")
    with pytest.raises(ValueError, match="staging_dir and assets_dir"):
        PipelineConfig.for_target(target, Path("/repo"), assets_dir=Path("/repo/client/build"))
