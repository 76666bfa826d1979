"""
Pipeline configuration.

PipelineConfig carries every path and tool setting a run needs, so stages
take it as an argument instead of reading globals or the environment.
"""

from dataclasses import dataclass, replace
from pathlib import Path

from exoform_publish.config.paths import (
    ASSETS_SUBDIR,
    CARGO_TARGET_DIR,
    PROJECT_ROOT,
    STAGING_SUBDIR,
)
from exoform_publish.config.targets import BuildTarget

DEFAULT_LOCK_TIMEOUT = 60.0


def overlapping_paths(paths: dict[str, Path]) -> str | None:
    """
    Describe the first pair of directories that are equal or nested.

    Staging is cleared before every run and the server directory on every
    publish.
    """
    resolved = [(name, Path(path).resolve()) for name, path in paths.items()]
    for i, (name, path) in enumerate(resolved):
        for other_name, other in resolved[i + 1 :]:
            if path == other:
                return f"{name} and {other_name} are the same directory: {path}"
            if path in other.parents:
                return f"{other_name} ({other}) is inside {name} ({path})"
            if other in path.parents:
                return f"{name} ({path}) is inside {other_name} ({other})"
    return None


@dataclass(frozen=True)
class PipelineConfig:
    """Resolved paths and tool settings for one target's pipeline run."""

    project_root: Path
    workspace_dir: Path
    staging_dir: Path
    assets_dir: Path
    server_dir: Path
    cargo_target_dir: Path
    compiler_command: tuple[str, ...] = ("cargo",)
    bindgen_command: tuple[str, ...] = ("wasm-bindgen",)
    bindgen_environment: str = "web"
    release: bool = True
    tool_timeout: float | None = None
    atomic_publish: bool = True
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT

    def __post_init__(self):
        problem = overlapping_paths(
            {
                "staging_dir": self.staging_dir,
                "assets_dir": self.assets_dir,
                "server_dir": self.server_dir,
            }
        )
        if problem:
            raise ValueError(problem)

    @property
    def profile(self) -> str:
        """Cargo profile directory name."""
        return "release" if self.release else "debug"

    def artifact_path(self, target: BuildTarget) -> Path:
        """Deterministic location of the compiled binary for a target."""
        return self.cargo_target_dir / target.platform / self.profile / target.artifact_name

    @classmethod
    def for_target(
        cls,
        target: BuildTarget,
        project_root: Path = PROJECT_ROOT,
        **overrides,
    ) -> "PipelineConfig":
        """
        Build the default layout for a target under project_root.

        Args:
            target: Target whose workspace and server_dir are used
            project_root: Root of the checkout
            **overrides: Field values replacing the defaults; None values are ignored

        Returns:
            PipelineConfig
        """
        root = Path(project_root)
        workspace = root / target.workspace
        config = cls(
            project_root=root,
            workspace_dir=workspace,
            staging_dir=workspace / STAGING_SUBDIR,
            assets_dir=workspace / ASSETS_SUBDIR,
            server_dir=root / target.server_dir,
            cargo_target_dir=root / CARGO_TARGET_DIR,
        )
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(config, **changes) if changes else config
