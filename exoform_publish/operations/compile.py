"""
Compiler invocation.

Builds the client crate for the wasm platform in release mode and
locates the resulting binary.
"""

import subprocess
from pathlib import Path

from exoform_publish.config.settings import PipelineConfig
from exoform_publish.config.targets import BuildTarget
from exoform_publish.core.errors import CompilationError
from exoform_publish.utils.logging import logger
from exoform_publish.utils.subprocess import run_cargo_build


def compile_target(target: BuildTarget, config: PipelineConfig) -> Path:
    """
    Compile a build target.

    Args:
        target: Target to compile
        config: Pipeline configuration

    Returns:
        Path of the compiled artifact

    Raises:
        CompilationError: If the compiler fails, cannot run, times out,
            or leaves no artifact behind
    """
    if not config.workspace_dir.is_dir():
        raise CompilationError(f"Client workspace not found: {config.workspace_dir}")

    try:
        run_cargo_build(
            config.compiler_command,
            config.workspace_dir,
            target.platform,
            config.cargo_target_dir,
            release=config.release,
            timeout=config.tool_timeout,
        )
    except subprocess.CalledProcessError as e:
        raise CompilationError(
            f"Compiler exited with status {e.returncode} for {target.name}",
            diagnostic=e.stderr or e.stdout or "",
        ) from e
    except subprocess.TimeoutExpired as e:
        raise CompilationError(
            f"Compiler timed out after {e.timeout}s for {target.name}"
        ) from e
    except OSError as e:
        raise CompilationError(f"Failed to run compiler: {e}") from e

    artifact = config.artifact_path(target)
    if not artifact.is_file():
        raise CompilationError(f"Compiler reported success but produced no artifact at {artifact}")

    size = artifact.stat().st_size / 1024 / 1024
    logger.info(f"Compiled {artifact.name} ({size:.2f} MB)")
    return artifact
