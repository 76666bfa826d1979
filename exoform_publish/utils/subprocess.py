"""
Subprocess execution utilities with consistent error handling.

External tools are blocking calls. Failures are logged here and re-raised
so each stage can map them to its own error type.
"""

import subprocess
from collections.abc import Sequence
from pathlib import Path

from exoform_publish.utils.logging import logger


def run_command(
    cmd: Sequence[str],
    description: str | None = None,
    cwd: Path | None = None,
    timeout: float | None = None,
) -> subprocess.CompletedProcess:
    """
    Run a subprocess command with consistent logging and error handling.

    Args:
        cmd: Command and arguments to run
        description: Optional description for logging
        cwd: Working directory for the command
        timeout: Seconds to wait before giving up (None waits forever)

    Returns:
        CompletedProcess result

    Raises:
        subprocess.CalledProcessError: If the command exits non-zero
        subprocess.TimeoutExpired: If the timeout elapses
        OSError: If the command cannot be started
    """
    cmd = [str(part) for part in cmd]
    if description:
        logger.info(description)
    logger.debug(f"$ {' '.join(cmd)}")

    try:
        result = subprocess.run(
            cmd,
            check=True,
            capture_output=True,
            text=True,
            cwd=cwd,
            timeout=timeout,
        )
        if result.stdout:
            logger.debug(result.stdout)
        return result
    except subprocess.CalledProcessError as e:
        logger.error(f"Command failed: {' '.join(cmd)}")
        if e.stderr:
            logger.error(e.stderr)
        raise
    except subprocess.TimeoutExpired:
        logger.error(f"Command timed out after {timeout}s: {' '.join(cmd)}")
        raise


def run_cargo_build(
    compiler: Sequence[str],
    workspace: Path,
    platform: str,
    target_dir: Path,
    *,
    release: bool = True,
    timeout: float | None = None,
) -> subprocess.CompletedProcess:
    """
    Run `cargo build` for a target platform.

    Args:
        compiler: Compiler command prefix (e.g. ["cargo"])
        workspace: Crate directory to build in
        platform: Target triple (e.g. "wasm32-unknown-unknown")
        target_dir: Cargo target directory holding build output
        release: Build in release mode
        timeout: Seconds to wait before giving up

    Returns:
        CompletedProcess result
    """
    cmd = [
        *compiler,
        "build",
        "--target",
        platform,
        "--target-dir",
        str(target_dir),
    ]

    if release:
        cmd.append("--release")

    return run_command(
        cmd,
        f"Compiling {workspace.name} for {platform}",
        cwd=workspace,
        timeout=timeout,
    )


def run_wasm_bindgen(
    bindgen: Sequence[str],
    artifact: Path,
    out_name: str,
    out_dir: Path,
    environment: str = "web",
    timeout: float | None = None,
) -> subprocess.CompletedProcess:
    """
    Run wasm-bindgen to generate JavaScript glue for a wasm binary.

    Args:
        bindgen: Binding generator command prefix (e.g. ["wasm-bindgen"])
        artifact: Compiled wasm binary
        out_name: Base name of the generated files
        out_dir: Directory receiving the generated files
        environment: Target environment for the glue code
        timeout: Seconds to wait before giving up

    Returns:
        CompletedProcess result
    """
    cmd = [
        *bindgen,
        "--out-name",
        out_name,
        "--out-dir",
        str(out_dir),
        "--target",
        environment,
        str(artifact),
    ]

    return run_command(
        cmd,
        f"Generating bindings for {artifact.name}",
        timeout=timeout,
    )
