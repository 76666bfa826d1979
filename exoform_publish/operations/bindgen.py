"""
Binding generator invocation.

Runs wasm-bindgen on the compiled binary, writing the web module and its
JavaScript glue into the staging directory.
"""

import subprocess
from pathlib import Path

from exoform_publish.config.settings import PipelineConfig
from exoform_publish.config.targets import BuildTarget
from exoform_publish.core.errors import BindingGenerationError
from exoform_publish.utils.logging import logger
from exoform_publish.utils.subprocess import run_wasm_bindgen


def module_candidates(output_name: str) -> tuple[str, ...]:
    """Module filenames the generator may write (wasm-bindgen uses the _bg suffix)."""
    return (f"{output_name}_bg.wasm", f"{output_name}.wasm")


def find_generated_outputs(staging: Path, target: BuildTarget) -> list[Path]:
    """
    Locate the generated module and glue code.

    Returns:
        [module, glue] paths

    Raises:
        BindingGenerationError: If either file is absent
    """
    glue = staging / target.glue_name
    modules = [staging / name for name in module_candidates(target.output_name)]
    module = next((path for path in modules if path.is_file()), None)

    missing = []
    if module is None:
        missing.append(" or ".join(path.name for path in modules))
    if not glue.is_file():
        missing.append(glue.name)
    if missing:
        raise BindingGenerationError(
            f"Binding generator produced no {', '.join(missing)} in {staging}"
        )
    return [module, glue]


def generate_bindings(
    artifact: Path,
    target: BuildTarget,
    config: PipelineConfig,
) -> list[Path]:
    """
    Generate the web module and glue code for a compiled artifact.

    Args:
        artifact: Compiled wasm binary
        target: Target supplying the output name
        config: Pipeline configuration (staging dir, tool, environment)

    Returns:
        Paths of the generated module and glue files

    Raises:
        BindingGenerationError: If the generator fails or its output is missing
    """
    if not artifact.is_file():
        raise BindingGenerationError(f"Compiled artifact not found: {artifact}")

    try:
        run_wasm_bindgen(
            config.bindgen_command,
            artifact,
            target.output_name,
            config.staging_dir,
            environment=config.bindgen_environment,
            timeout=config.tool_timeout,
        )
    except subprocess.CalledProcessError as e:
        raise BindingGenerationError(
            f"Binding generator exited with status {e.returncode} for {artifact.name}",
            diagnostic=e.stderr or e.stdout or "",
        ) from e
    except subprocess.TimeoutExpired as e:
        raise BindingGenerationError(
            f"Binding generator timed out after {e.timeout}s for {artifact.name}"
        ) from e
    except OSError as e:
        raise BindingGenerationError(f"Failed to run binding generator: {e}") from e

    outputs = find_generated_outputs(config.staging_dir, target)
    for path in outputs:
        logger.info(f"  {path.name}")
    return outputs
