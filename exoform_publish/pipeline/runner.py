"""
Build pipeline orchestration.

Runs the stages for one build target in order and stops at the first
failure, before the published asset set is touched.
"""

from collections.abc import Callable, Iterable
from pathlib import Path

from exoform_publish.config.settings import PipelineConfig
from exoform_publish.config.targets import BuildTarget
from exoform_publish.core.errors import PipelineError
from exoform_publish.operations.assets import merge_assets
from exoform_publish.operations.bindgen import generate_bindings
from exoform_publish.operations.compile import compile_target
from exoform_publish.operations.publish import publish
from exoform_publish.operations.workspace import prepare_staging_dir
from exoform_publish.pipeline.state import PipelineResult, RunState
from exoform_publish.utils.logging import logger


class PipelineRun:
    """
    One pipeline run for one build target.

    Pipeline:
      1. prepare  - Create and empty the staging directory
      2. compile  - Build the wasm binary with cargo
      3. bindgen  - Generate the web module and JS glue into staging
      4. assets   - Copy static assets into staging
      5. publish  - Replace the server asset directory with staging
    """

    def __init__(self, target: BuildTarget, config: PipelineConfig):
        self.target = target
        self.config = config
        self.artifact: Path | None = None
        self.published: dict[str, str] = {}

    def prepare(self) -> None:
        prepare_staging_dir(self.config.staging_dir)

    def compile(self) -> None:
        self.artifact = compile_target(self.target, self.config)

    def bind(self) -> None:
        generate_bindings(self.artifact, self.target, self.config)

    def merge_assets(self) -> None:
        merge_assets(self.config.assets_dir, self.config.staging_dir)

    def publish(self) -> None:
        self.published = publish(
            self.config.staging_dir,
            self.config.server_dir,
            atomic=self.config.atomic_publish,
            lock_timeout=self.config.lock_timeout,
        )

    def steps(self) -> list[tuple[str, RunState, Callable[[], None]]]:
        return [
            ("prepare", RunState.PREPARED, self.prepare),
            ("compile", RunState.COMPILED, self.compile),
            ("bindgen", RunState.BOUND, self.bind),
            ("assets", RunState.ASSETS_MERGED, self.merge_assets),
            ("publish", RunState.PUBLISHED, self.publish),
        ]

    def run(self) -> PipelineResult:
        """Run every stage, stopping at the first failure."""
        result = PipelineResult(self.target)
        steps = self.steps()

        logger.info(f"Building {self.target.name}")

        for i, (name, state, func) in enumerate(steps, 1):
            logger.info(f"[{i}/{len(steps)}] Running {name}")
            try:
                func()
            except PipelineError as e:
                logger.error(f"{name} failed: {e.message}")
                result.fail(name, e)
                return result
            result.advance(name, state)
            logger.info(f"{name} completed")

        logger.info(f"{self.target.name} published to {self.config.server_dir}/")
        return result


def run_pipeline(target: BuildTarget, config: PipelineConfig) -> PipelineResult:
    """Run the full pipeline for one target."""
    return PipelineRun(target, config).run()


def run_targets(
    targets: Iterable[BuildTarget],
    make_config: Callable[[BuildTarget], PipelineConfig],
) -> list[PipelineResult]:
    """
    Run the pipeline for several targets in sequence.

    Stops after the first target that fails.

    Args:
        targets: Targets to build
        make_config: Builds the configuration for each target

    Returns:
        Results of the targets that ran, in order
    """
    results = []
    for target in targets:
        result = run_pipeline(target, make_config(target))
        results.append(result)
        if not result.ok:
            break
    return results
