"""
Pipeline run states and results.
"""

from dataclasses import dataclass, field
from enum import Enum

from exoform_publish.config.targets import BuildTarget
from exoform_publish.core.errors import PipelineError


class RunState(Enum):
    """Stage reached by a pipeline run. PUBLISHED and FAILED are terminal."""

    START = "start"
    PREPARED = "prepared"
    COMPILED = "compiled"
    BOUND = "bound"
    ASSETS_MERGED = "assets-merged"
    PUBLISHED = "published"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (RunState.PUBLISHED, RunState.FAILED)


@dataclass
class PipelineResult:
    """Outcome of one target's pipeline run."""

    target: BuildTarget
    state: RunState = RunState.START
    completed: list[str] = field(default_factory=list)
    failed_stage: str | None = None
    error: PipelineError | None = None

    @property
    def ok(self) -> bool:
        return self.state is RunState.PUBLISHED

    def advance(self, stage: str, state: RunState) -> None:
        """Record a successful stage."""
        if self.state.terminal:
            raise RuntimeError(f"run for {self.target.name} already {self.state.value}")
        self.completed.append(stage)
        self.state = state

    def fail(self, stage: str, error: PipelineError) -> None:
        """Record the failing stage. No later stage may run."""
        if self.state.terminal:
            raise RuntimeError(f"run for {self.target.name} already {self.state.value}")
        self.failed_stage = stage
        self.error = error
        self.state = RunState.FAILED

    def describe(self) -> str:
        """One-line summary for the operator."""
        if self.ok:
            return f"{self.target.name}: published"
        if self.error is None:
            return f"{self.target.name}: {self.state.value}"
        return f"{self.target.name}: {self.failed_stage} failed: {self.error}"
