"""
Pipeline error taxonomy.

Every stage raises one of these, chained to the underlying OSError or
subprocess error. The diagnostic attribute holds tool output verbatim.
"""


class PipelineError(Exception):
    """Base class for stage failures."""

    stage = "pipeline"

    def __init__(self, message: str, diagnostic: str | None = None):
        super().__init__(message)
        self.message = message
        self.diagnostic = diagnostic

    def __str__(self) -> str:
        if self.diagnostic:
            return f"{self.message}\n{self.diagnostic}"
        return self.message


class FilesystemError(PipelineError):
    """Staging or asset copy I/O failed."""

    stage = "filesystem"


class CompilationError(PipelineError):
    """The compiler failed or produced no artifact."""

    stage = "compile"


class BindingGenerationError(PipelineError):
    """The binding generator failed or produced no output."""

    stage = "bindgen"


class PublishError(PipelineError):
    """Replacing the published asset set failed."""

    stage = "publish"
