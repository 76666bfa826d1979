"""
Build target definitions.

Each client variant is one BuildTarget; every target runs through the
same pipeline shape.
"""

from dataclasses import dataclass, field

from exoform_publish.config.paths import CLIENT_WORKSPACE, SERVER_ASSETS_DIR

WASM_PLATFORM = "wasm32-unknown-unknown"


class UnknownTargetError(KeyError):
    """Raised when a target name is not registered."""

    def __str__(self) -> str:
        return f"unknown build target: {self.args[0]!r} (known: {', '.join(TARGETS)})"


@dataclass(frozen=True)
class BuildTarget:
    """
    One client variant to compile and publish.

    output_name defaults to the target name.
    """

    name: str
    output_name: str = ""
    platform: str = WASM_PLATFORM
    workspace: str = CLIENT_WORKSPACE
    server_dir: str = SERVER_ASSETS_DIR
    description: str = field(default="", compare=False)

    def __post_init__(self):
        if not self.name:
            raise ValueError("build target name must not be empty")
        if not self.output_name:
            object.__setattr__(self, "output_name", self.name)

    @property
    def artifact_name(self) -> str:
        """Filename of the compiled binary."""
        return f"{self.name}.wasm"

    @property
    def glue_name(self) -> str:
        """Filename of the generated JavaScript glue."""
        return f"{self.output_name}.js"


TARGETS: dict[str, BuildTarget] = {
    target.name: target
    for target in (
        BuildTarget(
            "exoform-client",
            description="Exoform graph editor client",
        ),
        BuildTarget(
            "sdfbox-client",
            workspace="sdfbox/client",
            server_dir="sdfbox/server/assets",
            description="SDF sandbox client",
        ),
    )
}


def get_target(name: str) -> BuildTarget:
    """Look up a registered target by name."""
    try:
        return TARGETS[name]
    except KeyError:
        raise UnknownTargetError(name) from None
