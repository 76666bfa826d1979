"""Shared pytest fixtures."""

import sys
from pathlib import Path

import pytest

from exoform_publish.config.settings import PipelineConfig
from exoform_publish.config.targets import BuildTarget

FAKE_CARGO = r'''
import pathlib
import sys

args = sys.argv[1:]
target_dir = pathlib.Path(args[args.index("--target-dir") + 1])
platform = args[args.index("--target") + 1]
profile = "release" if "--release" in args else "debug"
for name in @ARTIFACTS@:
    out = target_dir / platform / profile / name
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(b"\0asm " + name.encode())
print("Finished release target(s)")
'''

FAILING_CARGO = r'''
import sys

sys.stderr.write("error: undefined symbol: draw_frame\n")
sys.exit(1)
'''

SILENT_CARGO = r'''
print("Finished release target(s)")
'''

FAKE_BINDGEN = r'''
import pathlib
import sys

args = sys.argv[1:]
out_dir = pathlib.Path(args[args.index("--out-dir") + 1])
name = args[args.index("--out-name") + 1]
artifact = pathlib.Path(args[-1])
out_dir.mkdir(parents=True, exist_ok=True)
(out_dir / (name + ".wasm")).write_bytes(artifact.read_bytes())
(out_dir / (name + ".js")).write_text("import init from './" + name + ".wasm';\n")
'''

EMPTY_BINDGEN = r'''
import sys

sys.exit(0)
'''

FAILING_BINDGEN = r'''
import sys

sys.stderr.write("error: failed to parse wasm: magic header not detected\n")
sys.exit(2)
'''


@pytest.fixture
def target():
    """A target laid out like the sdfbox client."""
    return BuildTarget("sdfbox-client", workspace="client", server_dir="server/assets")


@pytest.fixture
def project(tmp_path):
    """
    Project tree with a client workspace, two static assets and a server
    directory holding a previously published build.
    """
    root = tmp_path / "project"
    assets = root / "client" / "assets"
    assets.mkdir(parents=True)
    (assets / "a.png").write_bytes(b"\x89PNG fake image")
    (assets / "b.json").write_text('{"scene": "box"}')

    server = root / "server" / "assets"
    server.mkdir(parents=True)
    (server / "old-client.wasm").write_bytes(b"\0asm previous build")
    (server / "old-client.js").write_text("// previous glue")
    (server / "a.png").write_bytes(b"previous image")
    return root


@pytest.fixture
def make_tool(tmp_path):
    """Write a Python script standing in for an external tool; return its command."""
    tools = tmp_path / "tools"
    tools.mkdir(exist_ok=True)

    def _make_tool(name: str, source: str) -> tuple[str, ...]:
        script = tools / f"{name}.py"
        script.write_text(source)
        return (sys.executable, str(script))

    return _make_tool


@pytest.fixture
def make_cargo(make_tool):
    """Fake cargo writing the named binaries into the target directory."""

    def _make_cargo(*artifact_names: str) -> tuple[str, ...]:
        return make_tool("cargo", FAKE_CARGO.replace("@ARTIFACTS@", repr(list(artifact_names))))

    return _make_cargo


@pytest.fixture
def fake_cargo(make_cargo, target):
    return make_cargo(target.artifact_name)


@pytest.fixture
def fake_bindgen(make_tool):
    return make_tool("wasm-bindgen", FAKE_BINDGEN)


@pytest.fixture
def failing_cargo(make_tool):
    return make_tool("failing-cargo", FAILING_CARGO)


@pytest.fixture
def silent_cargo(make_tool):
    return make_tool("silent-cargo", SILENT_CARGO)


@pytest.fixture
def empty_bindgen(make_tool):
    return make_tool("empty-bindgen", EMPTY_BINDGEN)


@pytest.fixture
def failing_bindgen(make_tool):
    return make_tool("failing-bindgen", FAILING_BINDGEN)


@pytest.fixture
def config(project, target, fake_cargo, fake_bindgen):
    """Pipeline configuration wired to the fake tools."""
    return PipelineConfig.for_target(
        target,
        project,
        compiler_command=fake_cargo,
        bindgen_command=fake_bindgen,
        lock_timeout=1.0,
    )


@pytest.fixture
def read_tree():
    """Map relative file paths under a directory to their bytes."""

    def _read_tree(directory: Path) -> dict[str, bytes]:
        return {
            path.relative_to(directory).as_posix(): path.read_bytes()
            for path in sorted(directory.rglob("*"))
            if path.is_file()
        }

    return _read_tree
