"""Shared fixtures: a fake command runner and a sample Node.js project."""

from __future__ import annotations

import io
import json
import tarfile
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from dockerize.common.command_runner import CommandResult, CommandRunner
from dockerize.config import DockerizeConfig


class FakeCommandRunner(CommandRunner):
    """Records invocations and simulates npm and docker."""

    def __init__(
        self,
        *,
        build_return_code: int = 0,
        push_return_code: int = 0,
        pack_return_code: int = 0,
        inspect_return_code: int = 0,
        image_size: int = 123_456_789,
        docker_available: bool = True,
    ) -> None:
        super().__init__()
        self.calls: List[List[str]] = []
        self.build_return_code = build_return_code
        self.push_return_code = push_return_code
        self.pack_return_code = pack_return_code
        self.inspect_return_code = inspect_return_code
        self.image_size = image_size
        self.docker_available = docker_available
        self.build_context: Optional[Path] = None
        self.staged_files: List[str] = []
        self.staged_dockerfile: Optional[str] = None
        self.stream_flags: List[bool] = []
        self.timeouts: List[Optional[float]] = []

    def resolve_executable(self, name: str) -> Optional[str]:
        return f"/usr/bin/{name}" if self.docker_available else None

    def run(self, command, *, cwd=None, timeout=None, env=None, stream_output=False) -> CommandResult:
        command = list(command)
        self.calls.append(command)
        self.stream_flags.append(stream_output)
        self.timeouts.append(timeout)

        if command[1:] == ["pack"]:
            return self._pack(command, Path(cwd))
        if command[1] == "build":
            return self._build(command)
        if command[1:3] == ["image", "inspect"]:
            if self.inspect_return_code:
                return make_result(command, self.inspect_return_code, stderr=f"Error: No such image: {command[3]}")
            return make_result(command, 0, stdout=f"{self.image_size}\n")
        if command[1] == "push":
            stderr = "" if self.push_return_code == 0 else "denied: requested access to the resource is denied"
            return make_result(command, self.push_return_code, stderr=stderr)
        raise AssertionError(f"Unexpected command: {command}")

    @property
    def build_calls(self) -> List[List[str]]:
        return [call for call in self.calls if call[1] == "build"]

    def _pack(self, command: List[str], cwd: Path) -> CommandResult:
        if self.pack_return_code:
            return make_result(command, self.pack_return_code, stderr="npm ERR! code EJSONPARSE")

        package_json = json.loads((cwd / "package.json").read_text())
        tarball_name = f"{package_json['name'].replace('@', '').replace('/', '-')}-{package_json['version']}.tgz"
        files: Dict[str, bytes] = {"package/package.json": json.dumps(package_json).encode()}
        for path in cwd.glob("*.js"):
            files[f"package/{path.name}"] = path.read_bytes()
        _write_tarball(cwd / tarball_name, files)
        return make_result(command, 0, stdout=f"npm notice package: {package_json['name']}\n{tarball_name}\n")

    def _build(self, command: List[str]) -> CommandResult:
        self.build_context = Path(command[2])
        self.staged_files = sorted(
            str(path.relative_to(self.build_context)) for path in self.build_context.rglob("*") if path.is_file()
        )
        dockerfile = self.build_context / "Dockerfile"
        self.staged_dockerfile = dockerfile.read_text() if dockerfile.exists() else None
        stderr = "" if self.build_return_code == 0 else "Step 3/9 : RUN npm ci\nnpm ERR! missing script"
        return make_result(command, self.build_return_code, stderr=stderr)


def make_result(command: List[str], return_code: int, stdout: str = "", stderr: str = "") -> CommandResult:
    return CommandResult(
        command=command,
        return_code=return_code,
        stdout=stdout,
        stderr=stderr,
        duration=0.01,
        timed_out=False,
        tool_available=True,
    )


def _write_tarball(path: Path, files: Dict[str, bytes]) -> None:
    with tarfile.open(path, "w:gz") as archive:
        for name, content in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            archive.addfile(info, io.BytesIO(content))


def write_package(directory: Path, **fields) -> Path:
    """Write a package.json (plus index.js) into ``directory``."""
    directory.mkdir(parents=True, exist_ok=True)
    package_json = {"name": "app", "version": "1.2.3", "main": "index.js"}
    package_json.update(fields)
    (directory / "package.json").write_text(json.dumps(package_json))
    (directory / "index.js").write_text("console.log('hello');\n")
    return directory


@pytest.fixture
def fake_runner() -> FakeCommandRunner:
    return FakeCommandRunner()


@pytest.fixture
def node_project(tmp_path: Path) -> Path:
    return write_package(tmp_path / "project", name="@org/app", version="1.2.3")


@pytest.fixture
def config() -> DockerizeConfig:
    return DockerizeConfig(
        docker_binary="docker",
        npm_binary="npm",
        default_ubuntu_version="22.04",
        tini_version="0.19.0",
        log_level="INFO",
    )
