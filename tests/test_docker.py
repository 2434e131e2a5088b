"""Unit tests for the docker build/inspect/push helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from conftest import FakeCommandRunner, make_result
from dockerize.errors import ExternalToolError, NotFoundError, PushError
from dockerize.runtime.docker import DockerImageBuilder


def test_build_invokes_docker_with_context_and_args(tmp_path: Path) -> None:
    runner = FakeCommandRunner()
    builder = DockerImageBuilder(runner)

    builder.build(context_dir=tmp_path, build_args=["--rm", "--tag=app:1.0.0"])

    assert runner.calls == [["docker", "build", str(tmp_path), "--rm", "--tag=app:1.0.0"]]


def test_build_streams_only_when_requested(tmp_path: Path) -> None:
    runner = FakeCommandRunner()
    builder = DockerImageBuilder(runner)

    builder.build(context_dir=tmp_path, build_args=[])
    builder.build(context_dir=tmp_path, build_args=[], stream_output=True)

    assert runner.stream_flags == [False, True]


def test_build_failure_carries_stderr_tail(tmp_path: Path) -> None:
    builder = DockerImageBuilder(FakeCommandRunner(build_return_code=1))

    with pytest.raises(ExternalToolError) as exc_info:
        builder.build(context_dir=tmp_path, build_args=[])

    error = exc_info.value
    assert not isinstance(error, PushError)
    assert error.return_code == 1
    assert "npm ERR! missing script" in error.stderr_tail
    assert error.command[:2] == ["docker", "build"]


def test_image_size_parses_inspect_output() -> None:
    runner = FakeCommandRunner(image_size=2048)
    builder = DockerImageBuilder(runner)

    assert builder.image_size("app:1.0.0") == 2048
    assert runner.calls == [["docker", "image", "inspect", "app:1.0.0", "--format", "{{.Size}}"]]
    assert runner.timeouts == [30]


def test_image_size_uses_given_timeout() -> None:
    runner = FakeCommandRunner()

    DockerImageBuilder(runner).image_size("app:1.0.0", timeout=5)

    assert runner.timeouts == [5]


def test_image_size_failure_reports_stderr() -> None:
    runner = FakeCommandRunner(inspect_return_code=1)

    with pytest.raises(ExternalToolError) as exc_info:
        DockerImageBuilder(runner).image_size("app:1.0.0")

    assert "Docker image inspect failed with exit code 1" in exc_info.value.message
    assert "No such image: app:1.0.0" in exc_info.value.stderr_tail


def test_image_size_rejects_unparseable_output() -> None:
    class GarbageRunner(FakeCommandRunner):
        def run(self, command, **kwargs):
            return make_result(list(command), 0, stdout="<no value>\n")

    with pytest.raises(ExternalToolError):
        DockerImageBuilder(GarbageRunner()).image_size("app:1.0.0")


def test_push_failure_is_a_push_error() -> None:
    builder = DockerImageBuilder(FakeCommandRunner(push_return_code=1))

    with pytest.raises(PushError) as exc_info:
        builder.push("org/app:1.0.0")

    assert exc_info.value.code == "PUSH_ERROR"
    assert "denied" in exc_info.value.stderr_tail


def test_push_success() -> None:
    runner = FakeCommandRunner()

    DockerImageBuilder(runner).push("org/app:1.0.0")

    assert runner.calls == [["docker", "push", "org/app:1.0.0"]]


def test_missing_tool_is_reported() -> None:
    class MissingToolRunner(FakeCommandRunner):
        def run(self, command, **kwargs):
            result = make_result(list(command), 0)
            result.return_code = None
            result.tool_available = False
            return result

    with pytest.raises(ExternalToolError) as exc_info:
        DockerImageBuilder(MissingToolRunner(), docker_binary="podman").image_size("app:1")

    assert "podman is not available" in exc_info.value.message


def test_ensure_available() -> None:
    assert DockerImageBuilder(FakeCommandRunner()).ensure_available() == "/usr/bin/docker"

    with pytest.raises(NotFoundError):
        DockerImageBuilder(FakeCommandRunner(docker_available=False)).ensure_available()
