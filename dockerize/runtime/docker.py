"""Docker build, inspect and push helpers used by the pipeline."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from ..common.command_runner import CommandResult, CommandRunner
from ..errors import ExternalToolError, NotFoundError, PushError


class DockerImageBuilder:
    """Build Docker images, inspect them and push them to a registry."""

    def __init__(
        self,
        command_runner: CommandRunner,
        docker_binary: str = "docker",
        logger: Optional[logging.Logger] = None,
        tail_lines: int = 20,
    ) -> None:
        self.command_runner = command_runner
        self.docker_binary = docker_binary
        self.logger = logger or logging.getLogger(__name__)
        self.tail_lines = tail_lines

    def ensure_available(self) -> str:
        """
        Make sure the docker executable can be found on PATH.

        Raises:
            NotFoundError: If docker is not installed
        """
        path = self.command_runner.resolve_executable(self.docker_binary)
        if not path:
            raise NotFoundError(f'Unable to find the "{self.docker_binary}" executable. Is Docker installed?')
        return path

    def build_command(self, context_dir: Path, build_args: Sequence[str]) -> List[str]:
        return [self.docker_binary, "build", str(context_dir), *build_args]

    def build(
        self,
        *,
        context_dir: Path,
        build_args: Sequence[str],
        stream_output: bool = False,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        """
        Run `docker build` against the staged build context.

        Args:
            context_dir: Directory holding the Dockerfile and package files
            build_args: Flags produced by the build plan
            stream_output: Forward docker's output to the logger as it runs
            timeout: Seconds to wait before giving up (None waits indefinitely)

        Raises:
            ExternalToolError: If docker is missing, times out, or exits non-zero
        """
        build_cmd = self.build_command(context_dir, build_args)
        self.logger.debug("Building Docker image: %s", " ".join(build_cmd))
        build_result = self.command_runner.run(build_cmd, timeout=timeout, stream_output=stream_output)
        self._raise_for_result(build_result, "Docker build", ExternalToolError)
        self.logger.debug("Build completed in %.1fs", build_result.duration)
        return build_result

    def image_size(self, image_name: str, timeout: Optional[float] = 30) -> int:
        """
        Return the size of a local image in bytes.

        Args:
            image_name: Tag of the local image
            timeout: Seconds to wait for `docker image inspect`

        Raises:
            ExternalToolError: If the image cannot be inspected
        """
        size_result = self.command_runner.run(
            [self.docker_binary, "image", "inspect", image_name, "--format", "{{.Size}}"],
            timeout=timeout,
        )
        self._raise_for_result(size_result, "Docker image inspect", ExternalToolError)

        try:
            return int(size_result.stdout.strip())
        except ValueError:
            raise ExternalToolError(
                f"Could not parse docker inspect output for {image_name}: {size_result.stdout.strip()!r}",
                command=size_result.command,
                return_code=size_result.return_code,
            ) from None

    def push(
        self,
        image_name: str,
        *,
        stream_output: bool = False,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        """
        Push an image to its registry. Assumes `docker login` has been run.

        Raises:
            PushError: If the push fails for any reason
        """
        push_cmd = [self.docker_binary, "push", image_name]
        self.logger.debug("Pushing Docker image: %s", " ".join(push_cmd))
        push_result = self.command_runner.run(push_cmd, timeout=timeout, stream_output=stream_output)
        self._raise_for_result(push_result, "Docker push", PushError)
        return push_result

    def _raise_for_result(self, result: CommandResult, action: str, error_class: type) -> None:
        if result.succeeded():
            return

        if not result.tool_available:
            message = f"{action} failed: {self.docker_binary} is not available - install Docker"
        elif result.timed_out:
            message = f"{action} timed out after {result.duration:.0f}s"
        else:
            message = f"{action} failed with exit code {result.return_code}"

        stderr_tail = result.stderr_tail(self.tail_lines)
        self.logger.debug("%s output:\n%s", action, stderr_tail)
        raise error_class(
            message,
            command=result.command,
            return_code=result.return_code,
            stderr_tail=stderr_tail,
        )
