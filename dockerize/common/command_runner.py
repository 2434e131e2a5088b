from __future__ import annotations

import logging
import shutil
import subprocess
import threading
import time
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Mapping, Optional, Sequence


@dataclass(slots=True)
class CommandResult:
    """Represents the outcome of an external command execution."""

    command: Sequence[str]
    return_code: Optional[int]
    stdout: str
    stderr: str
    duration: float
    timed_out: bool
    tool_available: bool
    exception: Optional[BaseException] = None

    def succeeded(self) -> bool:
        """Return True when the command finished successfully."""
        return self.return_code == 0 and not self.timed_out and self.tool_available

    def stderr_tail(self, lines: int = 20) -> str:
        """Return the last ``lines`` lines of stderr, falling back to stdout."""
        output = self.stderr.strip() or self.stdout.strip()
        return "\n".join(output.splitlines()[-lines:])

    def last_stdout_line(self) -> str:
        """Return the final non-empty line written to stdout."""
        lines = [line for line in self.stdout.splitlines() if line.strip()]
        return lines[-1].strip() if lines else ""


class CommandRunner:
    """Thin wrapper over subprocess that captures execution metadata."""

    def __init__(self, logger: Optional[logging.Logger] = None, tail_lines: int = 200) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self.tail_lines = tail_lines

    def resolve_executable(self, name: str) -> Optional[str]:
        """Return the absolute path of ``name`` on PATH, or None."""
        path = shutil.which(name)
        self.logger.debug("Resolved executable %s -> %s", name, path)
        return path

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Optional[Path] = None,
        timeout: Optional[float] = None,
        env: Optional[Mapping[str, str]] = None,
        stream_output: bool = False,
    ) -> CommandResult:
        """
        Execute a command and capture stdout, stderr, timings, and failures.

        With ``stream_output`` the process' stdout and stderr are merged and
        forwarded line by line to the logger at DEBUG level; only a tail of the
        output is kept on the result.
        """
        start = time.time()
        try:
            self.logger.debug("Executing command: %s (cwd=%s)", " ".join(command), cwd)
            if stream_output:
                return self._run_streaming(command, cwd=cwd, timeout=timeout, env=env, start=start)
            completed = subprocess.run(
                list(command),
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                stdin=subprocess.DEVNULL,
                timeout=timeout,
                cwd=str(cwd) if cwd else None,
                env=dict(env) if env else None,
            )
            duration = time.time() - start
            return CommandResult(
                command=command,
                return_code=completed.returncode,
                stdout=completed.stdout,
                stderr=completed.stderr,
                duration=duration,
                timed_out=False,
                tool_available=True,
            )
        except subprocess.TimeoutExpired as exc:
            duration = time.time() - start
            self.logger.warning("Command timed out after %.2fs: %s", duration, " ".join(command))
            return CommandResult(
                command=command,
                return_code=None,
                stdout=_as_text(exc.stdout),
                stderr=_as_text(exc.stderr),
                duration=duration,
                timed_out=True,
                tool_available=True,
                exception=exc,
            )
        except FileNotFoundError as exc:
            duration = time.time() - start
            self.logger.error("Command not found: %s", command[0])
            return CommandResult(
                command=command,
                return_code=None,
                stdout="",
                stderr=f"Command not found: {command[0]}",
                duration=duration,
                timed_out=False,
                tool_available=False,
                exception=exc,
            )

    def _run_streaming(
        self,
        command: Sequence[str],
        *,
        cwd: Optional[Path],
        timeout: Optional[float],
        env: Optional[Mapping[str, str]],
        start: float,
    ) -> CommandResult:
        tail: deque[str] = deque(maxlen=self.tail_lines)
        with subprocess.Popen(
            list(command),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="utf-8",
            errors="replace",
            bufsize=1,
            cwd=str(cwd) if cwd else None,
            env=dict(env) if env else None,
        ) as process:
            reader = threading.Thread(
                target=self._forward_lines,
                args=(process.stdout, tail),
                name="command-output",
                daemon=True,
            )
            reader.start()
            try:
                return_code = process.wait(timeout=timeout)
                timed_out = False
            except subprocess.TimeoutExpired:
                process.kill()
                process.wait()
                return_code = None
                timed_out = True
                self.logger.warning("Command timed out after %.2fs: %s", time.time() - start, " ".join(command))
            reader.join()

        output = "\n".join(tail)
        return CommandResult(
            command=command,
            return_code=return_code,
            stdout=output,
            stderr=output if return_code else "",
            duration=time.time() - start,
            timed_out=timed_out,
            tool_available=True,
        )

    def _forward_lines(self, pipe: IO[str], tail: deque) -> None:
        for line in pipe:
            line = line.rstrip("\n")
            tail.append(line)
            self.logger.debug(line)


def _as_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value
