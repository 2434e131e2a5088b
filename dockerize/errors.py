"""
Dockerize exception classes.

All errors raised by the build pipeline inherit from DockerizeError so callers
can handle them uniformly. Filesystem failures are not wrapped; they surface as
the builtin OSError.

Usage:
    from dockerize.errors import ValidationError, NotFoundError

    if not tag_is_valid:
        raise ValidationError(f"Invalid image name: {tag}")
"""
from __future__ import annotations

from typing import Optional, Sequence


class DockerizeError(Exception):
    """
    Base exception for all Dockerize errors.

    Attributes:
        message: Human-readable error message
        code: Error code for programmatic handling
    """

    def __init__(self, message: str, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Serialize the error to a dictionary."""
        return {
            "error": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code='{self.code}', message='{self.message}')"


class ValidationError(DockerizeError):
    """
    Raised when a build request field is malformed or a computed tag is invalid.

    Example:
        raise ValidationError("Expected `tag` to be of type `string`", field="tag")
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class NotFoundError(DockerizeError):
    """
    Raised when a required file or resource does not exist.

    Use this for:
    - Missing package.json
    - Missing custom Dockerfile
    - Package without an entry point
    - Missing docker executable
    """

    def __init__(self, message: str):
        super().__init__(message, code="NOT_FOUND")


class TemplateError(DockerizeError):
    """
    Raised when the Dockerfile template is malformed or references data it was not given.
    """

    def __init__(self, message: str):
        super().__init__(message, code="TEMPLATE_ERROR")


class ExternalToolError(DockerizeError):
    """
    Raised when an external process (npm, docker) or lookup fails.

    Attributes:
        command: The command that was executed, if any
        return_code: Exit status of the process, None if it never ran to completion
        stderr_tail: Last lines of the process' error output
    """

    def __init__(
        self,
        message: str,
        command: Optional[Sequence[str]] = None,
        return_code: Optional[int] = None,
        stderr_tail: str = "",
        code: str = "EXTERNAL_TOOL_ERROR",
    ):
        super().__init__(message, code=code)
        self.command = list(command) if command else []
        self.return_code = return_code
        self.stderr_tail = stderr_tail

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update(
            {
                "command": self.command,
                "return_code": self.return_code,
                "stderr_tail": self.stderr_tail,
            }
        )
        return data


class PushError(ExternalToolError):
    """
    Raised when `docker push` fails.

    Kept apart from build failures since the image still exists locally.
    """

    def __init__(
        self,
        message: str,
        command: Optional[Sequence[str]] = None,
        return_code: Optional[int] = None,
        stderr_tail: str = "",
    ):
        super().__init__(message, command=command, return_code=return_code, stderr_tail=stderr_tail, code="PUSH_ERROR")
