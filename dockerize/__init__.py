"""Dockerize - build Docker images for Node.js packages.

Example:
    >>> from dockerize import dockerize
    >>> result = dockerize({"cwd": "path/to/project", "labels": ["team=web"]})
    >>> print(result.tag, result.image_size_display)
"""
import logging
from typing import Any, Mapping, Optional, Union

from .common.models import BuildRequest, BuildResult, PackageDescriptor
from .config import DockerizeConfig
from .core.dockerizer import Dockerizer
from .errors import DockerizeError, ExternalToolError, NotFoundError, PushError, TemplateError, ValidationError

__version__ = "0.1.0"


def dockerize(
    options: Union[BuildRequest, Mapping[str, Any]],
    config: Optional[DockerizeConfig] = None,
    logger: Optional[logging.Logger] = None,
) -> BuildResult:
    """Build (and optionally push) an image for the package described by ``options``."""
    return Dockerizer(config=config, logger=logger).run(options)


__all__ = [
    "dockerize",
    "Dockerizer",
    "DockerizeConfig",
    # Models
    "BuildRequest",
    "BuildResult",
    "PackageDescriptor",
    # Errors
    "DockerizeError",
    "ValidationError",
    "NotFoundError",
    "ExternalToolError",
    "PushError",
    "TemplateError",
]
