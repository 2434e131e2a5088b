"""
Dockerfile resolution.

Exactly one source is chosen per build, in strict order:

1. ``CustomDockerfile`` - a path given with ``--dockerfile``; it must exist.
2. ``ContextDockerfile`` - a ``Dockerfile`` in the project directory.
3. ``GeneratedDockerfile`` - the bundled template rendered with the build data.

``resolve_dockerfile_source`` only decides; ``write_dockerfile`` performs the
single copy or render into the staging area.
"""
from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from ..errors import NotFoundError
from .templates import render_template

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CustomDockerfile:
    path: Path
    kind: str = field(default="custom", init=False)


@dataclass(frozen=True)
class ContextDockerfile:
    path: Path
    kind: str = field(default="context", init=False)


@dataclass(frozen=True)
class GeneratedDockerfile:
    template_path: Path
    data: Dict[str, Any]
    kind: str = field(default="generated", init=False)


DockerfileSource = Union[CustomDockerfile, ContextDockerfile, GeneratedDockerfile]


def resolve_dockerfile_source(
    custom_dockerfile: Optional[str],
    project_dir: Union[str, Path],
    template_path: Union[str, Path],
    template_data: Callable[[], Dict[str, Any]],
) -> DockerfileSource:
    """
    Decide which Dockerfile the build uses. First match wins.

    Args:
        custom_dockerfile: Path from ``--dockerfile``, resolved against the process cwd
        project_dir: Directory searched for a context Dockerfile
        template_path: Template rendered when no Dockerfile is found
        template_data: Called only when the generated variant is selected

    Raises:
        NotFoundError: If a custom Dockerfile was given but does not exist
    """
    if custom_dockerfile:
        custom_path = Path(custom_dockerfile).resolve()
        if not custom_path.is_file():
            raise NotFoundError(f"Error reading custom Dockerfile: {custom_path} does not exist.")
        return CustomDockerfile(path=custom_path)

    context_path = Path(project_dir).resolve() / "Dockerfile"
    if context_path.is_file():
        return ContextDockerfile(path=context_path)

    # No Dockerfile in the context; fall through to generating one.
    return GeneratedDockerfile(template_path=Path(template_path), data=template_data())


def write_dockerfile(source: DockerfileSource, target: Path) -> Path:
    """
    Copy or render the selected Dockerfile to ``target``.

    Returns:
        The path written
    """
    target.parent.mkdir(parents=True, exist_ok=True)

    if isinstance(source, (CustomDockerfile, ContextDockerfile)):
        logger.debug("Copying %s Dockerfile %s -> %s", source.kind, source.path, target)
        shutil.copyfile(source.path, target)
        return target

    logger.debug("Rendering %s -> %s", source.template_path, target)
    target.write_text(render_template(source.template_path, source.data), encoding="utf-8")
    return target


def describe_source(source: DockerfileSource) -> str:
    """Short description of a source for log output."""
    if isinstance(source, GeneratedDockerfile):
        return "generated"
    return str(source.path)
