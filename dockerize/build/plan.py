"""Computation of the image tag, labels and `docker build` arguments."""
from __future__ import annotations

import re
import shlex
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, List, Optional, Tuple

from ..common.models import BuildRequest, PackageDescriptor
from ..config import DockerizeConfig
from ..errors import ValidationError

# Optional registry host, "/"-separated path components, and an optional ":version".
IMAGE_NAME_PATTERN = re.compile(
    r"^(?:[a-z0-9][a-z0-9.-]*(?::[0-9]+)?/)?"
    r"(?:[a-z0-9]+(?:[._-][a-z0-9]+)*/)*"
    r"[a-z0-9]+(?:[._-][a-z0-9]+)*"
    r"(?::[A-Za-z0-9_][A-Za-z0-9_.-]{0,127})?$"
)


def ensure_list(value: Any) -> List[str]:
    """Wrap a single value in a list; None becomes an empty list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def parse_labels(labels: Any) -> List[str]:
    """Turn a label expression (or list of them) into `--label=...` flags."""
    return [f"--label={expression}" for expression in ensure_list(labels)]


def split_expression(expression: str) -> Tuple[str, str]:
    """Split a KEY=VALUE expression on its first '='."""
    key, _, value = expression.partition("=")
    return key, value


def compute_tag(tag_from_options: Optional[str], package: PackageDescriptor) -> str:
    """
    Compute the final image tag and validate it.

    Without an override the tag is ``<scope/>name:version``. An override may use
    the ``{{packageName}}``, ``{{packageScope}}`` and ``{{packageVersion}}``
    placeholders.

    Raises:
        ValidationError: If the resulting tag is not a valid image name
    """
    scope = package.scope
    name = package.basename
    version = package.version

    if not tag_from_options:
        result = f"{scope}/{name}:{version}" if scope else f"{name}:{version}"
    else:
        result = (
            tag_from_options
            .replace("{{packageName}}", name)
            .replace("{{packageScope}}", scope)
            .replace("{{packageVersion}}", version)
        )

    if not IMAGE_NAME_PATTERN.match(result):
        raise ValidationError(f"Invalid image name: {result}", field="tag")

    return result


@dataclass(frozen=True)
class BuildPlan:
    """Everything needed to run `docker build`, derived from a request and its package."""

    tag: str
    labels: Tuple[str, ...]  # user label expressions, KEY=VALUE
    env_vars: Tuple[str, ...]  # KEY=VALUE
    ubuntu_version: str
    tini_version: str
    extra_args: Optional[str] = None
    node_version: Optional[str] = None  # filled in once resolved
    dockerfile_path: Optional[Path] = None
    base_labels: Tuple[str, ...] = field(default=(), init=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "base_labels",
            (
                f"NODE_VERSION={self.node_version}",
                f"UBUNTU_VERSION={self.ubuntu_version}",
                f"TINI_VERSION={self.tini_version}",
            ),
        )

    def with_node_version(self, node_version: str) -> 'BuildPlan':
        return replace(self, node_version=node_version)

    def with_dockerfile(self, dockerfile_path: Path) -> 'BuildPlan':
        return replace(self, dockerfile_path=dockerfile_path)

    @property
    def label_flags(self) -> List[str]:
        """Always-present labels first, then the user's labels."""
        return parse_labels(list(self.base_labels) + list(self.labels))

    @property
    def extra_arg_list(self) -> List[str]:
        return shlex.split(self.extra_args) if self.extra_args else []

    def build_args(self) -> List[str]:
        """
        Arguments passed to `docker build` after the context directory.

        Raises:
            ValueError: If the node version has not been resolved yet
        """
        if not self.node_version:
            raise ValueError("Node version must be resolved before computing build arguments.")
        return ["--rm", f"--tag={self.tag}", *self.label_flags, *self.extra_arg_list]

    def template_data(self, entry: str, has_lockfile: bool, has_npmrc: bool) -> dict:
        """Data handed to the Dockerfile template."""
        return {
            "entry": entry,
            "env_vars": list(self.env_vars),
            "has_lockfile": has_lockfile,
            "node_version": self.node_version,
            "ubuntu_version": self.ubuntu_version,
            "tini_version": self.tini_version,
            "has_npmrc": has_npmrc,
        }


def create_build_plan(request: BuildRequest, package: PackageDescriptor, config: DockerizeConfig) -> BuildPlan:
    """
    Derive a BuildPlan from a validated request and its package.

    The node version is carried over from the request when given; otherwise it
    is resolved later and attached with ``with_node_version``.

    Raises:
        ValidationError: If the computed tag is invalid
    """
    return BuildPlan(
        tag=compute_tag(request.tag, package),
        labels=tuple(ensure_list(request.labels)),
        env_vars=tuple(ensure_list(request.env)),
        ubuntu_version=request.ubuntu_version or config.default_ubuntu_version,
        tini_version=config.tini_version,
        extra_args=request.extra_args,
        node_version=request.node_version,
    )
