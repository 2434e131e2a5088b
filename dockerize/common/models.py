"""Shared data models used across the build pipeline."""
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Value of the ``npmrc`` option that requests a lookup of the nearest .npmrc file.
NEAREST_NPMRC = "true"


class BuildRequest(BaseModel):
    """Options accepted by a single Dockerize invocation."""

    model_config = ConfigDict(frozen=True, strict=True, extra="forbid")

    cwd: str = Field(description="Root directory of the project to containerize")
    tag: Optional[str] = Field(default=None, description="Tag applied to the image, may contain {{package*}} placeholders")
    node_version: Optional[str] = Field(default=None, description="Node.js version installed in the image (default: LTS)")
    ubuntu_version: Optional[str] = Field(default=None, description="Ubuntu version used as the base image")
    labels: Union[str, List[str], None] = Field(default=None, description="Label expressions (KEY=VALUE)")
    env: Union[str, List[str], None] = Field(default=None, description="Environment variable expressions (KEY=VALUE)")
    extra_args: Optional[str] = Field(default=None, description="Extra arguments appended to `docker build`")
    dockerfile: Optional[str] = Field(default=None, description="Path to a custom Dockerfile")
    npmrc: Optional[str] = Field(default=None, description="Path to an .npmrc file, or 'true' for the nearest one")
    push: Optional[bool] = Field(default=None, description="Whether to run `docker push` after building")


@dataclass(frozen=True, slots=True)
class PackageDescriptor:
    """Metadata about the package being containerized."""

    name: str
    version: str
    entry: str  # First "bin" entry, else "main"
    root: Path  # Directory containing package.json

    @property
    def scope(self) -> str:
        """Package scope without the '@' sigil, or an empty string."""
        if "/" not in self.name:
            return ""
        return self.name.replace("@", "").split("/")[0]

    @property
    def basename(self) -> str:
        """Package name without its scope."""
        return self.name.split("/")[-1]


@dataclass(frozen=True, slots=True)
class BuildResult:
    """Outcome of a successful image build."""

    tag: str
    image_size: int  # bytes
    image_size_display: str
    build_duration: float  # seconds
    duration_display: str
    dockerfile_source: str  # "custom" | "context" | "generated"
    has_lockfile: bool
    has_npmrc: bool
    pushed: bool = False
    push_duration: Optional[float] = None
