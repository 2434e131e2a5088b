"""Docker runtime helpers for building, inspecting and pushing images."""

from .docker import DockerImageBuilder

__all__ = [
    "DockerImageBuilder",
]
