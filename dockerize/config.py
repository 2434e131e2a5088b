import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_TEMPLATE_PATH = Path(__file__).parent / "templates" / "Dockerfile.j2"


class DockerizeConfig(BaseModel):
    """Configuration settings for the Dockerize pipeline."""

    # Tool settings
    docker_binary: str = Field(default_factory=lambda: os.environ.get('DOCKERIZE_DOCKER_BINARY', 'docker'))
    npm_binary: str = Field(default_factory=lambda: os.environ.get('DOCKERIZE_NPM_BINARY', 'npm'))

    # Image settings
    default_ubuntu_version: str = Field(default_factory=lambda: os.environ.get('DOCKERIZE_UBUNTU_VERSION', '22.04'))
    tini_version: str = Field(default_factory=lambda: os.environ.get('DOCKERIZE_TINI_VERSION', '0.19.0'))
    template_path: Path = Field(default=DEFAULT_TEMPLATE_PATH, description="Jinja2 template used to generate Dockerfiles.")

    # Directory settings
    staging_dir_base: Optional[Path] = Field(
        default_factory=lambda: os.environ.get('DOCKERIZE_STAGING_DIR') or None,
        description="Parent of the per-build staging directories (default: system temp dir).",
    )

    # Node.js version lookup
    node_dist_index_url: str = Field(
        default_factory=lambda: os.environ.get('DOCKERIZE_NODE_DIST_INDEX', 'https://nodejs.org/dist/index.json')
    )
    http_timeout: float = 10.0

    # Logging settings
    log_level: str = Field(default_factory=lambda: os.environ.get('LOG_LEVEL', 'INFO').upper())
    stderr_tail_lines: int = Field(default=20, description="Number of output lines kept for error reports.")

    # Timeout settings (None waits for the tool to exit)
    build_timeout: Optional[float] = None
    push_timeout: Optional[float] = None
    pack_timeout: Optional[float] = 300
    inspect_timeout: Optional[float] = 30
