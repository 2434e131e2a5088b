"""
Build context assembly.

Provides the pieces the pipeline stages into a build context:

- Option validation
- Build plan (tag, labels, docker arguments)
- Staging area lifecycle
- Dockerfile resolution and rendering
- Package file collection
"""

from .dockerfile import ContextDockerfile, CustomDockerfile, GeneratedDockerfile, resolve_dockerfile_source, write_dockerfile
from .options import validate_options
from .plan import BuildPlan, compute_tag, create_build_plan, ensure_list, parse_labels
from .staging import StagingArea

__all__ = [
    "validate_options",
    "BuildPlan",
    "compute_tag",
    "create_build_plan",
    "ensure_list",
    "parse_labels",
    "StagingArea",
    "CustomDockerfile",
    "ContextDockerfile",
    "GeneratedDockerfile",
    "resolve_dockerfile_source",
    "write_dockerfile",
]
