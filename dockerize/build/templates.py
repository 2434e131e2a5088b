"""Jinja2 rendering of the bundled Dockerfile template."""
from pathlib import Path
from typing import Any, Mapping, Union

import jinja2

from ..errors import NotFoundError, TemplateError
from .plan import split_expression


def env_instruction(expression: str) -> str:
    """Render a KEY=VALUE expression as the argument of a Dockerfile ENV line, e.g. ``MSG="hello world"``."""
    key, value = split_expression(expression)
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("$", "\\$")
    return f'{key}="{escaped}"'


_jinja_env = jinja2.Environment(
    undefined=jinja2.StrictUndefined,
    keep_trailing_newline=True,
    trim_blocks=True,
    lstrip_blocks=True,
    autoescape=False,
)
_jinja_env.filters["env_instruction"] = env_instruction


def render_template(template_path: Union[str, Path], data: Mapping[str, Any]) -> str:
    """
    Render the template at ``template_path`` with ``data`` as its context.

    Raises:
        NotFoundError: If the template file does not exist
        TemplateError: If the template is malformed or references missing data
    """
    path = Path(template_path)
    if not path.is_file():
        raise NotFoundError(f"Dockerfile template not found at {path}")

    try:
        template = _jinja_env.from_string(path.read_text(encoding="utf-8"))
        return template.render(**data)
    except jinja2.exceptions.TemplateSyntaxError as e:
        raise TemplateError(f"Template syntax error: {e} in {path}") from e
    except jinja2.exceptions.UndefinedError as e:
        raise TemplateError(f"Template {path} references undefined data: {e}") from e
