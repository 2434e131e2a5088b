"""Validation of incoming build options."""
from __future__ import annotations

from typing import Any, Mapping, Union

from pydantic import ValidationError as PydanticValidationError

from ..common.models import BuildRequest
from ..errors import ValidationError

# Human-readable shape of every option, used in error messages.
EXPECTED_SHAPES = {
    "cwd": "a string",
    "tag": "a string",
    "node_version": "a string",
    "ubuntu_version": "a string",
    "labels": "a string or a list of strings",
    "env": "a string or a list of strings",
    "extra_args": "a string",
    "dockerfile": "a string",
    "npmrc": "a string",
    "push": "a boolean",
}


def validate_options(options: Union[BuildRequest, Mapping[str, Any]]) -> BuildRequest:
    """
    Check the shape of every option and return an immutable BuildRequest.

    Options that are absent or None are treated as not provided. No I/O happens
    here; the first offending field is reported.

    Raises:
        ValidationError: If a field is missing, unknown, or of the wrong type
    """
    if isinstance(options, BuildRequest):
        return options

    if not isinstance(options, Mapping):
        raise ValidationError(f"Expected options to be a mapping, got {type(options).__name__}")

    try:
        return BuildRequest.model_validate(dict(options))
    except PydanticValidationError as exc:
        raise _to_validation_error(exc, options) from None


def _to_validation_error(exc: PydanticValidationError, options: Mapping[str, Any]) -> ValidationError:
    error = exc.errors()[0]
    field = str(error["loc"][0]) if error["loc"] else "options"

    if error["type"] == "extra_forbidden":
        return ValidationError(f"Unknown option `{field}`", field=field)

    if error["type"] == "missing":
        return ValidationError(f"Expected `{field}` to be {EXPECTED_SHAPES.get(field, 'provided')}, got nothing", field=field)

    value = options.get(field)
    return ValidationError(
        f"Expected `{field}` to be {EXPECTED_SHAPES.get(field, 'valid')}, got {type(value).__name__} {value!r}",
        field=field,
    )
