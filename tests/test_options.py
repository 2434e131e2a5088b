"""Unit tests for build option validation."""

from __future__ import annotations

import pytest

from dockerize.build.options import validate_options
from dockerize.common.models import BuildRequest
from dockerize.errors import ValidationError


def test_minimal_options_are_accepted() -> None:
    request = validate_options({"cwd": "/srv/app"})

    assert request.cwd == "/srv/app"
    assert request.tag is None
    assert request.labels is None
    assert request.push is None


def test_none_values_are_treated_as_absent() -> None:
    request = validate_options({"cwd": "/srv/app", "tag": None, "labels": None, "push": None})

    assert request.tag is None
    assert request.labels is None


def test_labels_and_env_accept_string_or_list() -> None:
    single = validate_options({"cwd": ".", "labels": "a=b", "env": "NODE_ENV=production"})
    many = validate_options({"cwd": ".", "labels": ["a=b", "c=d"], "env": ["X=1"]})

    assert single.labels == "a=b"
    assert many.labels == ["a=b", "c=d"]
    assert many.env == ["X=1"]


@pytest.mark.parametrize(
    ("options", "field"),
    [
        ({}, "cwd"),
        ({"cwd": 42}, "cwd"),
        ({"cwd": ".", "tag": 1}, "tag"),
        ({"cwd": ".", "node_version": 14}, "node_version"),
        ({"cwd": ".", "labels": ["a=b", 3]}, "labels"),
        ({"cwd": ".", "env": {"A": "1"}}, "env"),
        ({"cwd": ".", "extra_args": ["--squash"]}, "extra_args"),
        ({"cwd": ".", "dockerfile": True}, "dockerfile"),
        ({"cwd": ".", "npmrc": 1}, "npmrc"),
        ({"cwd": ".", "push": "yes"}, "push"),
    ],
)
def test_invalid_fields_are_named(options, field) -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate_options(options)

    assert exc_info.value.field == field
    assert f"`{field}`" in exc_info.value.message
    assert exc_info.value.code == "VALIDATION_ERROR"


def test_unknown_option_is_rejected() -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate_options({"cwd": ".", "colour": "blue"})

    assert exc_info.value.field == "colour"
    assert "Unknown option" in exc_info.value.message


def test_first_violation_is_reported() -> None:
    with pytest.raises(ValidationError) as exc_info:
        validate_options({"cwd": ".", "tag": 1, "push": "yes"})

    assert exc_info.value.field == "tag"


def test_non_mapping_is_rejected() -> None:
    with pytest.raises(ValidationError):
        validate_options(["cwd"])


def test_request_is_immutable() -> None:
    request = validate_options({"cwd": "."})

    with pytest.raises(Exception):
        request.tag = "other"  # type: ignore[misc]


def test_build_request_passes_through() -> None:
    request = BuildRequest(cwd=".", npmrc="true")

    assert validate_options(request) is request
