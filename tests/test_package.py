"""Unit tests for package.json introspection."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from conftest import write_package
from dockerize.errors import NotFoundError, ValidationError
from dockerize.package.introspect import compute_package_entry, describe_package, find_up


def test_describe_package_reads_metadata(tmp_path: Path) -> None:
    project = write_package(tmp_path / "project", name="@org/app", version="1.2.3")

    package = describe_package(project)

    assert package.name == "@org/app"
    assert package.version == "1.2.3"
    assert package.entry == "index.js"
    assert package.root == project.resolve()
    assert package.scope == "org"
    assert package.basename == "app"


def test_describe_package_searches_upwards(tmp_path: Path) -> None:
    project = write_package(tmp_path / "project")
    nested = project / "src" / "lib"
    nested.mkdir(parents=True)

    assert describe_package(nested).root == project.resolve()


def test_missing_package_json(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("dockerize.package.introspect.find_up", lambda name, start: None)

    with pytest.raises(NotFoundError) as exc_info:
        describe_package(tmp_path)

    assert "package.json" in exc_info.value.message


@pytest.mark.parametrize("missing", ["name", "version"])
def test_name_and_version_are_required(tmp_path: Path, missing: str) -> None:
    project = tmp_path / "project"
    project.mkdir()
    package_json = {"name": "app", "version": "1.0.0", "main": "index.js"}
    del package_json[missing]
    (project / "package.json").write_text(json.dumps(package_json))

    with pytest.raises(ValidationError):
        describe_package(project)


def test_unparseable_package_json(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text("{not json")

    with pytest.raises(ValidationError):
        describe_package(tmp_path)


def test_entry_prefers_first_bin() -> None:
    assert compute_package_entry({"bin": {"app": "./bin/app.js", "other": "bin/other.js"}, "main": "index.js"}) == "bin/app.js"
    assert compute_package_entry({"bin": "cli.js", "main": "index.js"}) == "cli.js"


def test_entry_falls_back_to_main() -> None:
    assert compute_package_entry({"main": "lib/index.js"}) == "lib/index.js"


def test_entry_missing() -> None:
    with pytest.raises(NotFoundError):
        compute_package_entry({"name": "app"})


def test_unscoped_package_has_empty_scope(tmp_path: Path) -> None:
    package = describe_package(write_package(tmp_path / "project", name="app"))

    assert package.scope == ""
    assert package.basename == "app"


def test_find_up_returns_none_when_absent(tmp_path: Path) -> None:
    assert find_up("definitely-not-here.marker", tmp_path) is None
