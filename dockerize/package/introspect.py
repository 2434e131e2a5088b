"""Read the host package's package.json."""
import json
import logging
import posixpath
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..common.models import PackageDescriptor
from ..errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

PACKAGE_JSON = "package.json"


def find_up(filename: str, start: Union[str, Path]) -> Optional[Path]:
    """
    Find ``filename`` in ``start`` or the closest of its parent directories.

    Args:
        filename: Name of the file to look for
        start: Directory the search begins in

    Returns:
        Absolute path to the file, or None if no ancestor contains it
    """
    directory = Path(start).resolve()
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / filename
        if candidate.is_file():
            return candidate
    return None


def compute_package_entry(package_json: Dict[str, Any]) -> str:
    """
    Return the package's first "bin" entry or, failing that, its "main" entry.

    Raises:
        NotFoundError: If the package declares neither
    """
    bin_field = package_json.get("bin")
    if isinstance(bin_field, str) and bin_field:
        return _normalize_entry(bin_field)
    if isinstance(bin_field, dict) and bin_field:
        return _normalize_entry(next(iter(bin_field.values())))

    main = package_json.get("main")
    if main:
        return _normalize_entry(main)

    raise NotFoundError('Project\'s package.json contains no "main" or "bin" fields.')


def describe_package(directory: Union[str, Path]) -> PackageDescriptor:
    """
    Locate and read the package.json for the package at ``directory``.

    Raises:
        NotFoundError: If no package.json exists in ``directory`` or above it,
            or the package has no entry point
        ValidationError: If package.json is unreadable or lacks a name/version
    """
    package_json_path = find_up(PACKAGE_JSON, directory)
    if package_json_path is None:
        raise NotFoundError(f'Unable to find a "package.json" for the package at {directory}.')

    logger.debug("Reading %s", package_json_path)
    try:
        package_json = json.loads(package_json_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Unable to parse {package_json_path}: {exc}") from exc

    if not isinstance(package_json, dict):
        raise ValidationError(f"Expected {package_json_path} to contain an object.")

    for field in ("name", "version"):
        if not isinstance(package_json.get(field), str) or not package_json[field].strip():
            raise ValidationError(f'{package_json_path} is missing a "{field}" field.', field=field)

    return PackageDescriptor(
        name=package_json["name"].strip(),
        version=package_json["version"].strip(),
        entry=compute_package_entry(package_json),
        root=package_json_path.parent,
    )


def _normalize_entry(entry: str) -> str:
    return posixpath.normpath(entry.replace("\\", "/"))
