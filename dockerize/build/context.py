"""Assembly of the production file set inside the staging area."""
from __future__ import annotations

import logging
import shutil
import tarfile
from pathlib import Path
from typing import Optional, Union

from ..common.command_runner import CommandRunner
from ..common.models import NEAREST_NPMRC
from ..errors import ExternalToolError
from ..package.introspect import find_up

logger = logging.getLogger(__name__)

LOCKFILE_NAME = "package-lock.json"
NPMRC_NAME = ".npmrc"


def pack_and_extract_package(
    command_runner: CommandRunner,
    package_root: Path,
    dest_dir: Path,
    *,
    npm_binary: str = "npm",
    timeout: Optional[float] = None,
    tail_lines: int = 20,
) -> Path:
    """
    Collect the files that would be published with the package and extract them.

    `npm pack` writes a tarball containing exactly the publishable files; the
    last line it prints is the tarball's name. The tarball is extracted into
    ``dest_dir`` (creating ``dest_dir/package``) and always deleted afterwards.

    Returns:
        Path to the extracted package directory

    Raises:
        ExternalToolError: If `npm pack` fails, prints no tarball name, or the
            tarball cannot be read
        OSError: If files cannot be written
    """
    command = [npm_binary, "pack"]
    result = command_runner.run(command, cwd=package_root, timeout=timeout)

    if not result.tool_available:
        raise ExternalToolError(f"{npm_binary} is not available - install Node.js and npm", command=command)
    if result.timed_out:
        raise ExternalToolError("npm pack timed out", command=command, stderr_tail=result.stderr_tail(tail_lines))
    if not result.succeeded():
        raise ExternalToolError(
            f"npm pack failed with exit code {result.return_code}",
            command=command,
            return_code=result.return_code,
            stderr_tail=result.stderr_tail(tail_lines),
        )

    tarball_name = result.last_stdout_line()
    if not tarball_name:
        raise ExternalToolError("npm pack did not report a tarball name", command=command, return_code=result.return_code)

    tarball_path = (package_root / tarball_name).resolve()
    try:
        logger.debug("Extracting %s to %s", tarball_path, dest_dir)
        dest_dir.mkdir(parents=True, exist_ok=True)
        with tarfile.open(tarball_path, "r:*") as archive:
            archive.extractall(dest_dir, filter="data")
    except tarfile.TarError as exc:
        raise ExternalToolError(f"Unable to extract {tarball_path.name}: {exc}", command=command) from exc
    finally:
        tarball_path.unlink(missing_ok=True)

    return dest_dir / "package"


def copy_package_lockfile(package_root: Path, dest_dir: Path) -> bool:
    """
    Copy the package's package-lock.json into ``dest_dir`` if there is one.

    Returns:
        True if a lockfile was copied, False otherwise
    """
    lockfile = package_root / LOCKFILE_NAME
    if not lockfile.is_file():
        logger.debug("No %s found in %s", LOCKFILE_NAME, package_root)
        return False

    dest_dir.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(lockfile, dest_dir / LOCKFILE_NAME)
    return True


def copy_npmrc(npmrc_option: Optional[str], project_dir: Union[str, Path], target: Path) -> bool:
    """
    Copy the .npmrc selected by the ``npmrc`` option to ``target``.

    ``npmrc_option`` is either a path, or ``"true"`` to use the nearest .npmrc
    found from ``project_dir`` upwards. A file that cannot be found is skipped.

    Returns:
        True if a file was copied, False otherwise
    """
    if not npmrc_option:
        return False

    if npmrc_option == NEAREST_NPMRC:
        npmrc_path = find_up(NPMRC_NAME, project_dir)
        if npmrc_path is None:
            logger.debug("No %s found above %s", NPMRC_NAME, project_dir)
            return False
    else:
        npmrc_path = Path(npmrc_option).resolve()
        if not npmrc_path.is_file():
            logger.warning("Ignoring npmrc option; %s does not exist.", npmrc_path)
            return False

    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(npmrc_path, target)
    logger.debug("Copied %s to %s", npmrc_path, target)
    return True
