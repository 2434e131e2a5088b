"""Context-managed staging area that becomes the Docker build context."""
import logging
import shutil
import tempfile
import threading
from pathlib import Path
from typing import Optional


class StagingArea:
    """
    Ephemeral directory holding the assembled build context.

    Each staging area instance:
    - Allocates a unique directory on acquire()
    - Is owned by exactly one pipeline invocation and never reused
    - Is removed on release(), which is idempotent
    - Is released on every exit path when used as a context manager

    Usage:
        with StagingArea() as staging:
            (staging.path / "Dockerfile").write_text(content)
            ...
        # staging.path no longer exists here
    """

    DOCKERFILE_NAME = "Dockerfile"
    PACKAGE_DIR_NAME = "package"
    NPMRC_NAME = ".npmrc"

    def __init__(self, base_dir: Optional[Path] = None, logger: Optional[logging.Logger] = None):
        """
        Initialize the staging area without touching the filesystem.

        Args:
            base_dir: Parent directory for the staging directory (default: system temp dir)
            logger: Logger used for lifecycle messages
        """
        self.base_dir = base_dir
        self.logger = logger or logging.getLogger(__name__)
        self._path: Optional[Path] = None
        self._released = False
        self._lock = threading.Lock()

    def __enter__(self) -> 'StagingArea':
        """Enter context manager - acquire the staging directory."""
        return self.acquire()

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager - remove the staging directory on every exit path."""
        self.release()

    def acquire(self) -> 'StagingArea':
        """
        Create a new empty directory at a unique path.

        Raises:
            RuntimeError: If this staging area was already acquired
            OSError: If the directory cannot be created
        """
        if self._path is not None:
            raise RuntimeError("Staging area has already been acquired; staging areas are single-use.")

        self._path = Path(tempfile.mkdtemp(prefix="dockerize-", dir=str(self.base_dir) if self.base_dir else None))
        self.logger.debug("Created staging directory: %s", self._path)
        return self

    def release(self) -> None:
        """Recursively remove the staging directory. Safe to call more than once."""
        with self._lock:
            if self._released or self._path is None:
                return
            self._released = True

        if self._path.exists():
            self.logger.debug("Removing staging directory: %s", self._path)
            shutil.rmtree(self._path)

    @property
    def path(self) -> Path:
        """
        Get the staging directory path.

        Raises:
            ValueError: If the staging area has not been acquired or was released
        """
        if self._path is None:
            raise ValueError("Staging area not initialized. Please call acquire() first.")
        if self._released:
            raise ValueError(f"Staging area {self._path} has already been released.")
        return self._path

    @property
    def is_released(self) -> bool:
        return self._released

    @property
    def dockerfile_path(self) -> Path:
        return self.path / self.DOCKERFILE_NAME

    @property
    def package_dir(self) -> Path:
        """Directory the packed package is extracted into."""
        return self.path / self.PACKAGE_DIR_NAME

    @property
    def npmrc_path(self) -> Path:
        return self.path / self.NPMRC_NAME
