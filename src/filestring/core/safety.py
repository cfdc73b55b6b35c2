"""Opt-in advisory locking for multi-step edits.

File strings never lock on their own. Code that needs a sequence of edits
to appear atomic to other cooperating writers wraps them in a lock taken
here, optionally with a backup that is restored if the edits fail.
"""
import logging
import os
import shutil
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from filelock import FileLock

if TYPE_CHECKING:
    from ..filestring import FileString

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class FileStringLock:
    """Context manager holding an advisory lock on a backing file.

    The lock lives in a sibling ``<name>.lock`` file, so it only excludes
    writers that use the same lock.
    """

    def __init__(
        self,
        file_path: Union[str, Path],
        timeout: float = DEFAULT_TIMEOUT,
        create_backup: bool = True,
    ):
        """Initialize lock.

        Args:
            file_path: Path of the backing file
            timeout: Lock timeout in seconds
            create_backup: Whether to back the file up and restore it on failure
        """
        self.file_path = Path(file_path)
        self.timeout = timeout
        self.create_backup = create_backup
        self.lock_path = Path(f"{self.file_path}.lock")
        self.backup_path = Path(f"{self.file_path}.backup.{time.time_ns()}")
        self.lock: Optional[FileLock] = None
        self._had_file = False
        self._backup_created = False

    def __enter__(self):
        """Acquire the lock and take a backup."""
        self.lock = FileLock(self.lock_path, timeout=self.timeout)

        try:
            self.lock.acquire()
            logger.info(f"Acquired lock for {self.file_path}")

            self._had_file = self.file_path.exists()
            if self.create_backup and self._had_file:
                shutil.copy2(self.file_path, self.backup_path)
                self._backup_created = True
                logger.info(f"Created backup: {self.backup_path}")

            return self

        except Exception as e:
            logger.error(f"Failed to acquire lock for {self.file_path}: {e}")
            self.lock.release()
            raise

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Restore the backup on failure, then release the lock."""
        try:
            if exc_type is not None:
                logger.error(f"Edit of {self.file_path} failed: {exc_val}")
                if self.create_backup:
                    self._restore_from_backup()
            elif self._backup_created:
                os.remove(self.backup_path)
                self._backup_created = False
                logger.info("Edit successful, removed backup")

        finally:
            self.lock.release()
            logger.info(f"Released lock for {self.file_path}")

    def _restore_from_backup(self):
        """Put the file back the way it was before the lock was taken."""
        if self._backup_created:
            shutil.move(self.backup_path, self.file_path)
            self._backup_created = False
            logger.info(f"Restored from backup: {self.backup_path}")
        elif not self._had_file:
            # The file did not exist before; a failed edit must not leave one behind
            try:
                os.remove(self.file_path)
            except FileNotFoundError:
                pass
            logger.info(f"Removed {self.file_path} created by failed edit")
        else:
            logger.warning("No backup file found for restoration")


@contextmanager
def locked_edit(
    file_string: "FileString", timeout: float = DEFAULT_TIMEOUT, create_backup: bool = True
) -> Iterator["FileString"]:
    """Context manager for a locked sequence of edits on a file string.

    Args:
        file_string: File string to edit
        timeout: Lock timeout in seconds
        create_backup: Whether to restore the previous content on failure

    Yields:
        The same file string, while the lock is held
    """
    with FileStringLock(file_string.path, timeout, create_backup):
        yield file_string
