"""File operations for the migration with size limits and optional backups.

Read and write failures are logged and reported through return values so
that one unreadable file never aborts a whole traversal.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from .logger import get_logger

logger = get_logger(__name__)


@dataclass
class FileManager:
    """Manages source reads, target writes and original-file removal."""

    project_path: Path
    backup_dir: Optional[Path] = None
    max_file_size_mb: int = 10
    backup_enabled: bool = False

    def __post_init__(self) -> None:
        """Resolve the project path and default backup directory."""
        self.project_path = Path(self.project_path).resolve()
        if self.backup_dir is None:
            self.backup_dir = self.project_path / ".refactor" / "backups"

    @property
    def max_file_size_bytes(self) -> int:
        """Maximum file size in bytes."""
        return self.max_file_size_mb * 1024 * 1024

    def read_file(self, file_path: Path) -> Optional[str]:
        """Read a source file as UTF-8.

        Args:
            file_path: Path to the file

        Returns:
            File contents or None if the file is missing, too large or unreadable
        """
        if not file_path.exists():
            logger.warning(f"File not found: {file_path}")
            return None

        try:
            file_size = file_path.stat().st_size
            if file_size > self.max_file_size_bytes:
                logger.warning(f"File too large ({file_size} bytes): {file_path}")
                return None

            return file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeError) as e:
            logger.error(f"Failed to read {file_path}: {e}")
            return None

    def write_file(self, file_path: Path, content: str) -> bool:
        """Write content to a file, creating parent directories.

        Args:
            file_path: Path to the file
            content: Content to write

        Returns:
            True if successful
        """
        try:
            # Encode before opening so an unencodable answer leaves no partial file
            data = content.encode("utf-8")
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(data)
            logger.debug(f"Wrote {len(data)} bytes to {file_path}")
            return True

        except (OSError, UnicodeError) as e:
            logger.error(f"Failed to write {file_path}: {e}")
            return False

    def create_backup(self, file_path: Path) -> Optional[Path]:
        """Copy a file into the backup directory, keeping its relative layout.

        Args:
            file_path: Path to the file to back up

        Returns:
            Path to the backup file or None if failed
        """
        if not file_path.exists():
            return None

        try:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            try:
                relative_path = file_path.resolve().relative_to(self.project_path)
            except ValueError:
                relative_path = Path(file_path.name)
            backup_path = (
                self.backup_dir
                / relative_path.parent
                / f"{relative_path.stem}_{timestamp}{relative_path.suffix}"
            )

            backup_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(file_path, backup_path)

            logger.debug(f"Created backup: {backup_path}")
            return backup_path

        except OSError as e:
            logger.error(f"Failed to create backup for {file_path}: {e}")
            return None

    def replace_file(self, source_path: Path, target_path: Path, content: str) -> bool:
        """Write ``content`` to ``target_path`` and remove ``source_path``.

        The write happens first; the original is only removed once the new
        file exists. A crash in between leaves both files on disk.

        Returns:
            True if the target was written and the original removed
        """
        if not self.write_file(target_path, content):
            return False

        if self.backup_enabled and self.create_backup(source_path) is None:
            logger.warning(f"No backup taken for {source_path}")

        if target_path.resolve() == source_path.resolve():
            return True

        try:
            source_path.unlink()
        except OSError as e:
            logger.error(f"Failed to remove original {source_path}: {e}")
            return False

        logger.debug(f"Removed original file: {source_path}")
        return True
