"""Directory traversal for eligible legacy source files."""

from __future__ import annotations

import fnmatch
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator, Optional

from ..utils.logger import get_logger

logger = get_logger(__name__)

SOURCE_EXTENSIONS = (".js", ".jsx")
TEST_FILE_PATTERNS = ("*.test.js", "*.test.jsx", "*.spec.js", "*.spec.jsx")
TEST_DIRECTORY = "__tests__"
IGNORED_DIRECTORIES = ("node_modules", ".git", ".refactor", "dist", "build", "coverage")


@dataclass
class DirectoryWalker:
    """Yields eligible source files depth-first.

    Uses an explicit stack of per-directory entry iterators instead of
    recursion, so the visiting order matches a recursive descent in
    filesystem enumeration order.
    """

    extensions: tuple[str, ...] = SOURCE_EXTENSIONS
    test_patterns: tuple[str, ...] = TEST_FILE_PATTERNS
    test_directory: str = TEST_DIRECTORY
    ignored_directories: tuple[str, ...] = IGNORED_DIRECTORIES
    on_skip: Optional[Callable[[Path], None]] = field(default=None, repr=False)

    def walk(self, root: Path) -> Iterator[Path]:
        """Lazily enumerate eligible files under ``root``."""
        root = Path(root)
        stack: list[Iterator[os.DirEntry]] = []

        entries = self._list(root)
        if entries is not None:
            stack.append(entries)

        while stack:
            entry = next(stack[-1], None)
            if entry is None:
                stack.pop()
                continue

            path = Path(entry.path)
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = entry.is_file()
            except OSError as e:
                logger.warning(f"Cannot stat {path}: {e}")
                continue

            if is_dir:
                if self._skip_directory(entry.name, path):
                    continue
                children = self._list(path)
                if children is not None:
                    stack.append(children)
            elif is_file and entry.name.endswith(self.extensions):
                if self._is_test_file(entry.name):
                    logger.debug(f"Skipping test file: {path}")
                    if self.on_skip:
                        self.on_skip(path)
                    continue
                yield path

    def _list(self, directory: Path) -> Optional[Iterator[os.DirEntry]]:
        try:
            with os.scandir(directory) as it:
                return iter(list(it))
        except OSError as e:
            logger.warning(f"Error reading directory {directory}: {e}")
            return None

    def _skip_directory(self, name: str, path: Path) -> bool:
        if name == self.test_directory:
            logger.debug(f"Skipping test directory: {path}")
            return True
        if name in self.ignored_directories:
            logger.debug(f"Skipping ignored directory: {path}")
            return True
        return False

    def _is_test_file(self, name: str) -> bool:
        return any(fnmatch.fnmatch(name, pattern) for pattern in self.test_patterns)


def walk(root: Path) -> Iterator[Path]:
    """Enumerate eligible files under ``root`` with the default filters."""
    return DirectoryWalker().walk(root)
