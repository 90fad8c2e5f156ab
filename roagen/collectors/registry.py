#!/usr/bin/env python3
"""
Registry Document Source

Reads filter files and route object directories from a registry checkout on
disk. Directory entries are yielded sorted by file name so repeated runs
produce the same ROA order.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Union

from ..utils.error_handling import DocumentSourceError


@dataclass
class Document:
    """One directory entry: its text, or the error raised reading it"""
    name: str
    path: Path
    text: Optional[str] = None
    error: Optional[DocumentSourceError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class RegistrySource:
    """Filesystem document source rooted at a registry directory"""

    def __init__(self, root: Union[str, Path], encoding: str = "utf-8",
                 logger: Optional[logging.Logger] = None):
        """
        Initialize registry source

        Args:
            root: Registry root directory
            encoding: Text encoding of registry files
            logger: Optional logger instance
        """
        self.root = Path(root)
        self.encoding = encoding
        self.logger = logger or logging.getLogger(__name__)

    def resolve(self, relative: Union[str, Path]) -> Path:
        return self.root / relative

    def read_text(self, relative: Union[str, Path]) -> str:
        """
        Read one file below the registry root.

        Raises:
            DocumentSourceError: the file is missing or unreadable
        """
        path = self.resolve(relative)
        return self._read_path(path)

    def _read_path(self, path: Path) -> str:
        try:
            with open(path, "r", encoding=self.encoding) as f:
                return f.read()
        except FileNotFoundError as e:
            raise DocumentSourceError(
                f"File not found: {path}", path,
                "Check that the registry path points at a registry checkout"
            ) from e
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentSourceError(f"Cannot read {path}: {e}", path) from e

    def list_directory(self, relative: Union[str, Path]) -> List[Path]:
        """
        List entries of a directory below the registry root, sorted by name.

        Raises:
            DocumentSourceError: the directory is missing or unreadable
        """
        path = self.resolve(relative)
        try:
            return sorted(path.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise DocumentSourceError(
                f"Cannot list directory {path}: {e}", path,
                "Check that the registry path points at a registry checkout"
            ) from e

    def iter_directory(self, relative: Union[str, Path]) -> Iterator[Document]:
        """
        Yield a Document per directory entry.

        Unreadable entries (including subdirectories) are yielded with their
        error so the caller can decide how to account for them.
        """
        for path in self.list_directory(relative):
            try:
                yield Document(name=path.name, path=path, text=self._read_path(path))
            except DocumentSourceError as e:
                self.logger.debug(f"Unreadable registry entry {path}: {e.message}")
                yield Document(name=path.name, path=path, error=e)
