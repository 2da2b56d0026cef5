"""Abstract mirror backend interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Iterator


@dataclass
class MirrorEntry:
    """Directory entry returned by mirror backend listings."""
    path: str
    name: str
    is_directory: bool
    modified_at: datetime


class MirrorPathError(ValueError):
    """Raised when a mirror path escapes the mirror root."""

    pass


class AbstractMirrorBackend(ABC):
    """
    Abstract interface for the filesystem mirror.

    All paths are relative to the mirror root and should not contain leading slashes.
    Example: "posts/42/metadata.json" not "/posts/42/metadata.json"
    """

    @abstractmethod
    def write_text(self, path: str, text: str) -> None:
        """
        Replace the file at path with UTF-8 encoded text.

        Readers never observe a partially written file.

        Raises:
            FileNotFoundError: If parent directory doesn't exist
            IsADirectoryError: If path points to an existing directory
        """
        pass

    @abstractmethod
    def read_text(self, path: str) -> str:
        """
        Read a UTF-8 file.

        Raises:
            FileNotFoundError: If file doesn't exist
        """
        pass

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Check if path exists. Invalid paths do not exist."""
        pass

    @abstractmethod
    def delete(self, path: str) -> None:
        """
        Delete a single file.

        Raises:
            FileNotFoundError: If path doesn't exist
            IsADirectoryError: If path points to a directory
        """
        pass

    @abstractmethod
    def mkdir(self, path: str) -> None:
        """Create directory. Parent directories created as needed."""
        pass

    @abstractmethod
    def rmtree(self, path: str) -> bool:
        """
        Delete a directory and everything below it.

        Returns:
            True if something was removed, False if path was absent
        """
        pass

    @abstractmethod
    def list(self, path: str = "") -> Iterator[MirrorEntry]:
        """
        List contents of directory.

        Yields nothing if the directory doesn't exist.

        Raises:
            NotADirectoryError: If path points to a file
        """
        pass
