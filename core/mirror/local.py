"""Local filesystem mirror backend."""

import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Iterator

from django.conf import settings

from .base import AbstractMirrorBackend, MirrorEntry, MirrorPathError


class SymlinkAttackError(MirrorPathError):
    """Raised when a symlink is found where a real directory is expected."""

    pass


def _assert_platform_support() -> None:
    """
    Fail loudly if platform doesn't support safe tree removal.

    Raises:
        RuntimeError: If shutil.rmtree doesn't have symlink attack protection
    """
    if not getattr(shutil.rmtree, "avoids_symlink_attacks", False):
        raise RuntimeError(
            "Platform does not support symlink-safe rmtree. "
            "Refusing to operate in vulnerable mode."
        )


class LocalMirrorBackend(AbstractMirrorBackend):
    """
    Local filesystem mirror backend.

    Stores mirrors under NEWSROOM_MIRROR_ROOT directory.
    All paths are relative to this root.
    """

    def __init__(self, mirror_root: Path | None = None):
        """
        Initialize local mirror backend.

        Args:
            mirror_root: Optional override for mirror root path.
                         Defaults to settings.NEWSROOM_MIRROR_ROOT
        """
        self.mirror_root = Path(mirror_root or settings.NEWSROOM_MIRROR_ROOT).resolve()

        # Ensure mirror root exists
        self.mirror_root.mkdir(parents=True, exist_ok=True)

    def _resolve_path(self, path: str) -> Path:
        """
        Convert relative path to absolute filesystem path.

        Raises:
            MirrorPathError: If path attempts directory traversal
        """
        path = path.lstrip("/")
        full_path = (self.mirror_root / path).resolve()

        try:
            full_path.relative_to(self.mirror_root)
        except ValueError:
            raise MirrorPathError(f"Invalid path: {path} (directory traversal detected)")

        return full_path

    def write_text(self, path: str, text: str) -> None:
        full_path = self._resolve_path(path)

        if full_path.is_dir():
            raise IsADirectoryError(f"Path is a directory: {path}")

        if not full_path.parent.exists():
            raise FileNotFoundError(f"Parent directory does not exist: {path}")

        # Write beside the target, then swap it in
        fd, tmp_name = tempfile.mkstemp(
            dir=full_path.parent, prefix=f".{full_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_name, full_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def read_text(self, path: str) -> str:
        full_path = self._resolve_path(path)

        if not full_path.is_file():
            raise FileNotFoundError(f"File not found: {path}")

        return full_path.read_text(encoding="utf-8")

    def exists(self, path: str) -> bool:
        try:
            return self._resolve_path(path).exists()
        except MirrorPathError:
            return False

    def delete(self, path: str) -> None:
        full_path = self._resolve_path(path)

        if not full_path.exists():
            raise FileNotFoundError(f"Path not found: {path}")

        if full_path.is_dir():
            raise IsADirectoryError(f"Path is a directory: {path}")

        full_path.unlink()

    def mkdir(self, path: str) -> None:
        self._resolve_path(path).mkdir(parents=True, exist_ok=True)

    def rmtree(self, path: str) -> bool:
        """
        Delete a directory tree inside the mirror root.

        Raises:
            SymlinkAttackError: If the target itself is a symlink
            MirrorPathError: If the target escapes the mirror root or is the root
        """
        _assert_platform_support()

        # Check for symlink BEFORE resolving
        raw_path = self.mirror_root / path.lstrip("/")
        if raw_path.is_symlink():
            raise SymlinkAttackError(f"Target is a symlink: {path}")

        full_path = self._resolve_path(path)
        if full_path == self.mirror_root:
            raise MirrorPathError("Refusing to remove the mirror root")

        if not full_path.exists():
            return False

        if not full_path.is_dir():
            raise NotADirectoryError(f"Path is not a directory: {path}")

        shutil.rmtree(full_path)
        return True

    def list(self, path: str = "") -> Iterator[MirrorEntry]:
        full_path = self._resolve_path(path) if path else self.mirror_root

        if not full_path.exists():
            return

        if not full_path.is_dir():
            raise NotADirectoryError(f"Path is not a directory: {path}")

        for entry in full_path.iterdir():
            # Skip in-flight temporary files
            if entry.name.startswith("."):
                continue
            stat = entry.stat(follow_symlinks=False)
            yield MirrorEntry(
                path=str(entry.relative_to(self.mirror_root)),
                name=entry.name,
                is_directory=entry.is_dir() and not entry.is_symlink(),
                modified_at=datetime.fromtimestamp(stat.st_mtime),
            )
