"""Filesystem mirror backends."""

from .base import AbstractMirrorBackend, MirrorEntry, MirrorPathError
from .local import LocalMirrorBackend, SymlinkAttackError

__all__ = [
    "AbstractMirrorBackend",
    "LocalMirrorBackend",
    "MirrorEntry",
    "MirrorPathError",
    "SymlinkAttackError",
]
