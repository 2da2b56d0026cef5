"""
Service layer for the Newsroom publication engine.

Services are parameterized by model so every entity app shares one
implementation of slugs, active flags, mirrors and bulk operations.
"""

from .active_set import ActiveSetEnforcer
from .bulk import (
    BulkDeleteResult,
    BulkItemResult,
    BulkPublicationService,
    BulkStatusResult,
    validate_ids,
)
from .mirror import MirrorSynchronizer
from .reconcile import MirrorReconcileService, ReconcileStats
from .slugs import ensure_unique, save_with_unique_slug

__all__ = [
    "ActiveSetEnforcer",
    "BulkDeleteResult",
    "BulkItemResult",
    "BulkPublicationService",
    "BulkStatusResult",
    "MirrorReconcileService",
    "MirrorSynchronizer",
    "ReconcileStats",
    "ensure_unique",
    "save_with_unique_slug",
    "validate_ids",
]
