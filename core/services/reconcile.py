"""
Mirror reconciliation service.

The relational row wins: a published record must have an up-to-date mirror,
anything else on disk is removable. Closes the gaps left by best-effort
mirror writes (crashes between the row write and the mirror write, failed
syncs, concurrent syncs of the same record finishing out of order).

Usage:
    service = MirrorReconcileService()
    stats = service.reconcile(mode='audit')
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from django.apps import apps

from core.exceptions import MirrorSyncError, ValidationError
from core.services.mirror import MirrorSynchronizer

logger = logging.getLogger(__name__)


@dataclass
class ReconcileStats:
    """Statistics from a reconciliation run."""
    records_scanned: int = 0
    mirrors_on_disk: int = 0
    missing: int = 0
    stale: int = 0
    unexpected: int = 0
    orphaned: int = 0
    written: int = 0
    removed: int = 0
    errors: List[str] = field(default_factory=list)


class MirrorReconcileService:
    """
    Bring the filesystem mirror in line with the relational rows.

    Modes:
        - audit: Report discrepancies only, no changes
        - sync: Write missing and stale mirrors of published records
        - clean: Remove mirrors of unpublished or deleted records (requires force=True)
        - full: sync + clean (requires force=True)

    A mirror is stale when `mirror_synced_at` is unset or older than the
    row's `updated_at`.
    """

    VALID_MODES = ["audit", "sync", "clean", "full"]
    DESTRUCTIVE_MODES = ["clean", "full"]

    def __init__(
        self,
        model=None,
        synchronizer: Optional[MirrorSynchronizer] = None,
    ):
        self.model = model or apps.get_model("content", "Post")
        self.synchronizer = synchronizer or MirrorSynchronizer()

    def reconcile(
        self,
        mode: str = "audit",
        dry_run: bool = False,
        force: bool = False,
    ) -> ReconcileStats:
        """
        Compare rows with mirrors and optionally repair.

        Args:
            mode: 'audit', 'sync', 'clean', or 'full'
            dry_run: Preview changes without applying
            force: Required for 'clean' and 'full' modes

        Returns:
            ReconcileStats with operation results

        Raises:
            ValidationError: Unknown mode, or destructive mode without force
        """
        if mode not in self.VALID_MODES:
            raise ValidationError(
                f"Invalid mode: {mode}. Allowed: {', '.join(self.VALID_MODES)}"
            )

        if mode in self.DESTRUCTIVE_MODES and not force:
            raise ValidationError(f"Mode '{mode}' requires force=True")

        stats = ReconcileStats()

        on_disk = self.synchronizer.mirrored_ids()
        stats.mirrors_on_disk = len(on_disk)

        rows = self.model._default_manager.values_list(
            "pk", "is_published", "updated_at", "mirror_synced_at"
        )

        known_ids = set()
        to_write = []
        to_remove = []
        for pk, is_published, updated_at, mirror_synced_at in rows:
            stats.records_scanned += 1
            known_ids.add(pk)

            if is_published:
                if pk not in on_disk:
                    stats.missing += 1
                    to_write.append(pk)
                elif mirror_synced_at is None or mirror_synced_at < updated_at:
                    stats.stale += 1
                    to_write.append(pk)
            elif pk in on_disk:
                stats.unexpected += 1
                to_remove.append(pk)

        orphans = sorted(on_disk - known_ids)
        stats.orphaned = len(orphans)
        to_remove.extend(orphans)

        logger.info(
            f"Reconcile {mode}: scanned={stats.records_scanned} "
            f"on_disk={stats.mirrors_on_disk} missing={stats.missing} "
            f"stale={stats.stale} unexpected={stats.unexpected} "
            f"orphaned={stats.orphaned}"
        )

        if dry_run or mode == "audit":
            return stats

        if mode in ["sync", "full"]:
            self._write(to_write, stats)

        if mode in self.DESTRUCTIVE_MODES:
            self._remove(to_remove, stats)

        return stats

    def _write(self, ids: List[int], stats: ReconcileStats) -> None:
        synced = []
        for record in self.model._default_manager.filter(pk__in=ids, is_published=True):
            try:
                self.synchronizer.sync(record)
            except MirrorSyncError as e:
                stats.errors.append(e.message)
                logger.error(e.message)
                continue
            synced.append(record.pk)

        stats.written = len(synced)
        self.synchronizer.mark_synced(self.model, synced)

    def _remove(self, ids: List[int], stats: ReconcileStats) -> None:
        for pk in ids:
            try:
                self.synchronizer.remove(pk)
            except MirrorSyncError as e:
                stats.errors.append(e.message)
                logger.error(e.message)
                continue
            stats.removed += 1
