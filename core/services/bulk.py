"""
Bulk Operation Coordinator.

Applies a publication status change or a deletion to many records with one
relational statement, then fans the per-record mirror work out to a thread
pool. The relational write always completes before any mirror work starts,
and a mirror failure on one record never affects the others or the
relational result.

Usage:
    service = BulkPublicationService(Post)
    result = service.set_status(ids=[1, 2, 3], status="published")
    result.affected_rows  # rows updated, regardless of mirror outcomes
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence, Tuple

from django.apps import apps
from django.conf import settings
from django.db import transaction
from django.utils import timezone

from core.exceptions import MirrorSyncError, ValidationError
from core.services.mirror import MirrorSynchronizer

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("newsroom.audit")

MIRROR_SYNC_FAILED = "MIRROR_SYNC_FAILED"


def _coerce_id(value: Any) -> Optional[int]:
    """Positive int from an int or a string of ASCII digits, else None."""
    # bool is an int subclass; True must not become id 1
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str):
        value = value.strip()
        if value.isascii() and value.isdigit():
            number = int(value)
            return number if number > 0 else None
    return None


def validate_ids(ids: Any, max_ids: Optional[int] = None) -> List[int]:
    """
    Validate a client-supplied id list.

    Returns:
        Positive integer ids, duplicates collapsed, original order kept

    Raises:
        ValidationError: Not a list, empty, too long, or any invalid item
    """
    limit = max_ids or settings.NEWSROOM_BULK_MAX_IDS

    if not isinstance(ids, (list, tuple)):
        raise ValidationError("ids must be an array")

    if not ids:
        raise ValidationError("ids array cannot be empty")

    if len(ids) > limit:
        raise ValidationError(
            f"Maximum {limit} ids per request (received {len(ids)})"
        )

    clean_ids = []
    invalid = []
    seen = set()
    for raw in ids:
        value = _coerce_id(raw)
        if value is None:
            invalid.append(raw)
        elif value not in seen:
            seen.add(value)
            clean_ids.append(value)

    if invalid:
        raise ValidationError(
            "All ids must be positive integers", details={"invalid": invalid}
        )

    return clean_ids


@dataclass
class BulkItemResult:
    """Mirror outcome for a single record in a bulk request."""

    id: int
    success: bool
    error_code: Optional[str] = None
    error_message: Optional[str] = None


@dataclass
class BulkStatusResult:
    """Result of a bulk publication status change."""

    status: str
    requested: int
    affected_rows: int
    results: List[BulkItemResult] = field(default_factory=list)

    @property
    def failed(self) -> List[BulkItemResult]:
        return [r for r in self.results if not r.success]


@dataclass
class BulkDeleteResult:
    """Result of a bulk deletion."""

    requested: int
    deleted: int
    results: List[BulkItemResult] = field(default_factory=list)

    @property
    def failed(self) -> List[BulkItemResult]:
        return [r for r in self.results if not r.success]


class BulkPublicationService:
    """
    Bulk status changes and deletions for mirrored records.

    Each record's mirror work is independent - failures don't abort the batch.
    """

    VALID_STATUSES = ["published", "draft"]

    def __init__(
        self,
        model=None,
        synchronizer: Optional[MirrorSynchronizer] = None,
        max_workers: Optional[int] = None,
    ):
        """
        Args:
            model: Record model (defaults to content.Post)
            synchronizer: Mirror synchronizer instance
            max_workers: Thread pool size (defaults to NEWSROOM_MIRROR_WORKERS)
        """
        self.model = model or apps.get_model("content", "Post")
        self.synchronizer = synchronizer or MirrorSynchronizer()
        self.max_workers = max_workers or settings.NEWSROOM_MIRROR_WORKERS

    def set_status(self, ids: Any, status: str) -> BulkStatusResult:
        """
        Publish or unpublish many records.

        Args:
            ids: Record ids
            status: 'published' or 'draft'

        Returns:
            BulkStatusResult; affected_rows counts rows updated by the
            relational statement

        Raises:
            ValidationError: Invalid status or ids. Nothing is written.
        """
        if status not in self.VALID_STATUSES:
            raise ValidationError(
                f"Invalid status: {status}. "
                f"Allowed: {', '.join(self.VALID_STATUSES)}"
            )

        clean_ids = validate_ids(ids)
        publish = status == "published"

        with transaction.atomic():
            affected_rows = self.model._default_manager.filter(
                pk__in=clean_ids
            ).update(is_published=publish, updated_at=timezone.now())

        audit_logger.info(
            f"Bulk status {status}: {affected_rows} of {len(clean_ids)} "
            f"{self.model._meta.verbose_name_plural} updated"
        )

        if publish:
            # Re-fetch so every worker writes the committed state
            records = {
                record.pk: record
                for record in self.model._default_manager.filter(
                    pk__in=clean_ids, is_published=True
                )
            }
            # Results follow request order, like the draft and delete paths
            tasks = [(pk, records[pk]) for pk in clean_ids if pk in records]
            results = self._run_parallel(self.synchronizer.sync, tasks)
        else:
            tasks = [(pk, pk) for pk in clean_ids]
            results = self._run_parallel(self.synchronizer.remove, tasks)

        self.synchronizer.mark_synced(
            self.model, [r.id for r in results if r.success]
        )

        return BulkStatusResult(
            status=status,
            requested=len(clean_ids),
            affected_rows=affected_rows,
            results=results,
        )

    def delete(self, ids: Any) -> BulkDeleteResult:
        """
        Delete many records, then remove their mirrors.

        Raises:
            ValidationError: Invalid ids. Nothing is deleted.
        """
        clean_ids = validate_ids(ids)

        with transaction.atomic():
            _, per_model = self.model._default_manager.filter(
                pk__in=clean_ids
            ).delete()
        deleted = per_model.get(self.model._meta.label, 0)

        audit_logger.info(
            f"Bulk delete: {deleted} of {len(clean_ids)} "
            f"{self.model._meta.verbose_name_plural} deleted"
        )

        tasks = [(pk, pk) for pk in clean_ids]
        results = self._run_parallel(self.synchronizer.remove, tasks)

        return BulkDeleteResult(
            requested=len(clean_ids), deleted=deleted, results=results
        )

    def _run_parallel(
        self, operation: Callable[[Any], Any], tasks: Sequence[Tuple[int, Any]]
    ) -> List[BulkItemResult]:
        """Run `operation` once per task on the pool. Results keep task order."""
        if not tasks:
            return []

        workers = min(self.max_workers, len(tasks))
        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="newsroom-mirror"
        ) as executor:
            return list(
                executor.map(lambda task: self._attempt(operation, *task), tasks)
            )

    def _attempt(
        self, operation: Callable[[Any], Any], pk: int, argument: Any
    ) -> BulkItemResult:
        """Run a single mirror operation, converting failures to a result."""
        try:
            operation(argument)
        except MirrorSyncError as e:
            logger.error(f"Bulk mirror operation failed for id={pk}: {e.message}")
            return BulkItemResult(
                id=pk,
                success=False,
                error_code=MIRROR_SYNC_FAILED,
                error_message=e.message,
            )
        except Exception as e:
            logger.exception(f"Unexpected bulk mirror error for id={pk}")
            return BulkItemResult(
                id=pk,
                success=False,
                error_code=MIRROR_SYNC_FAILED,
                error_message=str(e),
            )

        return BulkItemResult(id=pk, success=True)
