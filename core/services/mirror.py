"""
Post File Synchronizer.

Projects published records onto the filesystem mirror:

    <NEWSROOM_MIRROR_ROOT>/posts/<id>/
        metadata.json   merged snapshot of the row
        content_ar.md   primary body
        content.md      English body, only when present

The relational row is the source of truth. A mirror exists for a record iff
the record is published; any disagreement is settled in favour of the row,
either on the next mutation or by core.services.reconcile.

Usage:
    synchronizer = MirrorSynchronizer()
    synchronizer.sync_quietly(post)
"""

import json
import logging
from typing import Any, Dict, Iterable, Optional, Set

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils import timezone

from core.exceptions import MirrorSyncError
from core.mirror import AbstractMirrorBackend, LocalMirrorBackend, MirrorPathError

logger = logging.getLogger("newsroom.mirror")


class MirrorSynchronizer:
    """Keep the filesystem mirror of one entity type in step with its rows."""

    METADATA_FILE = "metadata.json"
    PRIMARY_BODY_FILE = "content_ar.md"
    SECONDARY_BODY_FILE = "content.md"

    def __init__(
        self,
        backend: Optional[AbstractMirrorBackend] = None,
        entity: str = "posts",
    ):
        self.backend = backend or LocalMirrorBackend()
        self.entity = entity

    def path_for(self, pk: int) -> str:
        return f"{self.entity}/{pk}"

    def snapshot(self, record: models.Model) -> Dict[str, Any]:
        """
        Metadata for `record` built from its concrete fields only.

        Foreign keys are stored as ids (`category_id`), so building a snapshot
        never queries the database and is safe inside worker threads.
        """
        data = {
            field.attname: getattr(record, field.attname)
            for field in record._meta.concrete_fields
        }
        url = getattr(record, "url", None)
        if url is not None:
            data["url"] = url
        data["mirrored_at"] = timezone.now()
        return data

    def _read_existing(self, pk: int) -> Dict[str, Any]:
        path = f"{self.path_for(pk)}/{self.METADATA_FILE}"
        try:
            existing = json.loads(self.backend.read_text(path))
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError:
            logger.warning(f"Replacing unreadable mirror metadata: {path}")
            return {}
        return existing if isinstance(existing, dict) else {}

    def sync(self, record: models.Model) -> None:
        """
        Write or remove the mirror of `record` according to `is_published`.

        Raises:
            MirrorSyncError: On any filesystem failure
        """
        if not record.is_published:
            self.remove(record.pk)
            return

        directory = self.path_for(record.pk)
        try:
            self.backend.mkdir(directory)

            metadata = self._read_existing(record.pk)
            metadata.update(self.snapshot(record))
            self.backend.write_text(
                f"{directory}/{self.METADATA_FILE}",
                json.dumps(metadata, cls=DjangoJSONEncoder, ensure_ascii=False, indent=2),
            )

            self.backend.write_text(
                f"{directory}/{self.PRIMARY_BODY_FILE}", record.body or ""
            )

            secondary_path = f"{directory}/{self.SECONDARY_BODY_FILE}"
            secondary_body = getattr(record, "body_en", "")
            if secondary_body:
                self.backend.write_text(secondary_path, secondary_body)
            elif self.backend.exists(secondary_path):
                self.backend.delete(secondary_path)
        except (OSError, MirrorPathError) as e:
            raise MirrorSyncError(
                f"Failed to write mirror for {self.entity} {record.pk}: {e}",
                details={"id": record.pk},
            ) from e

        logger.debug(f"Mirrored {self.entity} {record.pk}")

    def remove(self, pk: int) -> bool:
        """
        Delete the mirror directory of `pk`. Absent mirrors are a no-op.

        Returns:
            True if a directory was removed

        Raises:
            MirrorSyncError: On any filesystem failure
        """
        try:
            removed = self.backend.rmtree(self.path_for(pk))
        except (OSError, MirrorPathError) as e:
            raise MirrorSyncError(
                f"Failed to remove mirror for {self.entity} {pk}: {e}",
                details={"id": pk},
            ) from e

        if removed:
            logger.debug(f"Removed mirror of {self.entity} {pk}")
        return removed

    def read_metadata(self, pk: int) -> Optional[Dict[str, Any]]:
        """Parsed metadata.json of `pk`, or None when there is no mirror."""
        try:
            return json.loads(
                self.backend.read_text(f"{self.path_for(pk)}/{self.METADATA_FILE}")
            )
        except FileNotFoundError:
            return None

    def read_body(self, pk: int, secondary: bool = False) -> Optional[str]:
        name = self.SECONDARY_BODY_FILE if secondary else self.PRIMARY_BODY_FILE
        try:
            return self.backend.read_text(f"{self.path_for(pk)}/{name}")
        except FileNotFoundError:
            return None

    def exists(self, pk: int) -> bool:
        return self.backend.exists(self.path_for(pk))

    def mirrored_ids(self) -> Set[int]:
        """Ids of every mirror directory on disk."""
        return {
            int(entry.name)
            for entry in self.backend.list(self.entity)
            if entry.is_directory and entry.name.isdigit()
        }

    def foreign_entries(self) -> Set[str]:
        """Names under the entity directory that are not mirror directories."""
        return {
            entry.name
            for entry in self.backend.list(self.entity)
            if not (entry.is_directory and entry.name.isdigit())
        }

    def mark_synced(self, model, ids: Iterable[int]) -> int:
        """
        Stamp `mirror_synced_at` on rows whose mirror now matches.

        A plain UPDATE, so `updated_at` is left alone.
        """
        ids = list(ids)
        if not ids:
            return 0
        return model._default_manager.filter(pk__in=ids).update(
            mirror_synced_at=timezone.now()
        )

    # === Best-effort wrappers ===

    def sync_quietly(self, record: models.Model) -> bool:
        """
        sync() for mutation paths: failures are logged, never raised.

        Returns:
            True if the mirror now matches the row
        """
        try:
            self.sync(record)
        except MirrorSyncError as e:
            logger.error(f"Mirror sync failed: {e.message}")
            return False

        record.mirror_synced_at = timezone.now()
        type(record)._default_manager.filter(pk=record.pk).update(
            mirror_synced_at=record.mirror_synced_at
        )
        return True

    def remove_quietly(self, pk: int) -> bool:
        """remove() for mutation paths: failures are logged, never raised."""
        try:
            self.remove(pk)
        except MirrorSyncError as e:
            logger.error(f"Mirror removal failed: {e.message}")
            return False
        return True
