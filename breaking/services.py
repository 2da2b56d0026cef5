"""
Write paths for breaking news and last news.

Both collections share one service; the model decides whether activation is
exclusive.
"""

import logging
from typing import Any, Dict, Optional, Type

from django.db import transaction
from django.db.models import Avg, Count, F, Max, Q, QuerySet, Sum

from core.exceptions import NotFoundError, ValidationError
from core.services.active_set import ActiveSetEnforcer
from core.services.bulk import validate_ids
from core.services.slugs import save_with_unique_slug

from .models import FlaggedItem

audit_logger = logging.getLogger("newsroom.audit")

ITEM_WRITABLE_FIELDS = ("title", "body", "priority", "expires_at")


class FlaggedItemService:
    """Lifecycle of flagged items of one model."""

    def __init__(self, model: Type[FlaggedItem], user=None):
        self.model = model
        self.user = user
        self.enforcer = ActiveSetEnforcer(model, exclusive=model.EXCLUSIVE)

    @property
    def label(self) -> str:
        return self.model._meta.verbose_name

    def _audit(self, action: str, item_id: Any, **extra) -> None:
        details = " ".join(f"{key}={value}" for key, value in extra.items())
        audit_logger.info(
            f"{action} model={self.model._meta.label} id={item_id} "
            f"user_id={getattr(self.user, 'id', None)} {details}".rstrip()
        )

    # === Reads ===

    def list(self, params: Dict[str, Any]) -> QuerySet:
        queryset = self.model.objects.all()

        active = params.get("active")
        if active == "true":
            queryset = queryset.filter(is_active=True)
        elif active == "false":
            queryset = queryset.filter(is_active=False)

        search = (params.get("search") or "").strip()
        if search:
            queryset = queryset.filter(
                Q(title__icontains=search) | Q(body__icontains=search)
            )

        return queryset.order_by("-created_at")

    def get(self, pk: int) -> FlaggedItem:
        try:
            return self.model.objects.get(pk=pk)
        except self.model.DoesNotExist:
            raise NotFoundError(f"{self.label} not found: {pk}")

    def active(self, limit: Optional[int] = None) -> QuerySet:
        return self.enforcer.active(limit=limit)

    def current(self) -> Optional[FlaggedItem]:
        return self.enforcer.current()

    def record_view(self, pk: int) -> FlaggedItem:
        """Count a public view of an active item with one atomic UPDATE."""
        updated = self.enforcer.visible().filter(pk=pk).update(
            views=F("views") + 1
        )
        if not updated:
            raise NotFoundError(f"{self.label} not found: {pk}")
        return self.get(pk)

    def stats(self) -> Dict[str, Any]:
        summary = self.model.objects.aggregate(
            total=Count("id"),
            active=Count("id", filter=Q(is_active=True)),
            total_views=Sum("views"),
            avg_priority=Avg("priority"),
            max_priority=Max("priority"),
        )
        summary["inactive"] = summary["total"] - summary["active"]
        summary["total_views"] = summary["total_views"] or 0
        summary["top"] = list(
            self.model.objects.order_by("-views").values(
                "id", "title", "views", "priority", "is_active"
            )[:5]
        )
        return summary

    # === Writes ===

    def create(self, data: Dict[str, Any]) -> FlaggedItem:
        """
        Create an item, active unless `is_active` is false. Activating a
        breaking-news item deactivates the previous one in the same
        transaction.
        """
        if not data.get("title") or not data.get("body"):
            raise ValidationError("Title and body are required")

        item = self.model()
        for name in ITEM_WRITABLE_FIELDS:
            if name in data:
                setattr(item, name, data[name])

        activate = bool(data.get("is_active", True))

        with transaction.atomic():
            save_with_unique_slug(item, item.title, placeholder=self.model.SLUG_PLACEHOLDER)
            if activate:
                self.enforcer.activate(item.pk)
                item.refresh_from_db(fields=["is_active", "updated_at"])

        self._audit("ITEM_CREATED", item.pk, active=item.is_active)
        return item

    def update(self, pk: int, data: Dict[str, Any]) -> FlaggedItem:
        item = self.get(pk)
        old_title = item.title

        for name in ITEM_WRITABLE_FIELDS:
            if name in data:
                setattr(item, name, data[name])

        if not item.title or not item.body:
            raise ValidationError("Title and body cannot be empty")

        with transaction.atomic():
            # Never write is_active from this stale instance
            fields = [*ITEM_WRITABLE_FIELDS, "updated_at"]
            if item.title != old_title:
                save_with_unique_slug(
                    item,
                    item.title,
                    placeholder=self.model.SLUG_PLACEHOLDER,
                    update_fields=[*fields, "slug"],
                )
            else:
                item.save(update_fields=fields)

            if "is_active" in data:
                if data["is_active"]:
                    self.enforcer.activate(pk)
                else:
                    self.enforcer.deactivate(pk)
                item.refresh_from_db(fields=["is_active", "updated_at"])

        self._audit("ITEM_UPDATED", pk, active=item.is_active)
        return item

    def toggle(self, pk: int) -> FlaggedItem:
        is_active = self.enforcer.toggle(pk)
        self._audit("ITEM_TOGGLED", pk, active=is_active)
        return self.get(pk)

    def delete(self, pk: int) -> None:
        deleted, _ = self.model.objects.filter(pk=pk).delete()
        if not deleted:
            raise NotFoundError(f"{self.label} not found: {pk}")
        self._audit("ITEM_DELETED", pk)

    def bulk_set_active(self, ids: Any, is_active: Any) -> int:
        """
        Raises:
            ValidationError: Invalid ids, non-boolean flag, or several ids
                activated on breaking news
        """
        if not isinstance(is_active, bool):
            raise ValidationError("is_active must be a boolean")

        affected = self.enforcer.bulk_set_active(ids, is_active)
        self._audit("ITEM_BULK_STATUS", ids, active=is_active, affected=affected)
        return affected

    def bulk_delete(self, ids: Any) -> int:
        clean_ids = validate_ids(ids)
        deleted, _ = self.model.objects.filter(pk__in=clean_ids).delete()
        self._audit("ITEM_BULK_DELETE", clean_ids, deleted=deleted)
        return deleted
