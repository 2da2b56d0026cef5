"""
Active-Set Invariant Enforcer.

Keeps the "active" flag of a bounded collection consistent:

- exclusive collections (breaking news) have at most one active row;
- list collections (last news) may have many, reads return the top N.

Activation of an exclusive collection is a single UPDATE that sets
`is_active = (id = :target)` on the target and every currently active row,
so two concurrent activations can never leave two rows active.

Usage:
    enforcer = ActiveSetEnforcer(BreakingNews)
    enforcer.activate(9)
    item = enforcer.current()
"""

import logging
from typing import Iterable, List, Optional, Type

from django.conf import settings
from django.db import models, transaction
from django.db.models import BooleanField, Case, Q, QuerySet, Value, When
from django.utils import timezone

from core.exceptions import NotFoundError, ValidationError
from core.services.bulk import validate_ids

logger = logging.getLogger(__name__)


class ActiveSetEnforcer:
    """
    Enforce the active-flag invariant on `model`.

    The model needs `is_active`, `priority`, `expires_at`, `created_at` and
    `updated_at` fields.
    """

    def __init__(
        self,
        model: Type[models.Model],
        exclusive: bool = True,
        max_items: Optional[int] = None,
    ):
        """
        Args:
            model: Flagged item model
            exclusive: True for "at most one active row"
            max_items: Cap for active() reads (defaults to NEWSROOM_ACTIVE_MAX_ITEMS)
        """
        self.model = model
        self.exclusive = exclusive
        self.max_items = max_items or settings.NEWSROOM_ACTIVE_MAX_ITEMS

    @property
    def objects(self):
        return self.model._default_manager

    def _lock(self, pk: int) -> models.Model:
        """Lock and return the row, or raise NotFoundError."""
        try:
            return self.objects.select_for_update().get(pk=pk)
        except self.model.DoesNotExist:
            raise NotFoundError(
                f"{self.model._meta.verbose_name} not found: {pk}"
            )

    def activate(self, pk: int) -> None:
        """
        Flag `pk` active; for exclusive collections clear every other row in
        the same statement.

        Raises:
            NotFoundError: If `pk` does not exist
        """
        with transaction.atomic():
            self._lock(pk)
            now = timezone.now()

            if self.exclusive:
                self.objects.filter(Q(pk=pk) | Q(is_active=True)).update(
                    is_active=Case(
                        When(pk=pk, then=Value(True)),
                        default=Value(False),
                        output_field=BooleanField(),
                    ),
                    updated_at=now,
                )
            else:
                self.objects.filter(pk=pk).update(is_active=True, updated_at=now)

        logger.info(f"Activated {self.model._meta.label} id={pk}")

    def deactivate(self, pk: int) -> None:
        """
        Clear the flag on `pk` only.

        Raises:
            NotFoundError: If `pk` does not exist
        """
        updated = self.objects.filter(pk=pk).update(
            is_active=False, updated_at=timezone.now()
        )
        if not updated:
            raise NotFoundError(f"{self.model._meta.verbose_name} not found: {pk}")

        logger.info(f"Deactivated {self.model._meta.label} id={pk}")

    def toggle(self, pk: int) -> bool:
        """
        Activate an inactive row, deactivate an active one.

        Returns:
            The new value of `is_active`
        """
        with transaction.atomic():
            item = self._lock(pk)
            if item.is_active:
                self.deactivate(pk)
                return False
            self.activate(pk)
            return True

    def bulk_set_active(self, ids: Iterable, is_active: bool) -> int:
        """
        Set the flag on many rows in one statement.

        Exclusive collections accept at most one id for activation.

        Returns:
            Number of rows updated

        Raises:
            ValidationError: Invalid ids, or several ids activated on an
                exclusive collection
        """
        clean_ids = validate_ids(ids)

        if not is_active:
            return self.objects.filter(pk__in=clean_ids).update(
                is_active=False, updated_at=timezone.now()
            )

        if self.exclusive:
            if len(clean_ids) > 1:
                raise ValidationError(
                    "Only one item can be active at a time",
                    details={"ids": clean_ids},
                )
            if not self.objects.filter(pk=clean_ids[0]).exists():
                return 0
            self.activate(clean_ids[0])
            return 1

        return self.objects.filter(pk__in=clean_ids).update(
            is_active=True, updated_at=timezone.now()
        )

    def visible(self) -> QuerySet:
        """
        Active, unexpired rows.

        Expired rows are excluded without touching their `is_active` flag.
        """
        return self.objects.filter(is_active=True).filter(
            Q(expires_at__isnull=True) | Q(expires_at__gt=timezone.now())
        )

    def active(self, limit: Optional[int] = None) -> QuerySet:
        """Visible rows ordered by priority then recency, capped at max_items."""
        cap = self.max_items if limit is None else min(max(limit, 0), self.max_items)
        return self.visible().order_by("-priority", "-created_at")[:cap]

    def current(self) -> Optional[models.Model]:
        """The single item to display, or None."""
        return self.active(limit=1).first()

    def active_ids(self) -> List[int]:
        """Ids flagged active regardless of expiry."""
        return list(
            self.objects.filter(is_active=True).values_list("pk", flat=True)
        )
