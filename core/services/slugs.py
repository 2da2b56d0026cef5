"""
Slug uniqueness resolution.

Candidates come from core.text.generate_slug. Uniqueness is guaranteed by the
UNIQUE constraint on each model's `slug` column: the resolver picks the first
free `<candidate>`, `<candidate>-2`, `<candidate>-3`, ... and the save is
retried inside a savepoint when a concurrent writer takes the same value
between the check and the insert.

Usage:
    post.title = "تجربة"
    save_with_unique_slug(post, post.title)
"""

import logging
from typing import Optional, Type

from django.conf import settings
from django.db import IntegrityError, models, transaction

from core.exceptions import SlugConflictError
from core.text import DEFAULT_PLACEHOLDER, generate_slug

logger = logging.getLogger(__name__)


def ensure_unique(
    candidate: str,
    model: Type[models.Model],
    exclude_id: Optional[int] = None,
) -> str:
    """
    Return `candidate` or the first free `candidate-N` (N >= 2) in `model`.

    All taken slugs sharing the prefix are fetched in one query.

    Args:
        candidate: Pre-uniqueness slug
        model: Model class with a unique `slug` field
        exclude_id: Primary key whose own slug does not count as taken

    Returns:
        A slug not currently used by any other row
    """
    queryset = model._default_manager.filter(slug__startswith=candidate)
    if exclude_id is not None:
        queryset = queryset.exclude(pk=exclude_id)

    taken = set(queryset.values_list("slug", flat=True))

    slug = candidate
    counter = 1
    while slug in taken:
        counter += 1
        slug = f"{candidate}-{counter}"

    return slug


def _slug_taken(instance: models.Model, slug: str) -> bool:
    queryset = type(instance)._default_manager.filter(slug=slug)
    if instance.pk is not None:
        queryset = queryset.exclude(pk=instance.pk)
    return queryset.exists()


def save_with_unique_slug(
    instance: models.Model,
    title: str,
    placeholder: str = DEFAULT_PLACEHOLDER,
    max_attempts: Optional[int] = None,
    **save_kwargs,
) -> models.Model:
    """
    Assign a unique slug derived from `title` and save `instance`.

    Each attempt runs in its own savepoint. An IntegrityError caused by the
    slug column triggers a fresh resolution; any other IntegrityError
    propagates unchanged.

    Raises:
        SlugConflictError: If every attempt collided
    """
    attempts = max_attempts or settings.NEWSROOM_SLUG_MAX_ATTEMPTS
    candidate = generate_slug(title, placeholder=placeholder)
    model = type(instance)

    for attempt in range(1, attempts + 1):
        instance.slug = ensure_unique(candidate, model, exclude_id=instance.pk)
        try:
            with transaction.atomic():
                instance.save(**save_kwargs)
            return instance
        except IntegrityError:
            if not _slug_taken(instance, instance.slug):
                raise
            logger.warning(
                f"Slug '{instance.slug}' taken concurrently on {model._meta.label} "
                f"(attempt {attempt}/{attempts})"
            )

    raise SlugConflictError(
        f"Could not allocate a unique slug for '{candidate}' "
        f"after {attempts} attempts",
        details={"candidate": candidate},
    )
