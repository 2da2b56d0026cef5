"""Factory Boy fixtures for breaking app tests."""

from datetime import timedelta

import factory
from django.utils import timezone

from breaking.models import BreakingNews, LastNews


class FlaggedItemFactory(factory.django.DjangoModelFactory):
    """
    Base factory for flagged items.

    Rows are written directly and start inactive; activation is covered by
    ActiveSetEnforcer.
    """

    class Meta:
        abstract = True

    title = factory.Sequence(lambda n: f"Urgent update {n}")
    slug = factory.Sequence(lambda n: f"urgent-update-{n}")
    body = factory.Faker("sentence", nb_words=20)
    priority = 1
    is_active = False
    views = 0

    class Params:
        active = factory.Trait(is_active=True)
        expired = factory.Trait(
            is_active=True,
            expires_at=factory.LazyFunction(lambda: timezone.now() - timedelta(hours=1)),
        )


class BreakingNewsFactory(FlaggedItemFactory):
    class Meta:
        model = BreakingNews


class LastNewsFactory(FlaggedItemFactory):
    class Meta:
        model = LastNews
