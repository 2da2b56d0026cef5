"""Tests for slug uniqueness resolution."""

from unittest import mock

from django.db import IntegrityError
from django.test import TestCase

from content.models import Category
from content.tests.factories import CategoryFactory
from core.exceptions import SlugConflictError
from core.services import slugs
from core.services.slugs import ensure_unique, save_with_unique_slug


class EnsureUniqueTest(TestCase):
    """ensure_unique picks the first free suffix."""

    def test_free_candidate_is_returned_unchanged(self):
        self.assertEqual(ensure_unique("politics", Category), "politics")

    def test_first_collision_gets_suffix_two(self):
        CategoryFactory(slug="tjrbh")
        self.assertEqual(ensure_unique("tjrbh", Category), "tjrbh-2")

    def test_skips_taken_suffixes(self):
        for slug in ["sport", "sport-2", "sport-3"]:
            CategoryFactory(slug=slug)
        self.assertEqual(ensure_unique("sport", Category), "sport-4")

    def test_fills_gap(self):
        CategoryFactory(slug="sport")
        CategoryFactory(slug="sport-3")
        self.assertEqual(ensure_unique("sport", Category), "sport-2")

    def test_prefix_match_is_not_a_collision(self):
        CategoryFactory(slug="sports")
        self.assertEqual(ensure_unique("sport", Category), "sport")

    def test_own_slug_is_not_taken(self):
        category = CategoryFactory(slug="economy")
        self.assertEqual(
            ensure_unique("economy", Category, exclude_id=category.pk), "economy"
        )


class SaveWithUniqueSlugTest(TestCase):
    """save_with_unique_slug derives, resolves and saves."""

    def test_same_title_twice(self):
        first = save_with_unique_slug(Category(name="تجربة"), "تجربة")
        second = save_with_unique_slug(Category(name="تجربة"), "تجربة")

        self.assertEqual(first.slug, "tjrbh")
        self.assertEqual(second.slug, "tjrbh-2")

    def test_placeholder_for_untransliterable_title(self):
        category = save_with_unique_slug(
            Category(name="؟"), "؟", placeholder=Category.SLUG_PLACEHOLDER
        )
        self.assertEqual(category.slug, "category")

    def test_resave_keeps_own_slug(self):
        category = save_with_unique_slug(Category(name="World"), "World")
        save_with_unique_slug(category, "World")
        self.assertEqual(category.slug, "world")

    def test_retries_when_slug_taken_concurrently(self):
        CategoryFactory(slug="culture")
        real_ensure_unique = slugs.ensure_unique
        calls = []

        def stale_then_real(candidate, model, exclude_id=None):
            calls.append(candidate)
            if len(calls) == 1:
                # Another writer took "culture" after our check
                return "culture"
            return real_ensure_unique(candidate, model, exclude_id=exclude_id)

        with mock.patch.object(slugs, "ensure_unique", side_effect=stale_then_real):
            category = save_with_unique_slug(Category(name="Culture"), "Culture")

        self.assertEqual(len(calls), 2)
        self.assertEqual(category.slug, "culture-2")
        self.assertEqual(Category.objects.filter(slug__startswith="culture").count(), 2)

    def test_gives_up_after_max_attempts(self):
        CategoryFactory(slug="science")

        with mock.patch.object(slugs, "ensure_unique", return_value="science"):
            with self.assertRaises(SlugConflictError) as ctx:
                save_with_unique_slug(
                    Category(name="Science"), "Science", max_attempts=3
                )

        self.assertEqual(ctx.exception.details, {"candidate": "science"})
        self.assertEqual(Category.objects.filter(slug="science").count(), 1)

    def test_unrelated_integrity_error_propagates(self):
        with self.assertRaises(IntegrityError):
            save_with_unique_slug(Category(name=None), "Nameless")
