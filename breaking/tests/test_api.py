"""API tests for breaking news and last news."""

from django.urls import reverse
from rest_framework import status

from breaking.models import BreakingNews, LastNews
from breaking.tests.factories import BreakingNewsFactory, LastNewsFactory
from core.tests.base import NewsroomAPITestCase


class BreakingNewsAPITest(NewsroomAPITestCase):
    """Breaking news writes are admin-only; activation is exclusive."""

    mirror_dir_name = "posts_mirror_test_breaking_api"

    def test_latest_is_public(self):
        item = BreakingNewsFactory(active=True)

        response = self.client.get(reverse("breaking-news-latest"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["id"], item.pk)
        self.assertEqual(response.data["data"]["url"], f"/breaking/{item.pk}/{item.slug}")

    def test_latest_without_active_item(self):
        response = self.client.get(reverse("breaking-news-latest"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertNotIn("data", response.data)
        self.assertEqual(response.data["message"], "No active item")

    def test_admin_creates_and_replaces_active(self):
        old = BreakingNewsFactory(active=True)
        self.authenticate(self.admin)

        response = self.client.post(
            reverse("breaking-news-list"),
            {"title": "Quake hits coast", "body": "Details to follow"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data["data"]["is_active"])
        self.assertEqual(response.data["data"]["slug"], "quake-hits-coast")
        old.refresh_from_db()
        self.assertFalse(old.is_active)

    def test_editor_cannot_write(self):
        self.authenticate(self.editor)

        response = self.client.post(
            reverse("breaking-news-list"), {"title": "T", "body": "B"}, format="json"
        )

        self.assertEnvelopeError(response, status.HTTP_403_FORBIDDEN, "PERMISSION_DENIED")
        self.assertFalse(BreakingNews.objects.exists())

    def test_editor_can_list(self):
        BreakingNewsFactory()
        self.authenticate(self.editor)

        response = self.client.get(reverse("breaking-news-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["pagination"]["total"], 1)

    def test_author_cannot_list(self):
        self.authenticate(self.author)
        response = self.client.get(reverse("breaking-news-list"))
        self.assertEnvelopeError(response, status.HTTP_403_FORBIDDEN, "PERMISSION_DENIED")

    def test_toggle(self):
        other = BreakingNewsFactory(active=True)
        item = BreakingNewsFactory()
        self.authenticate(self.admin)

        response = self.client.patch(reverse("breaking-news-toggle", args=[item.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["data"]["is_active"])
        self.assertEqual(response.data["message"], "Item activated")
        other.refresh_from_db()
        self.assertFalse(other.is_active)

    def test_bulk_activate_several_rejected(self):
        items = [BreakingNewsFactory() for _ in range(2)]
        self.authenticate(self.admin)

        response = self.client.patch(
            reverse("breaking-news-bulk-status"),
            {"ids": [i.pk for i in items], "is_active": True},
            format="json",
        )

        self.assertEnvelopeError(response, status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR")
        self.assertFalse(BreakingNews.objects.filter(is_active=True).exists())

    def test_bulk_deactivate(self):
        items = [BreakingNewsFactory(active=True) for _ in range(2)]
        self.authenticate(self.admin)

        response = self.client.patch(
            reverse("breaking-news-bulk-status"),
            {"ids": [i.pk for i in items], "is_active": False},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["affected_rows"], 2)

    def test_public_read_counts_views(self):
        item = BreakingNewsFactory(active=True)

        response = self.client.get(reverse("breaking-news-public", args=[item.pk, "whatever"]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["views"], 1)

    def test_public_read_of_inactive_item(self):
        item = BreakingNewsFactory()
        response = self.client.get(reverse("breaking-news-public", args=[item.pk, item.slug]))
        self.assertEnvelopeError(response, status.HTTP_404_NOT_FOUND, "NOT_FOUND")

    def test_missing_item(self):
        self.authenticate(self.admin)
        response = self.client.get(reverse("breaking-news-detail", args=[404]))
        self.assertEnvelopeError(response, status.HTTP_404_NOT_FOUND, "NOT_FOUND")


class LastNewsAPITest(NewsroomAPITestCase):
    """Last news is editor-writable and may have several active items."""

    mirror_dir_name = "posts_mirror_test_last_news_api"

    def test_editor_creates_items_without_deactivating(self):
        self.authenticate(self.editor)

        for title in ("First", "Second"):
            response = self.client.post(
                reverse("last-news-list"), {"title": title, "body": "text"}, format="json"
            )
            self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        self.assertEqual(LastNews.objects.filter(is_active=True).count(), 2)

    def test_active_is_public_and_capped(self):
        for priority in range(7):
            LastNewsFactory(active=True, priority=priority)

        response = self.client.get(reverse("last-news-active"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        priorities = [item["priority"] for item in response.data["data"]]
        self.assertEqual(priorities, [6, 5, 4, 3, 2])

    def test_active_limit_parameter(self):
        for _ in range(3):
            LastNewsFactory(active=True)

        response = self.client.get(reverse("last-news-active"), {"limit": "2"})
        self.assertEqual(len(response.data["data"]), 2)

        response = self.client.get(reverse("last-news-active"), {"limit": "abc"})
        self.assertEnvelopeError(response, status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR")

    def test_bulk_activate_many(self):
        items = [LastNewsFactory() for _ in range(3)]
        self.authenticate(self.editor)

        response = self.client.patch(
            reverse("last-news-bulk-status"),
            {"ids": [i.pk for i in items], "is_active": True},
            format="json",
        )

        self.assertEqual(response.data["data"]["affected_rows"], 3)

    def test_bulk_delete(self):
        items = [LastNewsFactory() for _ in range(2)]
        self.authenticate(self.editor)

        response = self.client.delete(
            reverse("last-news-bulk"), {"ids": [i.pk for i in items]}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(LastNews.objects.exists())

    def test_stats_requires_editor(self):
        LastNewsFactory(views=3)

        self.assertEqual(
            self.client.get(reverse("last-news-stats")).status_code,
            status.HTTP_403_FORBIDDEN,
        )

        self.authenticate(self.editor)
        response = self.client.get(reverse("last-news-stats"))
        self.assertEqual(response.data["data"]["total_views"], 3)
