"""Tests for the bulk operation coordinator."""

from django.test import SimpleTestCase, override_settings

from content.models import Post
from content.tests.factories import PostFactory
from core.exceptions import MirrorSyncError, ValidationError
from core.services.bulk import (
    MIRROR_SYNC_FAILED,
    BulkPublicationService,
    validate_ids,
)
from core.services.mirror import MirrorSynchronizer
from core.tests.base import NewsroomTestCase


class FlakySynchronizer(MirrorSynchronizer):
    """Fails mirror work for selected ids."""

    def __init__(self, failing_ids, **kwargs):
        super().__init__(**kwargs)
        self.failing_ids = set(failing_ids)

    def sync(self, record):
        if record.pk in self.failing_ids:
            raise MirrorSyncError(f"disk full for {record.pk}", details={"id": record.pk})
        super().sync(record)

    def remove(self, pk):
        if pk in self.failing_ids:
            raise RuntimeError(f"unexpected failure for {pk}")
        return super().remove(pk)


class ValidateIdsTest(SimpleTestCase):
    """Client id list validation."""

    def test_accepts_ints_and_digit_strings(self):
        self.assertEqual(validate_ids([3, "4", " 5 "]), [3, 4, 5])

    def test_duplicates_collapse_in_order(self):
        self.assertEqual(validate_ids([2, 1, 2, "1"]), [2, 1])

    def test_rejects_non_list(self):
        for value in [None, "1,2", {"ids": [1]}, 7]:
            with self.assertRaises(ValidationError):
                validate_ids(value)

    def test_rejects_empty(self):
        with self.assertRaises(ValidationError):
            validate_ids([])

    def test_rejects_invalid_items(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_ids([1, 0, -3, "x", True, 2.5, None])

        self.assertEqual(ctx.exception.details, {"invalid": [0, -3, "x", True, 2.5, None]})

    @override_settings(NEWSROOM_BULK_MAX_IDS=3)
    def test_rejects_too_many(self):
        with self.assertRaises(ValidationError):
            validate_ids([1, 2, 3, 4])


class BulkPublicationServiceTest(NewsroomTestCase):
    """Relational writes first, then independent mirror work."""

    mirror_dir_name = "posts_mirror_test_bulk"

    def setUp(self):
        super().setUp()
        self.synchronizer = MirrorSynchronizer()
        self.service = BulkPublicationService(Post, synchronizer=self.synchronizer)

    def test_publish_writes_rows_and_mirrors(self):
        posts = [PostFactory() for _ in range(3)]
        ids = [p.pk for p in posts]

        result = self.service.set_status(ids, "published")

        self.assertEqual(result.affected_rows, 3)
        self.assertEqual(result.requested, 3)
        self.assertEqual(result.failed, [])
        self.assertEqual([r.id for r in result.results], ids)
        self.assertEqual(Post.objects.filter(pk__in=ids, is_published=True).count(), 3)
        for pk in ids:
            self.assertTrue(self.synchronizer.exists(pk))

    def test_publish_results_follow_request_order(self):
        first, second, third = [PostFactory() for _ in range(3)]
        ids = [second.pk, third.pk, first.pk]

        result = self.service.set_status(ids, "published")

        self.assertEqual([r.id for r in result.results], ids)

    def test_publish_stamps_mirror_synced_at(self):
        post = PostFactory()
        self.service.set_status([post.pk], "published")

        post.refresh_from_db()
        self.assertIsNotNone(post.mirror_synced_at)
        self.assertGreaterEqual(post.mirror_synced_at, post.updated_at)

    def test_unpublish_removes_mirrors(self):
        posts = [PostFactory(published=True) for _ in range(2)]
        for post in posts:
            self.synchronizer.sync(post)

        result = self.service.set_status([p.pk for p in posts], "draft")

        self.assertEqual(result.affected_rows, 2)
        for post in posts:
            self.assertFalse(self.synchronizer.exists(post.pk))
            post.refresh_from_db()
            self.assertFalse(post.is_published)

    def test_unknown_ids_are_not_counted(self):
        post = PostFactory()
        result = self.service.set_status([post.pk, 99999], "published")

        self.assertEqual(result.requested, 2)
        self.assertEqual(result.affected_rows, 1)
        self.assertFalse(self.synchronizer.exists(99999))

    def test_invalid_status_writes_nothing(self):
        post = PostFactory()

        with self.assertRaises(ValidationError):
            self.service.set_status([post.pk], "archived")

        post.refresh_from_db()
        self.assertFalse(post.is_published)

    def test_invalid_ids_write_nothing(self):
        post = PostFactory()

        with self.assertRaises(ValidationError):
            self.service.set_status([post.pk, "abc"], "published")

        post.refresh_from_db()
        self.assertFalse(post.is_published)

    def test_mirror_failure_is_isolated(self):
        posts = [PostFactory() for _ in range(4)]
        broken = posts[1]
        service = BulkPublicationService(
            Post, synchronizer=FlakySynchronizer([broken.pk])
        )

        result = service.set_status([p.pk for p in posts], "published")

        # Row writes are unaffected by the mirror failure
        self.assertEqual(result.affected_rows, 4)
        self.assertEqual(Post.objects.filter(is_published=True).count(), 4)

        self.assertEqual(len(result.failed), 1)
        failure = result.failed[0]
        self.assertEqual(failure.id, broken.pk)
        self.assertEqual(failure.error_code, MIRROR_SYNC_FAILED)
        self.assertIn("disk full", failure.error_message)

        for post in posts:
            self.assertEqual(self.synchronizer.exists(post.pk), post.pk != broken.pk)

        broken.refresh_from_db()
        self.assertIsNone(broken.mirror_synced_at)

    def test_unexpected_worker_error_is_isolated(self):
        posts = [PostFactory(published=True) for _ in range(3)]
        for post in posts:
            self.synchronizer.sync(post)
        service = BulkPublicationService(
            Post, synchronizer=FlakySynchronizer([posts[0].pk])
        )

        result = service.set_status([p.pk for p in posts], "draft")

        self.assertEqual(result.affected_rows, 3)
        self.assertEqual([r.id for r in result.failed], [posts[0].pk])
        self.assertTrue(self.synchronizer.exists(posts[0].pk))
        self.assertFalse(self.synchronizer.exists(posts[1].pk))

    def test_delete_removes_rows_and_mirrors(self):
        posts = [PostFactory(published=True) for _ in range(3)]
        for post in posts:
            self.synchronizer.sync(post)
        ids = [p.pk for p in posts[:2]]

        result = self.service.delete(ids + [99999])

        self.assertEqual(result.requested, 3)
        self.assertEqual(result.deleted, 2)
        self.assertFalse(Post.objects.filter(pk__in=ids).exists())
        for pk in ids:
            self.assertFalse(self.synchronizer.exists(pk))
        self.assertTrue(self.synchronizer.exists(posts[2].pk))

    def test_delete_invalid_ids_deletes_nothing(self):
        post = PostFactory()
        with self.assertRaises(ValidationError):
            self.service.delete([post.pk, -1])
        self.assertTrue(Post.objects.filter(pk=post.pk).exists())

    def test_many_records_with_small_pool(self):
        posts = [PostFactory() for _ in range(12)]
        service = BulkPublicationService(Post, synchronizer=self.synchronizer, max_workers=2)

        result = service.set_status([p.pk for p in posts], "published")

        self.assertEqual(result.affected_rows, 12)
        self.assertEqual(self.synchronizer.mirrored_ids(), {p.pk for p in posts})
