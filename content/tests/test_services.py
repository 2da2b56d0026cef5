"""Tests for post and category services."""

from django.test import override_settings

from accounts.tests.factories import EditorialUserFactory
from content.models import Category, Post
from content.services import CategoryService, PostService
from content.tests.factories import CategoryFactory, PostFactory
from core.exceptions import ConflictError, NotFoundError, ValidationError
from core.services.mirror import MirrorSynchronizer
from core.tests.base import NewsroomTestCase


class PostServiceTestCase(NewsroomTestCase):
    mirror_dir_name = "posts_mirror_test_post_service"

    def setUp(self):
        super().setUp()
        self.author = EditorialUserFactory()
        self.other_author = EditorialUserFactory()
        self.editor = EditorialUserFactory(editor=True)
        self.category = CategoryFactory()
        self.synchronizer = MirrorSynchronizer()

    def service(self, user):
        return PostService(user=user, synchronizer=self.synchronizer)

    def post_data(self, **overrides):
        data = {
            "title": "عاجل من غزة",
            "body": "word " * 450,
            "category": self.category.pk,
        }
        data.update(overrides)
        return data


class PostCreateTest(PostServiceTestCase):
    """Creating posts derives slug and reading time."""

    def test_editor_publishes_and_mirrors(self):
        post = self.service(self.editor).create(self.post_data(is_published=True))

        self.assertEqual(post.slug, "aajl-mn-ghzh")
        self.assertEqual(post.reading_time, 3)
        self.assertTrue(post.is_published)
        self.assertEqual(post.author, self.editor)
        self.assertTrue(self.synchronizer.exists(post.pk))

        post.refresh_from_db()
        self.assertIsNotNone(post.mirror_synced_at)

    def test_draft_has_no_mirror(self):
        post = self.service(self.editor).create(self.post_data())

        self.assertFalse(post.is_published)
        self.assertFalse(self.synchronizer.exists(post.pk))

    def test_author_publish_downgraded_to_draft(self):
        with self.assertLogs("newsroom.audit", level="WARNING") as logs:
            post = self.service(self.author).create(
                self.post_data(is_published=True, is_featured=True)
            )

        self.assertFalse(post.is_published)
        self.assertFalse(post.is_featured)
        self.assertFalse(self.synchronizer.exists(post.pk))
        self.assertTrue(any("PUBLISH_DOWNGRADED" in line for line in logs.output))

    def test_same_title_gets_suffix(self):
        first = self.service(self.editor).create(self.post_data(title="تجربة"))
        second = self.service(self.editor).create(self.post_data(title="تجربة"))

        self.assertEqual(first.slug, "tjrbh")
        self.assertEqual(second.slug, "tjrbh-2")

    def test_untransliterable_title_uses_placeholder(self):
        post = self.service(self.editor).create(self.post_data(title="؟؟"))
        self.assertEqual(post.slug, "post")

    def test_missing_body(self):
        with self.assertRaises(ValidationError) as ctx:
            self.service(self.editor).create(self.post_data(body=""))

        self.assertIn("body", ctx.exception.details)
        self.assertFalse(Post.objects.exists())

    def test_unknown_category(self):
        with self.assertRaises(ValidationError):
            self.service(self.editor).create(self.post_data(category=9999))
        self.assertFalse(Post.objects.exists())

    @override_settings(NEWSROOM_READING_SPEED_WPM=100)
    def test_reading_time_uses_configured_speed(self):
        post = self.service(self.editor).create(self.post_data(body="w " * 150))
        self.assertEqual(post.reading_time, 2)


class PostUpdateTest(PostServiceTestCase):
    """Updates keep the row and its mirror consistent."""

    def test_title_change_regenerates_slug_and_mirror(self):
        post = self.service(self.editor).create(
            self.post_data(title="First", is_published=True)
        )

        updated = self.service(self.editor).update(post.pk, {"title": "Second"})

        self.assertEqual(updated.slug, "second")
        self.assertEqual(self.synchronizer.read_metadata(post.pk)["slug"], "second")

    def test_unchanged_title_keeps_slug(self):
        post = self.service(self.editor).create(self.post_data(title="Stable"))
        updated = self.service(self.editor).update(post.pk, {"excerpt": "short"})
        self.assertEqual(updated.slug, "stable")

    def test_body_change_recomputes_reading_time(self):
        post = self.service(self.editor).create(self.post_data(body="one two"))
        self.assertEqual(post.reading_time, 1)

        updated = self.service(self.editor).update(post.pk, {"body": "w " * 1000})
        self.assertEqual(updated.reading_time, 5)

    def test_unpublish_removes_mirror(self):
        post = self.service(self.editor).create(self.post_data(is_published=True))

        self.service(self.editor).update(post.pk, {"is_published": False})

        self.assertFalse(self.synchronizer.exists(post.pk))

    def test_author_edits_own_draft(self):
        post = PostFactory(author=self.author, category=self.category)
        updated = self.service(self.author).update(post.pk, {"excerpt": "mine"})
        self.assertEqual(updated.excerpt, "mine")

    def test_author_cannot_publish_own_draft(self):
        post = PostFactory(author=self.author, category=self.category)

        updated = self.service(self.author).update(post.pk, {"is_published": True})

        self.assertFalse(updated.is_published)
        self.assertFalse(self.synchronizer.exists(post.pk))

    def test_author_cannot_change_featured(self):
        post = PostFactory(author=self.author, category=self.category, featured=True)
        updated = self.service(self.author).update(post.pk, {"is_featured": False})
        self.assertTrue(updated.is_featured)

    def test_author_cannot_touch_other_authors_post(self):
        post = PostFactory(author=self.other_author, category=self.category)

        with self.assertRaises(NotFoundError):
            self.service(self.author).update(post.pk, {"title": "Hijack"})

        post.refresh_from_db()
        self.assertNotEqual(post.title, "Hijack")

    def test_empty_title_rejected(self):
        post = PostFactory(category=self.category)
        with self.assertRaises(ValidationError):
            self.service(self.editor).update(post.pk, {"title": ""})

    def test_missing_post(self):
        with self.assertRaises(NotFoundError):
            self.service(self.editor).update(9999, {"title": "x"})


class PostReadDeleteTest(PostServiceTestCase):
    """Reads, view counting, featuring and deletion."""

    def test_record_view_increments(self):
        post = PostFactory(published=True, views=0)

        for _ in range(3):
            self.service(None).record_view(post.pk)

        post.refresh_from_db()
        self.assertEqual(post.views, 3)

    def test_record_view_of_draft_is_not_found(self):
        post = PostFactory(views=0)
        with self.assertRaises(NotFoundError):
            self.service(None).record_view(post.pk)
        post.refresh_from_db()
        self.assertEqual(post.views, 0)

    def test_draft_hidden_from_anonymous_and_other_authors(self):
        post = PostFactory(author=self.author)

        with self.assertRaises(NotFoundError):
            self.service(None).get(post.pk)
        with self.assertRaises(NotFoundError):
            self.service(self.other_author).get(post.pk)

        self.assertEqual(self.service(self.author).get(post.pk), post)
        self.assertEqual(self.service(self.editor).get(post.pk), post)

    def test_list_visibility(self):
        published = PostFactory(published=True, category=self.category)
        own_draft = PostFactory(author=self.author, category=self.category)
        PostFactory(author=self.other_author, category=self.category)

        self.assertEqual(list(self.service(None).list({})), [published])
        self.assertEqual(
            list(self.service(self.author).list({"status": "draft"})), [own_draft]
        )
        self.assertEqual(self.service(self.editor).list({}).count(), 3)
        self.assertEqual(self.service(self.editor).list({"status": "draft"}).count(), 2)

    def test_list_filters(self):
        other = CategoryFactory()
        match = PostFactory(
            published=True, category=other, title="Election night", body="Polls closed"
        )
        PostFactory(category=self.category, featured=True, body="Match report")

        self.assertEqual(list(self.service(None).list({"category": other.slug})), [match])
        self.assertEqual(list(self.service(None).list({"category": str(other.pk)})), [match])
        self.assertEqual(list(self.service(None).list({"search": "election"})), [match])
        self.assertEqual(self.service(None).list({"featured": "true"}).count(), 1)

    def test_toggle_featured(self):
        post = PostFactory(published=True)
        self.synchronizer.sync(post)

        toggled = self.service(self.editor).toggle_featured(post.pk)

        self.assertTrue(toggled.is_featured)
        self.assertTrue(self.synchronizer.read_metadata(post.pk)["is_featured"])

    def test_delete_removes_row_and_mirror(self):
        post = self.service(self.editor).create(self.post_data(is_published=True))

        self.service(self.editor).delete(post.pk)

        self.assertFalse(Post.objects.filter(pk=post.pk).exists())
        self.assertFalse(self.synchronizer.exists(post.pk))

    def test_author_cannot_delete_other_authors_post(self):
        post = PostFactory(author=self.other_author)
        with self.assertRaises(NotFoundError):
            self.service(self.author).delete(post.pk)
        self.assertTrue(Post.objects.filter(pk=post.pk).exists())

    def test_mirror_failure_does_not_fail_create(self):
        (self.mirror_root / "posts").write_text("blocked")

        post = self.service(self.editor).create(self.post_data(is_published=True))

        self.assertTrue(Post.objects.filter(pk=post.pk, is_published=True).exists())
        post.refresh_from_db()
        self.assertIsNone(post.mirror_synced_at)


class CategoryServiceTest(NewsroomTestCase):
    mirror_dir_name = "posts_mirror_test_category_service"

    def setUp(self):
        super().setUp()
        self.service = CategoryService()

    def test_create_derives_slug(self):
        category = self.service.create({"name": "سياسة"})
        self.assertEqual(category.slug, "syash")

    def test_rename_regenerates_slug(self):
        category = self.service.create({"name": "Sport"})
        updated = self.service.update(category.pk, {"name": "Sports"})
        self.assertEqual(updated.slug, "sports")

    def test_list_counts_published_posts_and_hides_inactive(self):
        category = CategoryFactory()
        CategoryFactory(inactive=True)
        PostFactory(category=category, published=True)
        PostFactory(category=category)

        categories = list(self.service.list())

        self.assertEqual(categories, [category])
        self.assertEqual(categories[0].post_count, 1)
        self.assertEqual(self.service.list(include_inactive=True).count(), 2)

    def test_delete_empty_category(self):
        category = CategoryFactory()
        self.service.delete(category.pk)
        self.assertFalse(Category.objects.filter(pk=category.pk).exists())

    def test_delete_category_with_posts_conflicts(self):
        category = CategoryFactory()
        PostFactory(category=category)

        with self.assertRaises(ConflictError):
            self.service.delete(category.pk)

        self.assertTrue(Category.objects.filter(pk=category.pk).exists())

    def test_bulk_delete_is_all_or_nothing(self):
        empty = CategoryFactory()
        used = CategoryFactory()
        PostFactory(category=used)

        with self.assertRaises(ConflictError) as ctx:
            self.service.bulk_delete([empty.pk, used.pk])

        self.assertEqual(ctx.exception.details, {"ids": [used.pk]})
        self.assertEqual(Category.objects.filter(pk__in=[empty.pk, used.pk]).count(), 2)

    def test_bulk_delete(self):
        categories = [CategoryFactory() for _ in range(3)]
        deleted = self.service.bulk_delete([c.pk for c in categories] + [9999])
        self.assertEqual(deleted, 3)
