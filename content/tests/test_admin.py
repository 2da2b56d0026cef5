"""Tests for the post admin's mirror side effects."""

from django.contrib.admin.sites import AdminSite
from django.test import RequestFactory

from accounts.tests.factories import EditorialUserFactory
from content.admin import PostAdmin
from content.models import Post
from content.tests.factories import PostFactory
from core.services.mirror import MirrorSynchronizer
from core.tests.base import NewsroomTestCase


class PostAdminDeleteTest(NewsroomTestCase):
    """Admin deletions remove mirrors like every other hard delete."""

    mirror_dir_name = "posts_mirror_test_post_admin"

    def setUp(self):
        super().setUp()
        self.admin = PostAdmin(Post, AdminSite())
        self.request = RequestFactory().post("/admin/content/post/")
        self.request.user = EditorialUserFactory(admin=True)
        self.synchronizer = MirrorSynchronizer()

    def test_delete_model_removes_mirror(self):
        post = PostFactory(published=True)
        self.synchronizer.sync(post)
        post_id = post.pk

        self.admin.delete_model(self.request, post)

        self.assertFalse(Post.objects.filter(pk=post_id).exists())
        self.assertFalse(self.synchronizer.exists(post_id))

    def test_delete_selected_removes_every_mirror(self):
        posts = [PostFactory(published=True) for _ in range(3)]
        for post in posts:
            self.synchronizer.sync(post)
        kept = posts.pop()
        ids = [p.pk for p in posts]

        self.admin.delete_queryset(self.request, Post.objects.filter(pk__in=ids))

        self.assertFalse(Post.objects.filter(pk__in=ids).exists())
        for pk in ids:
            self.assertFalse(self.synchronizer.exists(pk))
        self.assertTrue(self.synchronizer.exists(kept.pk))

    def test_delete_selected_tolerates_missing_mirror(self):
        post = PostFactory()

        self.admin.delete_queryset(self.request, Post.objects.filter(pk=post.pk))

        self.assertFalse(Post.objects.filter(pk=post.pk).exists())
