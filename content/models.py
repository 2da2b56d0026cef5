from django.conf import settings
from django.db import models

from core.models import AbstractBaseModel


class Category(AbstractBaseModel):
    """Editorial section a post belongs to."""

    SLUG_PLACEHOLDER = "category"

    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)
    description = models.TextField(blank=True, default="")
    color = models.CharField(
        max_length=7, default="#3B82F6", help_text="Hex colour used by the front end."
    )
    sort_order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        ordering = ["sort_order", "name"]
        verbose_name_plural = "categories"

    def __str__(self) -> str:
        return self.name


class Post(AbstractBaseModel):
    """
    Editorial article.

    The row is the source of truth; published posts are also mirrored to the
    filesystem by core.services.mirror. `mirror_synced_at` records the last
    time the mirror was brought in line with this row.
    """

    SLUG_PLACEHOLDER = "post"

    title = models.CharField(max_length=500)
    slug = models.SlugField(max_length=255, unique=True)
    body = models.TextField()
    body_en = models.TextField(blank=True, default="")
    excerpt = models.TextField(blank=True, default="")
    category = models.ForeignKey(
        Category, on_delete=models.PROTECT, related_name="posts"
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="posts",
    )
    featured_image = models.CharField(max_length=1024, blank=True, default="")
    tags = models.JSONField(default=list, blank=True)
    meta_description = models.CharField(max_length=500, blank=True, default="")
    meta_keywords = models.CharField(max_length=500, blank=True, default="")
    is_published = models.BooleanField(default=False, db_index=True)
    is_featured = models.BooleanField(default=False, db_index=True)
    views = models.PositiveIntegerField(default=0)
    reading_time = models.PositiveIntegerField(
        default=0, help_text="Estimated reading time in minutes."
    )
    mirror_synced_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.title

    @property
    def url(self) -> str:
        return f"/post/{self.pk}/{self.slug}"

    @property
    def status(self) -> str:
        return "published" if self.is_published else "draft"
