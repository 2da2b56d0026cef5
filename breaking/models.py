from django.db import models

from core.models import AbstractBaseModel


class FlaggedItem(AbstractBaseModel):
    """
    Short news item shown while flagged active.

    `expires_at` hides an item from public reads without clearing
    `is_active`. Which rows may be active together is enforced by
    core.services.active_set, configured per subclass through `EXCLUSIVE`.
    """

    EXCLUSIVE = False
    SLUG_PLACEHOLDER = "item"
    URL_PREFIX = "item"

    title = models.CharField(max_length=500)
    slug = models.SlugField(max_length=255, unique=True)
    body = models.TextField()
    priority = models.IntegerField(default=1, db_index=True)
    is_active = models.BooleanField(default=False, db_index=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    views = models.PositiveIntegerField(default=0)

    class Meta:
        abstract = True
        ordering = ["-priority", "-created_at"]

    def __str__(self) -> str:
        return self.title

    @property
    def url(self) -> str:
        return f"/{self.URL_PREFIX}/{self.pk}/{self.slug}"


class BreakingNews(FlaggedItem):
    """Breaking news banner. At most one row is active."""

    EXCLUSIVE = True
    SLUG_PLACEHOLDER = "breaking-news"
    URL_PREFIX = "breaking"

    class Meta(FlaggedItem.Meta):
        verbose_name = "breaking news"
        verbose_name_plural = "breaking news"


class LastNews(FlaggedItem):
    """Latest-news ticker. Any number of rows may be active."""

    SLUG_PLACEHOLDER = "last-news"
    URL_PREFIX = "last-news"

    class Meta(FlaggedItem.Meta):
        verbose_name = "last news"
        verbose_name_plural = "last news"
