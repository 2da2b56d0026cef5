from django.contrib.auth import get_user_model
from django.db import models

from core.models import AbstractBaseModel


class Role(models.TextChoices):
    ADMIN = "admin", "Admin"
    EDITOR = "editor", "Editor"
    AUTHOR = "author", "Author"


class EditorProfile(AbstractBaseModel):
    """
    Editorial role of a user.

    The role is the only thing the publication engine reads about a user.
    Users without a profile are authors; superusers are always admins.
    """

    user = models.OneToOneField(
        get_user_model(), on_delete=models.CASCADE, related_name="editor_profile"
    )
    role = models.CharField(
        max_length=16,
        choices=Role.choices,
        default=Role.AUTHOR,
        db_index=True,
        help_text="admin: everything. editor: publish and moderate. author: own drafts only.",
    )

    class Meta:
        verbose_name = "editor profile"

    def __str__(self) -> str:
        return f"{self.user.username} ({self.role})"
