"""
Write paths for posts and categories.

Every mutation follows the same order: validate, derive slug and reading
time, write the row, then bring the filesystem mirror in line as a
best-effort side effect. Mirror failures are logged and never change the
result.
"""

from typing import Any, Dict, Optional

from django.db import transaction
from django.db.models import Count, F, Q, QuerySet

from accounts.models import Role
from accounts.roles import has_role, is_author_only
from core.exceptions import ConflictError, NotFoundError, ValidationError
from core.services.bulk import validate_ids
from core.services.mirror import MirrorSynchronizer
from core.services.slugs import save_with_unique_slug
from core.text import estimate_minutes

from .models import Category, Post
from .signals import (
    category_deleted,
    post_created,
    post_deleted,
    post_published,
    post_unpublished,
    publish_downgraded,
)


# Fields a client may set directly on a post
POST_WRITABLE_FIELDS = (
    "title",
    "body",
    "body_en",
    "excerpt",
    "featured_image",
    "tags",
    "meta_description",
    "meta_keywords",
    "is_published",
    "is_featured",
)

CATEGORY_WRITABLE_FIELDS = ("name", "description", "color", "sort_order", "is_active")


def _get_category(category_id: Any) -> Category:
    try:
        return Category.objects.get(pk=category_id)
    except (Category.DoesNotExist, ValueError, TypeError):
        raise ValidationError(
            "Category does not exist", details={"category": [str(category_id)]}
        )


class PostService:
    """
    Post lifecycle operations on behalf of `user`.

    Authors may only touch their own posts and cannot publish or feature;
    a publish request from an author is saved as a draft.
    """

    def __init__(self, user=None, synchronizer: Optional[MirrorSynchronizer] = None):
        self.user = user
        self.synchronizer = synchronizer or MirrorSynchronizer()

    @property
    def restricted(self) -> bool:
        return is_author_only(self.user)

    # === Reads ===

    def list(self, params: Dict[str, Any]) -> QuerySet:
        """
        Filtered post listing.

        Editors and admins may list drafts with `status`; everyone else sees
        published posts only, except authors who also see their own drafts.
        """
        queryset = Post.objects.select_related("category", "author")

        status = params.get("status", "")
        if has_role(self.user, Role.EDITOR):
            if status == "published":
                queryset = queryset.filter(is_published=True)
            elif status == "draft":
                queryset = queryset.filter(is_published=False)
        elif self.restricted and status in ("draft", "mine"):
            queryset = queryset.filter(author=self.user)
            if status == "draft":
                queryset = queryset.filter(is_published=False)
        else:
            queryset = queryset.filter(is_published=True)

        category = params.get("category")
        if category:
            if str(category).isdigit():
                queryset = queryset.filter(category_id=int(category))
            else:
                queryset = queryset.filter(category__slug=category)

        featured = params.get("featured")
        if featured == "true":
            queryset = queryset.filter(is_featured=True)
        elif featured == "false":
            queryset = queryset.filter(is_featured=False)

        search = (params.get("search") or "").strip()
        if search:
            queryset = queryset.filter(
                Q(title__icontains=search)
                | Q(body__icontains=search)
                | Q(excerpt__icontains=search)
            )

        return queryset.order_by("-created_at")

    def get(self, pk: int) -> Post:
        """Post visible to the current user (drafts need edit access)."""
        post = self._get(pk)
        if not post.is_published:
            self._check_access(post)
        return post

    def record_view(self, pk: int) -> Post:
        """
        Count a public view of a published post.

        The increment is a single UPDATE ... SET views = views + 1, so
        concurrent readers never lose counts.
        """
        updated = Post.objects.filter(pk=pk, is_published=True).update(
            views=F("views") + 1
        )
        if not updated:
            raise NotFoundError(f"Post not found: {pk}")
        return self._get(pk)

    def _get(self, pk: int) -> Post:
        try:
            return Post.objects.select_related("category", "author").get(pk=pk)
        except Post.DoesNotExist:
            raise NotFoundError(f"Post not found: {pk}")

    def _check_access(self, post: Post) -> None:
        if self.user is None or not self.user.is_authenticated:
            raise NotFoundError(f"Post not found: {post.pk}")
        if self.restricted and post.author_id != self.user.id:
            # Same answer as a missing post, other authors' drafts stay hidden
            raise NotFoundError(f"Post not found: {post.pk}")

    # === Writes ===

    def create(self, data: Dict[str, Any]) -> Post:
        """
        Create a post from validated data.

        Raises:
            ValidationError: Missing title/body or unknown category
        """
        if not data.get("title") or not data.get("body"):
            raise ValidationError(
                "Title and body are required",
                details={
                    name: ["This field is required."]
                    for name in ("title", "body")
                    if not data.get(name)
                },
            )

        category = _get_category(data.get("category"))

        post = Post(
            category=category,
            author=self.user if self.user and self.user.is_authenticated else None,
        )
        for name in POST_WRITABLE_FIELDS:
            if name in data:
                setattr(post, name, data[name])

        downgraded = False
        if self.restricted:
            post.is_featured = False
            if post.is_published:
                post.is_published = False
                downgraded = True

        post.reading_time = estimate_minutes(post.body)
        save_with_unique_slug(post, post.title, placeholder=Post.SLUG_PLACEHOLDER)

        post_created.send(sender=Post, post=post, user=self.user)
        if downgraded:
            publish_downgraded.send(sender=Post, post=post, user=self.user)

        if post.is_published:
            self.synchronizer.sync_quietly(post)

        return post

    def update(self, pk: int, data: Dict[str, Any]) -> Post:
        """
        Partially update a post.

        The slug is regenerated only when the title changes and the reading
        time only when the body changes.
        """
        post = self._get(pk)
        self._check_access(post)

        was_published = post.is_published
        was_featured = post.is_featured
        old_title = post.title
        old_body = post.body

        if "category" in data:
            post.category = _get_category(data["category"])

        for name in POST_WRITABLE_FIELDS:
            if name in data:
                setattr(post, name, data[name])

        if not post.title or not post.body:
            raise ValidationError("Title and body cannot be empty")

        downgraded = False
        if self.restricted:
            post.is_featured = was_featured
            if post.is_published and not was_published:
                post.is_published = False
                downgraded = True

        if post.body != old_body:
            post.reading_time = estimate_minutes(post.body)

        if post.title != old_title:
            save_with_unique_slug(post, post.title, placeholder=Post.SLUG_PLACEHOLDER)
        else:
            post.save()

        if downgraded:
            publish_downgraded.send(sender=Post, post=post, user=self.user)
        if post.is_published and not was_published:
            post_published.send(sender=Post, post=post, user=self.user)
        elif was_published and not post.is_published:
            post_unpublished.send(sender=Post, post=post, user=self.user)

        # Removes the mirror when the post is no longer published
        if was_published or post.is_published:
            self.synchronizer.sync_quietly(post)

        return post

    def delete(self, pk: int) -> None:
        """Delete a post and its mirror."""
        post = self._get(pk)
        self._check_access(post)

        post_id, title = post.pk, post.title
        post.delete()

        post_deleted.send(sender=Post, post_id=post_id, title=title, user=self.user)
        self.synchronizer.remove_quietly(post_id)

    def toggle_featured(self, pk: int) -> Post:
        """Flip `is_featured` and refresh the mirror."""
        with transaction.atomic():
            try:
                post = Post.objects.select_for_update().get(pk=pk)
            except Post.DoesNotExist:
                raise NotFoundError(f"Post not found: {pk}")
            post.is_featured = not post.is_featured
            post.save(update_fields=["is_featured", "updated_at"])

        if post.is_published:
            self.synchronizer.sync_quietly(post)

        return post


class CategoryService:
    """Category maintenance. Categories that still own posts cannot be deleted."""

    def __init__(self, user=None):
        self.user = user

    def list(self, include_inactive: bool = False) -> QuerySet:
        queryset = Category.objects.annotate(
            post_count=Count("posts", filter=Q(posts__is_published=True))
        )
        if not include_inactive:
            queryset = queryset.filter(is_active=True)
        return queryset

    def get(self, pk: int) -> Category:
        try:
            return Category.objects.get(pk=pk)
        except Category.DoesNotExist:
            raise NotFoundError(f"Category not found: {pk}")

    def create(self, data: Dict[str, Any]) -> Category:
        if not data.get("name"):
            raise ValidationError(
                "Name is required", details={"name": ["This field is required."]}
            )

        category = Category()
        for name in CATEGORY_WRITABLE_FIELDS:
            if name in data:
                setattr(category, name, data[name])

        return save_with_unique_slug(
            category, category.name, placeholder=Category.SLUG_PLACEHOLDER
        )

    def update(self, pk: int, data: Dict[str, Any]) -> Category:
        category = self.get(pk)
        old_name = category.name

        for name in CATEGORY_WRITABLE_FIELDS:
            if name in data:
                setattr(category, name, data[name])

        if not category.name:
            raise ValidationError("Name cannot be empty")

        if category.name != old_name:
            save_with_unique_slug(
                category, category.name, placeholder=Category.SLUG_PLACEHOLDER
            )
        else:
            category.save()

        return category

    def delete(self, pk: int) -> None:
        """
        Raises:
            ConflictError: If the category still owns posts
        """
        category = self.get(pk)

        post_count = category.posts.count()
        if post_count:
            raise ConflictError(
                f"Category '{category.name}' still has {post_count} post(s)",
                details={"category": category.pk, "posts": post_count},
            )

        category_id, name = category.pk, category.name
        category.delete()
        category_deleted.send(
            sender=Category, category_id=category_id, name=name, user=self.user
        )

    def bulk_delete(self, ids: Any) -> int:
        """
        Delete many categories in one statement.

        All-or-nothing: if any requested category owns posts nothing is deleted.

        Raises:
            ValidationError: Invalid ids
            ConflictError: If any category still owns posts
        """
        clean_ids = validate_ids(ids)

        with transaction.atomic():
            in_use = sorted(
                Post.objects.filter(category_id__in=clean_ids)
                .values_list("category_id", flat=True)
                .distinct()
            )
            if in_use:
                raise ConflictError(
                    "Some categories still have posts", details={"ids": in_use}
                )

            categories = list(
                Category.objects.filter(pk__in=clean_ids).values_list("pk", "name")
            )
            Category.objects.filter(pk__in=clean_ids).delete()

        for category_id, name in categories:
            category_deleted.send(
                sender=Category, category_id=category_id, name=name, user=self.user
            )

        return len(categories)
