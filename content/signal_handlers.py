"""Signal handlers for editorial audit logging."""

import logging

from django.dispatch import receiver

from .signals import (
    category_deleted,
    post_created,
    post_deleted,
    post_published,
    post_unpublished,
    publish_downgraded,
)

audit_logger = logging.getLogger("newsroom.audit")


def _user_id(user):
    return getattr(user, "id", None) if user else None


@receiver(post_created)
def log_post_created(sender, post, user, **kwargs):
    audit_logger.info(
        f"POST_CREATED post_id={post.id} slug={post.slug} "
        f"status={post.status} user_id={_user_id(user)}"
    )


@receiver(post_published)
def log_post_published(sender, post, user, **kwargs):
    audit_logger.info(f"POST_PUBLISHED post_id={post.id} user_id={_user_id(user)}")


@receiver(post_unpublished)
def log_post_unpublished(sender, post, user, **kwargs):
    audit_logger.info(f"POST_UNPUBLISHED post_id={post.id} user_id={_user_id(user)}")


@receiver(publish_downgraded)
def log_publish_downgraded(sender, post, user, **kwargs):
    audit_logger.warning(
        f"PUBLISH_DOWNGRADED post_id={post.id} user_id={_user_id(user)} "
        f"reason=author_role"
    )


@receiver(post_deleted)
def log_post_deleted(sender, post_id, title, user, **kwargs):
    audit_logger.info(
        f"POST_DELETED post_id={post_id} title={title!r} user_id={_user_id(user)}"
    )


@receiver(category_deleted)
def log_category_deleted(sender, category_id, name, user, **kwargs):
    audit_logger.info(
        f"CATEGORY_DELETED category_id={category_id} name={name!r} "
        f"user_id={_user_id(user)}"
    )
