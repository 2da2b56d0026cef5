"""Django signals for editorial events on posts and categories."""

from django.dispatch import Signal


# Fired when a post is created
post_created = Signal()  # sender=Post, post=post_instance, user=user

# Fired when a post goes from draft to published
post_published = Signal()  # sender=Post, post=post_instance, user=user

# Fired when a post goes from published to draft
post_unpublished = Signal()  # sender=Post, post=post_instance, user=user

# Fired when an author's publish request was downgraded to a draft
publish_downgraded = Signal()  # sender=Post, post=post_instance, user=user

# Fired when a post is deleted
post_deleted = Signal()  # sender=Post, post_id=id, title=title, user=user

# Fired when a category is deleted
category_deleted = Signal()  # sender=Category, category_id=id, name=name, user=user
