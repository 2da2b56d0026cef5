"""Editorial role lookup."""

from typing import Optional

from accounts.models import Role

# Higher rank includes every permission of the lower ones
ROLE_RANK = {
    Role.AUTHOR: 1,
    Role.EDITOR: 2,
    Role.ADMIN: 3,
}


def get_role(user) -> Optional[str]:
    """
    Role of `user`, or None for anonymous users.

    Superusers are admins regardless of their profile. Authenticated users
    without a profile are authors.
    """
    if user is None or not user.is_authenticated:
        return None

    if user.is_superuser:
        return Role.ADMIN

    profile = getattr(user, "editor_profile", None)
    if profile is None:
        return Role.AUTHOR
    return profile.role


def has_role(user, minimum: str) -> bool:
    """True if `user` holds `minimum` or a higher role."""
    role = get_role(user)
    if role is None:
        return False
    return ROLE_RANK[role] >= ROLE_RANK[minimum]


def is_author_only(user) -> bool:
    """True for users whose edits are restricted to their own drafts."""
    return get_role(user) == Role.AUTHOR
