"""Factory Boy fixtures for accounts app tests."""

import factory
from django.contrib.auth import get_user_model

from accounts.models import EditorProfile, Role

User = get_user_model()


class UserFactory(factory.django.DjangoModelFactory):
    """Factory for creating User instances."""

    class Meta:
        model = User
        skip_postgeneration_save = True

    username = factory.Sequence(lambda n: f"user{n}")
    email = factory.LazyAttribute(lambda o: f"{o.username}@example.com")
    is_active = True

    @factory.post_generation
    def password(self, create, extracted, **kwargs):
        """Set password after user creation."""
        password = extracted or "testpass123"
        self.set_password(password)  # type: ignore[attr-defined]
        if create:
            self.save()  # type: ignore[attr-defined]

    class Params:
        superuser = factory.Trait(
            is_staff=True,
            is_superuser=True,
            username=factory.Sequence(lambda n: f"super{n}"),
        )


class EditorProfileFactory(factory.django.DjangoModelFactory):
    """Factory for creating EditorProfile instances."""

    class Meta:
        model = EditorProfile

    user = factory.SubFactory(UserFactory)
    role = Role.AUTHOR


class EditorialUserFactory(UserFactory):
    """Creates a user with an editorial role in one call (author by default)."""

    profile = factory.RelatedFactory(
        EditorProfileFactory,
        factory_related_name="user",
    )

    class Params:
        editor = factory.Trait(
            profile__role=Role.EDITOR,
            username=factory.Sequence(lambda n: f"editor{n}"),
        )
        admin = factory.Trait(
            is_staff=True,
            profile__role=Role.ADMIN,
            username=factory.Sequence(lambda n: f"admin{n}"),
        )
