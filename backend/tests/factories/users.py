# =============================================================================
# ASSETDESK - USER FACTORIES
# =============================================================================

import factory


class UserFactory(factory.Factory):
    """
    Payload for creating a user.
    """

    class Meta:
        model = dict

    username = factory.Sequence(lambda n: f"test_user_{n}")
    password = factory.LazyAttribute(lambda obj: f"{obj.username}-Pass123")
    role = "user"

    @classmethod
    def create_admin(cls, **kwargs) -> dict:
        """Admin payload."""
        kwargs.setdefault("role", "admin")
        return cls(**kwargs)
