"""Domain events for the Member aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String

from identity.domain import identity


@identity.event(part_of="Member")
class MemberRegistered:
    """A new artist, venue or admin account was created on the platform."""

    __version__ = 1

    member_id: Identifier(required=True)
    email: String(required=True)
    full_name: String(required=True)
    role: String(required=True)
    profile_photo_url: String()
    registered_at: DateTime(required=True)


@identity.event(part_of="Member")
class ProfileLinked:
    """A member was linked to the artist or venue profile they own."""

    __version__ = 1

    member_id: Identifier(required=True)
    role: String(required=True)
    profile_id: Identifier(required=True)
    linked_at: DateTime(required=True)


@identity.event(part_of="Member")
class SubscriptionAccessUpdated:
    """The member's subscription tier or active flag changed."""

    __version__ = 1

    member_id: Identifier(required=True)
    subscription_tier: String(required=True)
    has_active_subscription: Boolean(required=True)
    updated_at: DateTime(required=True)
