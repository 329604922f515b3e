"""Member aggregate: an artist, venue or admin account on GigMatch."""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String

from identity.domain import identity
from identity.shared.email import EmailAddress

FREE_TIER = "free"


class MemberRole(Enum):
    """Enumeration of member roles."""

    ARTIST = "artist"
    VENUE = "venue"
    ADMIN = "admin"


@identity.aggregate
class Member:
    """A registered person on the platform.

    Artists and venues each own one public profile (managed by the profile
    services); the member record keeps the link so other contexts can tell
    who owns a profile. Subscription tier and active flag are denormalized
    here from the Subscriptions context for fast feature checks.
    """

    email: String(required=True, max_length=254, unique=True)
    full_name: String(required=True, max_length=150)
    role: String(choices=MemberRole, required=True)
    profile_photo_url: String(max_length=500)
    artist_profile_id: Identifier()
    venue_profile_id: Identifier()
    subscription_tier: String(max_length=20)  # None on records created before tiers existed
    has_active_subscription: Boolean(default=False)
    registered_at: DateTime(default=datetime.now)

    @invariant.post
    def email_must_be_well_formed(self):
        if self.email is None:
            return
        try:
            EmailAddress(address=self.email)
        except ValidationError as exc:
            raise ValidationError({"email": [m for messages in exc.messages.values() for m in messages]}) from exc

    @invariant.post
    def profile_link_must_match_role(self):
        if self.role == MemberRole.ARTIST.value and self.venue_profile_id:
            raise ValidationError({"venue_profile_id": ["Artists cannot own a venue profile"]})
        if self.role == MemberRole.VENUE.value and self.artist_profile_id:
            raise ValidationError({"artist_profile_id": ["Venues cannot own an artist profile"]})

    @classmethod
    def register(cls, email, full_name, role, profile_photo_url=None):
        from identity.member.events import MemberRegistered

        now = datetime.now(UTC)
        member = cls(
            email=email,
            full_name=full_name,
            role=role,
            profile_photo_url=profile_photo_url,
            subscription_tier=FREE_TIER,
            has_active_subscription=False,
            registered_at=now,
        )
        member.raise_(
            MemberRegistered(
                member_id=member.id,
                email=email,
                full_name=full_name,
                role=role,
                profile_photo_url=profile_photo_url,
                registered_at=now,
            )
        )
        return member

    @property
    def profile_id(self):
        """The artist or venue profile this member owns, if any."""
        return self.artist_profile_id or self.venue_profile_id

    def owns_profile(self, profile_id) -> bool:
        return self.profile_id is not None and str(self.profile_id) == str(profile_id)

    def link_profile(self, profile_id):
        from identity.member.events import ProfileLinked

        if self.role == MemberRole.ARTIST.value:
            self.artist_profile_id = profile_id
        elif self.role == MemberRole.VENUE.value:
            self.venue_profile_id = profile_id
        else:
            raise ValidationError({"role": ["Only artists and venues can own a profile"]})

        self.raise_(
            ProfileLinked(
                member_id=self.id,
                role=self.role,
                profile_id=profile_id,
                linked_at=datetime.now(UTC),
            )
        )

    def update_subscription_access(self, tier, has_active_subscription) -> bool:
        """Apply the member's current subscription standing.

        Returns False when nothing changed.
        """
        from identity.member.events import SubscriptionAccessUpdated

        if self.subscription_tier == tier and self.has_active_subscription == has_active_subscription:
            return False

        self.subscription_tier = tier
        self.has_active_subscription = has_active_subscription

        self.raise_(
            SubscriptionAccessUpdated(
                member_id=self.id,
                subscription_tier=tier,
                has_active_subscription=has_active_subscription,
                updated_at=datetime.now(UTC),
            )
        )
        return True
