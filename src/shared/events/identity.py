"""Cross-domain event contracts for Identity domain events.

These classes define the event shape for consumption by other domains
(e.g., the Reviews domain keeps a Reviewer read model to verify gig
participants). They are registered as external events via
domain.register_external_event() with matching __type__ strings so
Protean's stream deserialization works correctly.

The source-of-truth events are in src/identity/member/events.py.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Identifier, String


class MemberRegistered(BaseEvent):
    """A new artist, venue or admin account was created on the platform."""

    __version__ = 1

    member_id = Identifier(required=True)
    email = String(required=True)
    full_name = String(required=True)
    role = String(required=True)
    profile_photo_url = String()
    registered_at = DateTime(required=True)


class ProfileLinked(BaseEvent):
    """A member was linked to the artist or venue profile they own."""

    __version__ = 1

    member_id = Identifier(required=True)
    role = String(required=True)
    profile_id = Identifier(required=True)
    linked_at = DateTime(required=True)
