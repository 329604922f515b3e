"""Cross-domain event contracts for Gigs service events.

Gig posting and booking live in the Gigs service; this repository only
consumes its lifecycle events. The Reviews domain uses them to maintain
the ReviewableGig read model that backs review eligibility checks.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Identifier, String, Text


class GigPosted(BaseEvent):
    """A venue posted a new gig."""

    __version__ = 1

    gig_id = Identifier(required=True)
    venue_id = Identifier(required=True)
    title = String(required=True)
    gig_date = DateTime(required=True)
    posted_at = DateTime(required=True)


class ArtistBooked(BaseEvent):
    """An artist was confirmed for a gig."""

    __version__ = 1

    gig_id = Identifier(required=True)
    artist_id = Identifier(required=True)
    booked_at = DateTime(required=True)


class GigCompleted(BaseEvent):
    """A gig took place and was marked completed."""

    __version__ = 1

    gig_id = Identifier(required=True)
    completed_at = DateTime(required=True)


class GigCanceled(BaseEvent):
    """A gig was called off before it took place."""

    __version__ = 1

    gig_id = Identifier(required=True)
    reason = Text()
    canceled_at = DateTime(required=True)
