"""ReviewableGig: the facts about a gig needed to accept reviews for it.

Populated by the Gigs-service cross-domain event handler.
"""

import json
from enum import Enum

from protean.fields import DateTime, Identifier, String, Text

from reviews.domain import reviews


class GigStatus(Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    FILLED = "filled"
    COMPLETED = "completed"
    CANCELED = "canceled"
    EXPIRED = "expired"


@reviews.projection
class ReviewableGig:
    gig_id = Identifier(identifier=True, required=True)
    venue_id = Identifier(required=True)
    title = String(required=True, max_length=200)
    gig_date = DateTime()
    status = String(required=True, max_length=20)
    booked_artist_ids = Text()  # JSON array of artist profile ids, in booking order
    updated_at = DateTime()

    @property
    def booked_artists(self) -> list[str]:
        return json.loads(self.booked_artist_ids) if self.booked_artist_ids else []

    @property
    def is_completed(self) -> bool:
        return self.status == GigStatus.COMPLETED.value
