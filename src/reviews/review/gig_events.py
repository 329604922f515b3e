"""Inbound cross-domain event handler: Reviews reacts to Gigs-service events.

Keeps the ReviewableGig projection: which venue hosts a gig, which artists
were booked (in booking order), and whether the gig has been completed.
"""

import json
from datetime import UTC, datetime

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from shared.events.gigs import ArtistBooked, GigCanceled, GigCompleted, GigPosted

from reviews.domain import reviews
from reviews.projections.reviewable_gigs import GigStatus, ReviewableGig
from reviews.review.review import Review

logger = structlog.get_logger(__name__)

reviews.register_external_event(GigPosted, "Gigs.GigPosted.v1")
reviews.register_external_event(ArtistBooked, "Gigs.ArtistBooked.v1")
reviews.register_external_event(GigCompleted, "Gigs.GigCompleted.v1")
reviews.register_external_event(GigCanceled, "Gigs.GigCanceled.v1")


def _existing_gig(gig_id, event_name):
    try:
        return current_domain.repository_for(ReviewableGig).get(str(gig_id))
    except ObjectNotFoundError:
        logger.warning("Gig event for unknown gig, skipping", event_type=event_name, gig_id=str(gig_id))
        return None


@reviews.event_handler(part_of=Review, stream_category="gigs::gig")
class GigEventsHandler:
    """Tracks the gig facts that decide who may review a gig."""

    @handle(GigPosted)
    def on_gig_posted(self, event: GigPosted) -> None:
        current_domain.repository_for(ReviewableGig).add(
            ReviewableGig(
                gig_id=str(event.gig_id),
                venue_id=str(event.venue_id),
                title=event.title,
                gig_date=event.gig_date,
                status=GigStatus.PUBLISHED.value,
                booked_artist_ids=json.dumps([]),
                updated_at=event.posted_at,
            )
        )

    @handle(ArtistBooked)
    def on_artist_booked(self, event: ArtistBooked) -> None:
        gig = _existing_gig(event.gig_id, "ArtistBooked")
        if gig is None:
            return

        artists = gig.booked_artists
        if str(event.artist_id) not in artists:
            artists.append(str(event.artist_id))
        gig.booked_artist_ids = json.dumps(artists)
        gig.updated_at = event.booked_at
        current_domain.repository_for(ReviewableGig).add(gig)

    @handle(GigCompleted)
    def on_gig_completed(self, event: GigCompleted) -> None:
        self._set_status(event.gig_id, GigStatus.COMPLETED, event.completed_at, "GigCompleted")

    @handle(GigCanceled)
    def on_gig_canceled(self, event: GigCanceled) -> None:
        self._set_status(event.gig_id, GigStatus.CANCELED, event.canceled_at, "GigCanceled")

    def _set_status(self, gig_id, status, changed_at, event_name):
        gig = _existing_gig(gig_id, event_name)
        if gig is None:
            return

        gig.status = status.value
        gig.updated_at = changed_at or datetime.now(UTC)
        current_domain.repository_for(ReviewableGig).add(gig)
