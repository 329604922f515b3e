"""Inbound cross-domain event handler: Reviews reacts to Identity events.

Keeps the Reviewer projection, which SubmitReview and RespondToReview use to
tell who a member is and which artist or venue profile they own.
"""

from datetime import UTC, datetime

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from shared.events.identity import MemberRegistered, ProfileLinked

from reviews.domain import reviews
from reviews.projections.reviewers import Reviewer
from reviews.review.review import Review, ReviewerRole

logger = structlog.get_logger(__name__)

reviews.register_external_event(MemberRegistered, "Identity.MemberRegistered.v1")
reviews.register_external_event(ProfileLinked, "Identity.ProfileLinked.v1")


@reviews.event_handler(part_of=Review, stream_category="identity::member")
class IdentityEventsHandler:
    """Mirrors member identity into the Reviewer projection."""

    @handle(MemberRegistered)
    def on_member_registered(self, event: MemberRegistered) -> None:
        repo = current_domain.repository_for(Reviewer)
        try:
            reviewer = repo.get(str(event.member_id))
        except ObjectNotFoundError:
            reviewer = Reviewer(user_id=str(event.member_id), role=event.role)

        reviewer.role = event.role
        reviewer.full_name = event.full_name
        reviewer.photo_url = event.profile_photo_url
        reviewer.updated_at = event.registered_at
        repo.add(reviewer)

    @handle(ProfileLinked)
    def on_profile_linked(self, event: ProfileLinked) -> None:
        repo = current_domain.repository_for(Reviewer)
        try:
            reviewer = repo.get(str(event.member_id))
        except ObjectNotFoundError:
            logger.warning(
                "ProfileLinked for unknown member, creating partial reviewer",
                member_id=str(event.member_id),
            )
            reviewer = Reviewer(user_id=str(event.member_id), role=event.role)

        if event.role == ReviewerRole.ARTIST.value:
            reviewer.artist_profile_id = str(event.profile_id)
        elif event.role == ReviewerRole.VENUE.value:
            reviewer.venue_profile_id = str(event.profile_id)
        else:
            logger.info("Ignoring profile link for non-profile role", member_id=str(event.member_id), role=event.role)
            return

        reviewer.updated_at = datetime.now(UTC)
        repo.add(reviewer)
