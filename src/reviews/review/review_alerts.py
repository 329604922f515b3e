"""Review alerts: push notifications about reviews.

- ReviewPublished: the owner of the reviewed profile hears about the review
- ReviewResponseAdded: the reviewer hears that the owner answered

Members subscribe their devices to the topic ``member-<user_id>``. A failed
or skipped delivery is logged and never fails the review change.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from reviews.alerts import get_push_client
from reviews.domain import reviews
from reviews.projections.reviewers import Reviewer
from reviews.review.events import ReviewPublished, ReviewResponseAdded
from reviews.review.review import Review, TargetType

logger = structlog.get_logger(__name__)


def member_topic(user_id) -> str:
    return f"member-{user_id}"


def _profile_owner(target_id, target_type):
    profile_field = "artist_profile_id" if target_type == TargetType.ARTIST.value else "venue_profile_id"
    owners = current_domain.repository_for(Reviewer)._dao.query.filter(**{profile_field: str(target_id)}).all()
    return owners.items[0] if owners.items else None


def _deliver(user_id, title, body, data):
    try:
        result = get_push_client().send(topic=member_topic(user_id), title=title, body=body, data=data)
    except Exception as exc:
        logger.exception("Review alert delivery raised", user_id=str(user_id))
        return {"message_id": None, "status": "failed", "error": str(exc)}

    if result.get("status") != "sent":
        logger.warning(
            "Review alert not delivered",
            user_id=str(user_id),
            status=result.get("status"),
            error=result.get("error"),
        )
    return result


@reviews.event_handler(part_of=Review)
class ReviewAlertsHandler:
    @handle(ReviewPublished)
    def on_review_published(self, event: ReviewPublished) -> None:
        owner = _profile_owner(event.target_id, event.target_type)
        if owner is None:
            logger.info("No owner known for reviewed profile, skipping alert", target_id=str(event.target_id))
            return

        _deliver(
            owner.user_id,
            title="New review",
            body=f"{event.reviewer_name} left you a {event.overall_rating}-star review",
            data={"type": "review_published", "review_id": str(event.review_id)},
        )

    @handle(ReviewResponseAdded)
    def on_review_response_added(self, event: ReviewResponseAdded) -> None:
        try:
            review = current_domain.repository_for(Review).get(event.review_id)
        except ObjectNotFoundError:
            logger.warning("Response alert for unknown review, skipping", review_id=str(event.review_id))
            return

        _deliver(
            review.reviewer_id,
            title="Your review got a response",
            body=f"The {review.target_type.lower()} you reviewed for {review.gig_title} responded",
            data={"type": "review_response", "review_id": str(event.review_id)},
        )
