"""SubmitReview: a gig participant reviews the other side of a completed gig.

Checks run in a fixed order, and the first failure wins:
    1. the reviewer and the gig exist              (ObjectNotFoundError)
    2. the gig is completed                        (InvalidStateError)
    3. the reviewer took part in the gig           (ForbiddenError)
    4. the reviewer has not reviewed it already    (ConflictError)

The venue reviews the first artist booked for the gig; an artist reviews the
venue. The target profile's rating summary is recomputed in the same unit of
work.
"""

import json

from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from reviews.domain import reviews
from reviews.projections.profile_ratings import refresh_profile_rating
from reviews.projections.reviewable_gigs import ReviewableGig
from reviews.projections.reviewers import Reviewer
from reviews.review.review import Review, ReviewerRole, TargetType
from shared.errors import ConflictError, ForbiddenError, InvalidStateError


@reviews.command(part_of="Review")
class SubmitReview:
    gig_id = Identifier(required=True)
    reviewer_id = Identifier(required=True)
    overall_rating = Integer(required=True)
    content = Text(required=True)
    performance_rating = Integer()
    professionalism_rating = Integer()
    reliability_rating = Integer()
    venue_quality_rating = Integer()
    payment_rating = Integer()
    tags = Text()  # JSON array of strings
    photos = Text()  # JSON array of URLs


def _resolve_target(reviewer, gig):
    """Return (target_type, target_id) for a participant's review, or raise."""
    if reviewer.role == ReviewerRole.VENUE.value and str(reviewer.venue_profile_id) == str(gig.venue_id):
        if not gig.booked_artists:
            raise InvalidStateError({"gig": ["No artist was booked for this gig"]})
        return TargetType.ARTIST.value, gig.booked_artists[0]

    if reviewer.role == ReviewerRole.ARTIST.value and str(reviewer.artist_profile_id) in gig.booked_artists:
        return TargetType.VENUE.value, str(gig.venue_id)

    raise ForbiddenError({"reviewer_id": ["Only the gig's venue and booked artists can review it"]})


@reviews.command_handler(part_of=Review)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        reviewer = current_domain.repository_for(Reviewer).get(command.reviewer_id)
        gig = current_domain.repository_for(ReviewableGig).get(command.gig_id)

        if not gig.is_completed:
            raise InvalidStateError({"gig": ["Reviews can only be left for completed gigs"]})

        target_type, target_id = _resolve_target(reviewer, gig)

        repo = current_domain.repository_for(Review)
        existing = repo._dao.query.filter(
            gig_id=str(command.gig_id),
            reviewer_id=str(command.reviewer_id),
        ).all()
        if existing.items:
            raise ConflictError({"review": ["You have already reviewed this gig"]})

        review = Review.publish(
            gig_id=command.gig_id,
            gig_title=gig.title,
            gig_date=gig.gig_date,
            reviewer_id=command.reviewer_id,
            reviewer_role=reviewer.role,
            reviewer_name=reviewer.full_name,
            reviewer_photo_url=reviewer.photo_url,
            target_id=target_id,
            target_type=target_type,
            overall_rating=command.overall_rating,
            performance_rating=command.performance_rating,
            professionalism_rating=command.professionalism_rating,
            reliability_rating=command.reliability_rating,
            venue_quality_rating=command.venue_quality_rating,
            payment_rating=command.payment_rating,
            content=command.content,
            tags=json.loads(command.tags) if command.tags else None,
            photos=json.loads(command.photos) if command.photos else None,
            is_verified_booking=True,
        )

        # A concurrent submission can slip past the query above; the unique
        # review_key catches it at write time.
        try:
            repo.add(review)
        except ValidationError as exc:
            if "review_key" in exc.messages:
                raise ConflictError({"review": ["You have already reviewed this gig"]}) from exc
            raise

        refresh_profile_rating(review)
        return str(review.id)
