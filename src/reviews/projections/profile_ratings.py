"""ProfileRating: rating summary shown on artist and venue profiles.

Recomputed from the target's published reviews whenever that set changes
(a review is published, flagged, reinstated or removed). The write happens
in the same unit of work as the review change, so the summary never lags
behind the reviews it is computed from.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from reviews.domain import reviews
from reviews.review.queries import published_reviews_for
from reviews.review.review import Review, TargetType
from reviews.review.stats import reliability_score_for, summarize


@reviews.projection
class ProfileRating:
    profile_id = Identifier(identifier=True, required=True)
    profile_type = String(required=True, max_length=10)
    average_rating = Float(default=0.0)
    total_reviews = Integer(default=0)
    reliability_score = Integer()  # Artists only, 0-100
    updated_at = DateTime()


def refresh_profile_rating(review: Review) -> ProfileRating:
    """Recompute the rating summary of ``review``'s target.

    ``review`` holds its new, not yet committed state: it is counted when
    published and left out otherwise, whatever the stored copy says.
    """
    others = [
        r for r in published_reviews_for(review.target_id, review.target_type) if str(r.id) != str(review.id)
    ]
    counted = others + [review] if review.is_published else others
    stats = summarize(counted)

    repo = current_domain.repository_for(ProfileRating)
    try:
        rating = repo.get(str(review.target_id))
    except ObjectNotFoundError:
        rating = ProfileRating(profile_id=str(review.target_id), profile_type=review.target_type)

    rating.average_rating = stats.average_rating
    rating.total_reviews = stats.total_reviews
    if review.target_type == TargetType.ARTIST.value:
        rating.reliability_score = reliability_score_for(counted)
    rating.updated_at = datetime.now(UTC)

    repo.add(rating)
    return rating
