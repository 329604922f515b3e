"""Review aggregate (CQRS): the core of the Reviews & Ratings domain.

A review is left by one side of a completed gig about the other side: the
venue reviews the booked artist, an artist reviews the venue. The target is a
tagged reference (``target_type`` + ``target_id``), so stats and listings can
be computed for either kind of profile.

CQRS (not event sourced): reviews are write-once-mostly. After publication
only three things change: the owner's one-time response, helpful votes, and
moderation status.

State Machine (4 states):
    PENDING → PUBLISHED | REMOVED
    PUBLISHED → FLAGGED | REMOVED
    FLAGGED → PUBLISHED (reinstated) | REMOVED
    REMOVED → (terminal)
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
)

from reviews.domain import reviews
from reviews.review.events import (
    HelpfulToggled,
    ReviewFlagged,
    ReviewPublished,
    ReviewReinstated,
    ReviewRemoved,
    ReviewResponseAdded,
)
from shared.errors import InvalidStateError

ANONYMOUS_REVIEWER = "Anonymous"

CONTENT_MIN_LENGTH = 10
CONTENT_MAX_LENGTH = 1000
RESPONSE_MIN_LENGTH = 10
RESPONSE_MAX_LENGTH = 500

# Optional per-category ratings, in display order
CATEGORY_RATINGS = (
    "performance_rating",
    "professionalism_rating",
    "reliability_rating",
    "venue_quality_rating",
    "payment_rating",
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class ReviewStatus(Enum):
    PENDING = "pending"
    PUBLISHED = "published"
    FLAGGED = "flagged"
    REMOVED = "removed"


class TargetType(Enum):
    ARTIST = "Artist"
    VENUE = "Venue"


class ReviewerRole(Enum):
    ARTIST = "artist"
    VENUE = "venue"


class ModerationAction(Enum):
    FLAG = "flag"
    REINSTATE = "reinstate"
    REMOVE = "remove"


# ---------------------------------------------------------------------------
# State Machine
# ---------------------------------------------------------------------------
_VALID_TRANSITIONS = {
    ReviewStatus.PENDING: {ReviewStatus.PUBLISHED, ReviewStatus.REMOVED},
    ReviewStatus.PUBLISHED: {ReviewStatus.FLAGGED, ReviewStatus.REMOVED},
    ReviewStatus.FLAGGED: {ReviewStatus.PUBLISHED, ReviewStatus.REMOVED},
    ReviewStatus.REMOVED: set(),  # Terminal state
}


def make_review_key(gig_id, reviewer_id) -> str:
    """Storage key enforcing one review per (gig, reviewer)."""
    return f"{gig_id}:{reviewer_id}"


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@reviews.entity(part_of="Review")
class HelpfulVote:
    """A member who found the review helpful."""

    user_id = Identifier(required=True)
    voted_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@reviews.aggregate
class Review:
    """A gig participant's review of the other side of the gig."""

    # Source gig and its snapshot at review time
    gig_id = Identifier(required=True)
    gig_title = String(required=True, max_length=200)
    gig_date = DateTime()

    # Reviewer snapshot
    reviewer_id = Identifier(required=True)
    reviewer_role = String(choices=ReviewerRole, required=True)
    reviewer_name = String(required=True, max_length=150)
    reviewer_photo_url = String(max_length=500)

    # Target (tagged reference)
    target_id = Identifier(required=True)
    target_type = String(choices=TargetType, required=True)

    # One review per (gig, reviewer)
    review_key = String(required=True, max_length=255, unique=True)

    # Ratings
    overall_rating = Integer(required=True, min_value=1, max_value=5)
    performance_rating = Integer(min_value=1, max_value=5)
    professionalism_rating = Integer(min_value=1, max_value=5)
    reliability_rating = Integer(min_value=1, max_value=5)
    venue_quality_rating = Integer(min_value=1, max_value=5)
    payment_rating = Integer(min_value=1, max_value=5)

    # Content
    content = Text(required=True)
    tags = Text()  # JSON array of strings
    photos = Text()  # JSON array of URLs

    # Owner response (at most once)
    response = Text()
    responded_at = DateTime()

    # Status
    status = String(choices=ReviewStatus, default=ReviewStatus.PUBLISHED.value)
    moderation_notes = Text()
    is_verified_booking = Boolean(default=False)

    # Helpfulness
    helpful_votes = HasMany(HelpfulVote)
    helpful_count = Integer(default=0)

    # Timestamps
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def content_length_within_bounds(self):
        if self.content is not None and not (CONTENT_MIN_LENGTH <= len(self.content) <= CONTENT_MAX_LENGTH):
            raise ValidationError(
                {"content": [f"Review must be between {CONTENT_MIN_LENGTH} and {CONTENT_MAX_LENGTH} characters"]}
            )

    @invariant.post
    def response_length_within_bounds(self):
        if self.response is not None and not (RESPONSE_MIN_LENGTH <= len(self.response) <= RESPONSE_MAX_LENGTH):
            raise ValidationError(
                {"response": [f"Response must be between {RESPONSE_MIN_LENGTH} and {RESPONSE_MAX_LENGTH} characters"]}
            )

    @invariant.post
    def helpful_count_cannot_be_negative(self):
        if self.helpful_count is not None and self.helpful_count < 0:
            raise ValidationError({"helpful_count": ["Helpful count cannot be negative"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def publish(
        cls,
        gig_id,
        gig_title,
        reviewer_id,
        reviewer_role,
        reviewer_name,
        target_id,
        target_type,
        overall_rating,
        content,
        gig_date=None,
        reviewer_photo_url=None,
        performance_rating=None,
        professionalism_rating=None,
        reliability_rating=None,
        venue_quality_rating=None,
        payment_rating=None,
        tags=None,
        photos=None,
        is_verified_booking=True,
    ):
        """Publish a verified participant's review of a completed gig."""
        now = datetime.now(UTC)
        reviewer_name = (reviewer_name or "").strip() or ANONYMOUS_REVIEWER

        review = cls(
            gig_id=gig_id,
            gig_title=gig_title,
            gig_date=gig_date,
            reviewer_id=reviewer_id,
            reviewer_role=reviewer_role,
            reviewer_name=reviewer_name,
            reviewer_photo_url=reviewer_photo_url,
            target_id=target_id,
            target_type=target_type,
            review_key=make_review_key(gig_id, reviewer_id),
            overall_rating=overall_rating,
            performance_rating=performance_rating,
            professionalism_rating=professionalism_rating,
            reliability_rating=reliability_rating,
            venue_quality_rating=venue_quality_rating,
            payment_rating=payment_rating,
            content=content,
            tags=json.dumps(tags or []),
            photos=json.dumps(photos or []),
            status=ReviewStatus.PUBLISHED.value,
            is_verified_booking=is_verified_booking,
            helpful_count=0,
            created_at=now,
            updated_at=now,
        )

        review.raise_(
            ReviewPublished(
                review_id=str(review.id),
                gig_id=str(gig_id),
                reviewer_id=str(reviewer_id),
                reviewer_name=reviewer_name,
                target_id=str(target_id),
                target_type=target_type,
                overall_rating=overall_rating,
                published_at=now,
            )
        )

        return review

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    @property
    def tag_list(self) -> list[str]:
        return json.loads(self.tags) if self.tags else []

    @property
    def photo_list(self) -> list[str]:
        return json.loads(self.photos) if self.photos else []

    @property
    def is_published(self) -> bool:
        return self.status == ReviewStatus.PUBLISHED.value

    def is_marked_helpful_by(self, user_id) -> bool:
        return any(str(v.user_id) == str(user_id) for v in self.helpful_votes)

    # -------------------------------------------------------------------
    # Owner response
    # -------------------------------------------------------------------
    def respond(self, responder_id, response):
        """Record the profile owner's response. A review takes one response only."""
        if self.response:
            raise InvalidStateError({"response": ["This review already has a response"]})

        now = datetime.now(UTC)

        with atomic_change(self):
            self.response = response
            self.responded_at = now
            self.updated_at = now

        self.raise_(
            ReviewResponseAdded(
                review_id=str(self.id),
                target_id=str(self.target_id),
                responder_id=str(responder_id),
                response=response,
                responded_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Helpfulness
    # -------------------------------------------------------------------
    def toggle_helpful(self, user_id) -> bool:
        """Mark the review helpful for ``user_id``, or undo an earlier mark.

        Returns True when the review is now marked helpful by the user.
        """
        now = datetime.now(UTC)
        existing = next((v for v in self.helpful_votes if str(v.user_id) == str(user_id)), None)

        if existing:
            self.remove_helpful_votes(existing)
            with atomic_change(self):
                self.helpful_count = max(0, self.helpful_count - 1)
                self.updated_at = now
            marked = False
        else:
            self.add_helpful_votes(HelpfulVote(user_id=user_id, voted_at=now))
            with atomic_change(self):
                self.helpful_count = self.helpful_count + 1
                self.updated_at = now
            marked = True

        self.raise_(
            HelpfulToggled(
                review_id=str(self.id),
                user_id=str(user_id),
                marked=str(marked),
                helpful_count=self.helpful_count,
                toggled_at=now,
            )
        )
        return marked

    # -------------------------------------------------------------------
    # Moderation
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate state machine transition."""
        current = ReviewStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidStateError(
                {"status": [f"Cannot transition from {current.value} to {target_status.value}"]}
            )

    def _transition(self, target_status, notes):
        self._assert_can_transition(target_status)
        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = target_status.value
            if notes:
                self.moderation_notes = notes
            self.updated_at = now
        return now

    def flag(self, moderator_id, reason=None):
        """Hide a published review while it is investigated."""
        now = self._transition(ReviewStatus.FLAGGED, reason)
        self.raise_(
            ReviewFlagged(
                review_id=str(self.id),
                target_id=str(self.target_id),
                target_type=self.target_type,
                moderator_id=str(moderator_id),
                reason=reason,
                flagged_at=now,
            )
        )

    def reinstate(self, moderator_id, notes=None):
        """Publish a pending or flagged review."""
        now = self._transition(ReviewStatus.PUBLISHED, notes)
        self.raise_(
            ReviewReinstated(
                review_id=str(self.id),
                target_id=str(self.target_id),
                target_type=self.target_type,
                moderator_id=str(moderator_id),
                reinstated_at=now,
            )
        )

    def remove(self, moderator_id, reason=None):
        """Take the review down permanently."""
        now = self._transition(ReviewStatus.REMOVED, reason)
        self.raise_(
            ReviewRemoved(
                review_id=str(self.id),
                target_id=str(self.target_id),
                target_type=self.target_type,
                moderator_id=str(moderator_id),
                reason=reason,
                removed_at=now,
            )
        )
