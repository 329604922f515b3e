"""Domain events for the Review aggregate.

All events are versioned, immutable facts representing state changes.
Events are used for:
- Notifying profile owners about new reviews
- Cross-domain communication via Redis Streams
"""

from protean.fields import DateTime, Identifier, Integer, String, Text

from reviews.domain import reviews


@reviews.event(part_of="Review")
class ReviewPublished:
    """A gig participant's review went live on the target's profile."""

    __version__ = 1

    review_id = Identifier(required=True)
    gig_id = Identifier(required=True)
    reviewer_id = Identifier(required=True)
    reviewer_name = String(required=True)
    target_id = Identifier(required=True)
    target_type = String(required=True)
    overall_rating = Integer(required=True)
    published_at = DateTime(required=True)


@reviews.event(part_of="Review")
class ReviewResponseAdded:
    """The owner of the reviewed profile answered the review."""

    __version__ = 1

    review_id = Identifier(required=True)
    target_id = Identifier(required=True)
    responder_id = Identifier(required=True)
    response = Text(required=True)
    responded_at = DateTime(required=True)


@reviews.event(part_of="Review")
class HelpfulToggled:
    """A member marked or unmarked a review as helpful."""

    __version__ = 1

    review_id = Identifier(required=True)
    user_id = Identifier(required=True)
    marked = String(required=True)  # "True"/"False"
    helpful_count = Integer(required=True)
    toggled_at = DateTime(required=True)


@reviews.event(part_of="Review")
class ReviewFlagged:
    """A moderator hid a published review pending investigation."""

    __version__ = 1

    review_id = Identifier(required=True)
    target_id = Identifier(required=True)
    target_type = String(required=True)
    moderator_id = Identifier(required=True)
    reason = Text()
    flagged_at = DateTime(required=True)


@reviews.event(part_of="Review")
class ReviewReinstated:
    """A moderator put a flagged review back on the target's profile."""

    __version__ = 1

    review_id = Identifier(required=True)
    target_id = Identifier(required=True)
    target_type = String(required=True)
    moderator_id = Identifier(required=True)
    reinstated_at = DateTime(required=True)


@reviews.event(part_of="Review")
class ReviewRemoved:
    """A moderator removed the review for good."""

    __version__ = 1

    review_id = Identifier(required=True)
    target_id = Identifier(required=True)
    target_type = String(required=True)
    moderator_id = Identifier(required=True)
    reason = Text()
    removed_at = DateTime(required=True)
