"""Tests for the Review aggregate: publication, responses, helpful votes and moderation."""

import pytest
from protean.exceptions import ValidationError
from reviews.review.events import (
    HelpfulToggled,
    ReviewFlagged,
    ReviewPublished,
    ReviewReinstated,
    ReviewRemoved,
    ReviewResponseAdded,
)
from reviews.review.review import ANONYMOUS_REVIEWER, Review, ReviewStatus
from shared.errors import InvalidStateError


def _publish(**overrides):
    defaults = {
        "gig_id": "gig-1",
        "gig_title": "Sunday Blues",
        "reviewer_id": "venue-user-1",
        "reviewer_role": "venue",
        "reviewer_name": "The Blue Room",
        "target_id": "artist-1",
        "target_type": "Artist",
        "overall_rating": 4,
        "content": "Tight set and great with the crowd.",
    }
    defaults.update(overrides)
    return Review.publish(**defaults)


class TestPublish:
    def test_published_review(self):
        review = _publish(tags=["on-time", "energetic"], reliability_rating=5)

        assert review.status == ReviewStatus.PUBLISHED.value
        assert review.is_published
        assert review.review_key == "gig-1:venue-user-1"
        assert review.tag_list == ["on-time", "energetic"]
        assert review.photo_list == []
        assert review.helpful_count == 0
        assert review.is_verified_booking is True

        event = review._events[-1]
        assert isinstance(event, ReviewPublished)
        assert event.target_type == "Artist"
        assert event.overall_rating == 4

    def test_blank_reviewer_name_becomes_anonymous(self):
        assert _publish(reviewer_name="   ").reviewer_name == ANONYMOUS_REVIEWER

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_out_of_range(self, rating):
        with pytest.raises(ValidationError):
            _publish(overall_rating=rating)

    def test_category_rating_out_of_range(self):
        with pytest.raises(ValidationError):
            _publish(payment_rating=7)

    @pytest.mark.parametrize("content", ["Too short", "x" * 1001])
    def test_content_length_bounds(self, content):
        with pytest.raises(ValidationError) as exc:
            _publish(content=content)
        assert "content" in exc.value.messages

    def test_content_length_limits_are_inclusive(self):
        assert _publish(content="x" * 10).content == "x" * 10
        assert len(_publish(content="x" * 1000).content) == 1000

    def test_unknown_target_type(self):
        with pytest.raises(ValidationError):
            _publish(target_type="Promoter")


class TestRespond:
    def test_first_response_is_recorded(self):
        review = _publish()
        review.respond("artist-user-1", "Thanks for having us, see you soon!")

        assert review.response == "Thanks for having us, see you soon!"
        assert review.responded_at is not None
        assert isinstance(review._events[-1], ReviewResponseAdded)

    def test_second_response_rejected(self):
        review = _publish()
        review.respond("artist-user-1", "Thanks for having us, see you soon!")

        with pytest.raises(InvalidStateError):
            review.respond("artist-user-1", "Changing my answer after all.")

    @pytest.mark.parametrize("response", ["Thanks!", "y" * 501])
    def test_response_length_bounds(self, response):
        review = _publish()
        with pytest.raises(ValidationError) as exc:
            review.respond("artist-user-1", response)
        assert "response" in exc.value.messages


class TestToggleHelpful:
    def test_mark_and_unmark(self):
        review = _publish()

        assert review.toggle_helpful("fan-1") is True
        assert review.helpful_count == 1
        assert review.is_marked_helpful_by("fan-1")

        assert review.toggle_helpful("fan-1") is False
        assert review.helpful_count == 0
        assert not review.is_marked_helpful_by("fan-1")
        assert len(review.helpful_votes) == 0

    def test_votes_from_different_members_add_up(self):
        review = _publish()
        review.toggle_helpful("fan-1")
        review.toggle_helpful("fan-2")

        assert review.helpful_count == 2

    def test_toggle_raises_event(self):
        review = _publish()
        review.toggle_helpful("fan-1")

        event = review._events[-1]
        assert isinstance(event, HelpfulToggled)
        assert event.marked == "True"
        assert event.helpful_count == 1


class TestModeration:
    def test_flag_and_reinstate(self):
        review = _publish()

        review.flag("admin-1", reason="Reported as spam")
        assert review.status == ReviewStatus.FLAGGED.value
        assert review.moderation_notes == "Reported as spam"
        assert isinstance(review._events[-1], ReviewFlagged)

        review.reinstate("admin-1")
        assert review.status == ReviewStatus.PUBLISHED.value
        assert isinstance(review._events[-1], ReviewReinstated)

    def test_remove_is_terminal(self):
        review = _publish()
        review.remove("admin-1", reason="Abusive language")

        assert review.status == ReviewStatus.REMOVED.value
        assert isinstance(review._events[-1], ReviewRemoved)
        with pytest.raises(InvalidStateError):
            review.reinstate("admin-1")

    def test_cannot_flag_twice(self):
        review = _publish()
        review.flag("admin-1")
        with pytest.raises(InvalidStateError):
            review.flag("admin-1")

    def test_cannot_reinstate_published_review(self):
        with pytest.raises(InvalidStateError):
            _publish().reinstate("admin-1")
