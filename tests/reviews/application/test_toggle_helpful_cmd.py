"""Application tests for the ToggleHelpful command handler."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError
from reviews.review.helpful import ToggleHelpful
from reviews.review.review import Review


def _toggle(review_id, user_id):
    return current_domain.process(ToggleHelpful(review_id=review_id, user_id=user_id), asynchronous=False)


class TestToggleHelpful:
    def test_first_toggle_marks_helpful(self, gig_party, submit_review):
        review_id = submit_review(gig_party.gig_id, gig_party.venue_user)

        assert _toggle(review_id, "fan-1") == {"marked": True, "helpful_count": 1}

    def test_toggling_twice_restores_the_review(self, gig_party, submit_review):
        review_id = submit_review(gig_party.gig_id, gig_party.venue_user)

        _toggle(review_id, "fan-1")
        assert _toggle(review_id, "fan-1") == {"marked": False, "helpful_count": 0}

        review = current_domain.repository_for(Review).get(review_id)
        assert review.helpful_count == 0
        assert not review.is_marked_helpful_by("fan-1")

    def test_count_tracks_distinct_members(self, gig_party, submit_review):
        review_id = submit_review(gig_party.gig_id, gig_party.venue_user)

        _toggle(review_id, "fan-1")
        _toggle(review_id, "fan-2")
        result = _toggle(review_id, "fan-3")

        assert result["helpful_count"] == 3
        review = current_domain.repository_for(Review).get(review_id)
        assert len(review.helpful_votes) == 3

    def test_unknown_review(self):
        with pytest.raises(ObjectNotFoundError):
            _toggle("no-such-review", "fan-1")
