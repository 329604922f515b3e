"""Application tests for the RespondToReview command handler."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from reviews.review.response import RespondToReview
from reviews.review.review import Review
from shared.errors import ForbiddenError, InvalidStateError

RESPONSE = "Thank you, it was a pleasure to play there."


def _respond(review_id, responder_id, response=RESPONSE):
    current_domain.process(
        RespondToReview(review_id=review_id, responder_id=responder_id, response=response),
        asynchronous=False,
    )


class TestRespondToReview:
    def test_profile_owner_responds(self, gig_party, submit_review):
        review_id = submit_review(gig_party.gig_id, gig_party.venue_user)

        _respond(review_id, gig_party.artist_user)

        review = current_domain.repository_for(Review).get(review_id)
        assert review.response == RESPONSE
        assert review.responded_at is not None

    def test_reviewer_cannot_answer_own_review(self, gig_party, submit_review):
        review_id = submit_review(gig_party.gig_id, gig_party.venue_user)

        with pytest.raises(ForbiddenError):
            _respond(review_id, gig_party.venue_user)

    def test_only_one_response(self, gig_party, submit_review):
        review_id = submit_review(gig_party.gig_id, gig_party.venue_user)
        _respond(review_id, gig_party.artist_user)

        with pytest.raises(InvalidStateError):
            _respond(review_id, gig_party.artist_user, "Actually, one more thing to add.")

    def test_existing_response_wins_over_ownership(self, gig_party, submit_review):
        review_id = submit_review(gig_party.gig_id, gig_party.venue_user)
        _respond(review_id, gig_party.artist_user)

        with pytest.raises(InvalidStateError):
            _respond(review_id, gig_party.outsider_user)

    def test_unknown_review(self, gig_party):
        with pytest.raises(ObjectNotFoundError):
            _respond("no-such-review", gig_party.artist_user)

    def test_unknown_responder(self, gig_party, submit_review):
        review_id = submit_review(gig_party.gig_id, gig_party.venue_user)

        with pytest.raises(ObjectNotFoundError):
            _respond(review_id, "ghost-member")

    def test_response_too_short(self, gig_party, submit_review):
        review_id = submit_review(gig_party.gig_id, gig_party.venue_user)

        with pytest.raises(ValidationError):
            _respond(review_id, gig_party.artist_user, "Thanks")
