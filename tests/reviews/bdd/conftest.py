"""Shared BDD fixtures and step definitions for the Reviews domain."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from reviews.review.events import (
    HelpfulToggled,
    ReviewFlagged,
    ReviewPublished,
    ReviewReinstated,
    ReviewRemoved,
    ReviewResponseAdded,
)
from reviews.review.review import Review
from shared.errors import DomainError

_REVIEW_EVENT_CLASSES = {
    "ReviewPublished": ReviewPublished,
    "ReviewResponseAdded": ReviewResponseAdded,
    "HelpfulToggled": HelpfulToggled,
    "ReviewFlagged": ReviewFlagged,
    "ReviewReinstated": ReviewReinstated,
    "ReviewRemoved": ReviewRemoved,
}


@pytest.fixture()
def error():
    """Container for captured domain and validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a published review of artist "{artist_id}" rated {rating:d} stars'),
    target_fixture="review",
)
def published_review_of_artist(artist_id, rating):
    review = Review.publish(
        gig_id="gig-bdd",
        gig_title="BDD Session",
        reviewer_id="venue-user-bdd",
        reviewer_role="venue",
        reviewer_name="BDD Venue",
        target_id=artist_id,
        target_type="Artist",
        overall_rating=rating,
        content="A review written for behaviour tests.",
    )
    review._events.clear()
    return review


@given(parsers.cfparse('member "{user_id}" has marked the review helpful'))
def member_marked_helpful(review, user_id):
    review.toggle_helpful(user_id)
    review._events.clear()


@given(parsers.cfparse('the review has the response "{response}"'))
def review_has_response(review, response):
    review.respond("artist-owner-bdd", response)
    review._events.clear()


@given("the review has been flagged")
def review_flagged(review):
    review.flag("admin-bdd")
    review._events.clear()


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the review status is "{status}"'))
def review_status_is(review, status):
    assert review.status == status


@then(parsers.cfparse("the review helpful count is {count:d}"))
def review_helpful_count(review, count):
    assert review.helpful_count == count


@then(parsers.cfparse('the review response is "{response}"'))
def review_response_is(review, response):
    assert review.response == response


@then("the review action fails with a validation error")
def review_action_fails_validation(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then("the review action is refused")
def review_action_refused(error):
    assert error["exc"] is not None, "Expected the action to be refused but it succeeded"
    assert isinstance(error["exc"], DomainError)


@then(parsers.cfparse("a {event_type} event is raised"))
def review_event_raised(review, event_type):
    event_cls = _REVIEW_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in review._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in review._events]}"


@then("no event is raised")
def no_event_raised(review):
    assert review._events == []
