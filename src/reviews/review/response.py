"""RespondToReview: the owner of the reviewed profile answers a review once."""

from protean.fields import Identifier, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from reviews.domain import reviews
from reviews.projections.reviewers import Reviewer
from reviews.review.review import Review
from shared.errors import ForbiddenError, InvalidStateError


@reviews.command(part_of="Review")
class RespondToReview:
    review_id = Identifier(required=True)
    responder_id = Identifier(required=True)
    response = Text(required=True)


@reviews.command_handler(part_of=Review)
class RespondToReviewHandler:
    @handle(RespondToReview)
    def respond_to_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)

        if review.response:
            raise InvalidStateError({"response": ["This review already has a response"]})

        responder = current_domain.repository_for(Reviewer).get(command.responder_id)
        if not responder.owns_profile(review.target_id):
            raise ForbiddenError({"responder_id": ["Only the owner of the reviewed profile can respond"]})

        review.respond(responder_id=command.responder_id, response=command.response)

        repo.add(review)
