"""ModerateReview: admins flag, reinstate or remove reviews.

Every moderation action changes whether the review counts towards its
target's rating, so the target's rating summary is recomputed alongside.
"""

from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from reviews.domain import reviews
from reviews.projections.profile_ratings import refresh_profile_rating
from reviews.projections.reviewers import Reviewer
from reviews.review.review import ModerationAction, Review
from shared.errors import ForbiddenError

ADMIN_ROLE = "admin"


@reviews.command(part_of="Review")
class ModerateReview:
    review_id = Identifier(required=True)
    moderator_id = Identifier(required=True)
    action = String(required=True, max_length=20)  # "flag", "reinstate" or "remove"
    reason = Text()


@reviews.command_handler(part_of=Review)
class ModerateReviewHandler:
    @handle(ModerateReview)
    def moderate_review(self, command):
        try:
            action = ModerationAction(command.action)
        except ValueError:
            raise ValidationError({"action": [f"Unknown moderation action: {command.action}"]}) from None

        moderator = current_domain.repository_for(Reviewer).get(command.moderator_id)
        if moderator.role != ADMIN_ROLE:
            raise ForbiddenError({"moderator_id": ["Only admins can moderate reviews"]})

        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)

        if action == ModerationAction.FLAG:
            review.flag(moderator_id=command.moderator_id, reason=command.reason)
        elif action == ModerationAction.REINSTATE:
            review.reinstate(moderator_id=command.moderator_id, notes=command.reason)
        else:
            review.remove(moderator_id=command.moderator_id, reason=command.reason)

        repo.add(review)
        refresh_profile_rating(review)
