"""ToggleHelpful: mark a review as helpful, or take the mark back.

Calling it twice for the same member leaves the review as it was.
"""

from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from reviews.domain import reviews
from reviews.review.review import Review


@reviews.command(part_of="Review")
class ToggleHelpful:
    review_id = Identifier(required=True)
    user_id = Identifier(required=True)


@reviews.command_handler(part_of=Review)
class ToggleHelpfulHandler:
    @handle(ToggleHelpful)
    def toggle_helpful(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)

        marked = review.toggle_helpful(command.user_id)

        repo.add(review)
        return {"marked": marked, "helpful_count": review.helpful_count}
