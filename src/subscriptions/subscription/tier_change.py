"""ChangeSubscriptionTier: move a member to another tier."""

from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from subscriptions.domain import subscriptions
from subscriptions.subscription.subscription import Subscription


@subscriptions.command(part_of="Subscription")
class ChangeSubscriptionTier:
    user_id = Identifier(required=True)
    tier = String(required=True, max_length=20)


@subscriptions.command_handler(part_of=Subscription)
class ChangeSubscriptionTierHandler:
    @handle(ChangeSubscriptionTier)
    def change_subscription_tier(self, command):
        repo = current_domain.repository_for(Subscription)
        subscription = repo.get_by_user(command.user_id)

        subscription.change_tier(command.tier)

        repo.add(subscription)
