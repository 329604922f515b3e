"""UseProfileBoost: spend one of the member's monthly profile boosts."""

from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from subscriptions.domain import subscriptions
from subscriptions.subscription.subscription import Subscription


@subscriptions.command(part_of="Subscription")
class UseProfileBoost:
    user_id = Identifier(required=True)


@subscriptions.command_handler(part_of=Subscription)
class UseProfileBoostHandler:
    @handle(UseProfileBoost)
    def use_profile_boost(self, command):
        repo = current_domain.repository_for(Subscription)
        subscription = repo.get_by_user(command.user_id)

        remaining = subscription.use_profile_boost()

        repo.add(subscription)
        return remaining.remaining
