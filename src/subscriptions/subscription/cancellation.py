"""CancelSubscription: cancel immediately or at the end of the billing period.

Immediate cancellation revokes paid features right away; the member drops to
the free bundle. Otherwise the subscription stays active until the provider
reports the period has ended.
"""

from protean.fields import Boolean, Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from subscriptions.domain import subscriptions
from subscriptions.subscription.subscription import Subscription


@subscriptions.command(part_of="Subscription")
class CancelSubscription:
    user_id = Identifier(required=True)
    immediately = Boolean(default=False)


@subscriptions.command_handler(part_of=Subscription)
class CancelSubscriptionHandler:
    @handle(CancelSubscription)
    def cancel_subscription(self, command):
        repo = current_domain.repository_for(Subscription)
        subscription = repo.get_by_user(command.user_id)

        subscription.cancel(immediately=bool(command.immediately))

        repo.add(subscription)
