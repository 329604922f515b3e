"""ActivateSubscription: start or restart a member's subscription.

A member has at most one subscription. A new purchase by a member who
already has one (canceled, lapsed, or on another tier) reactivates that
record instead of creating a second one.
"""

from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from subscriptions.domain import subscriptions
from subscriptions.subscription.subscription import Subscription


@subscriptions.command(part_of="Subscription")
class ActivateSubscription:
    user_id = Identifier(required=True)
    tier = String(required=True, max_length=20)
    external_subscription_id = String(max_length=255)
    external_customer_id = String(max_length=255)
    is_yearly_billing = Boolean(default=False)


@subscriptions.command_handler(part_of=Subscription)
class ActivateSubscriptionHandler:
    @handle(ActivateSubscription)
    def activate_subscription(self, command):
        repo = current_domain.repository_for(Subscription)

        subscription = repo.find_by_user(command.user_id)
        if subscription is None:
            subscription = Subscription.activate(
                user_id=command.user_id,
                tier=command.tier,
                external_subscription_id=command.external_subscription_id,
                external_customer_id=command.external_customer_id,
                is_yearly_billing=command.is_yearly_billing,
            )
        else:
            subscription.reactivate(
                tier=command.tier,
                external_subscription_id=command.external_subscription_id,
                external_customer_id=command.external_customer_id,
                is_yearly_billing=command.is_yearly_billing,
            )

        repo.add(subscription)
        return str(subscription.id)
