"""SyncBillingStatus: apply a billing-provider webhook or periodic sync.

The provider is the source of truth for status and billing periods. The
payload is translated into this command by the API layer; signature
verification happens before the command is built.
"""

from protean.fields import Boolean, DateTime, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from subscriptions.domain import subscriptions
from subscriptions.subscription.subscription import Subscription


@subscriptions.command(part_of="Subscription")
class SyncBillingStatus:
    external_subscription_id = String(required=True, max_length=255)
    status = String(required=True, max_length=30)
    tier = String(max_length=20)
    current_period_start = DateTime()
    current_period_end = DateTime()
    cancel_at_period_end = Boolean()


@subscriptions.command_handler(part_of=Subscription)
class SyncBillingStatusHandler:
    @handle(SyncBillingStatus)
    def sync_billing_status(self, command):
        repo = current_domain.repository_for(Subscription)
        subscription = repo.get_by_external_id(command.external_subscription_id)

        subscription.sync_billing_status(
            status=command.status,
            tier=command.tier,
            current_period_start=command.current_period_start,
            current_period_end=command.current_period_end,
            cancel_at_period_end=command.cancel_at_period_end,
        )

        repo.add(subscription)
