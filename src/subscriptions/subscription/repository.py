"""Repository for the Subscription aggregate.

Subscriptions are addressed by their member (one per member) or by the
billing provider's subscription id when a webhook arrives.
"""

from protean.exceptions import ObjectNotFoundError

from subscriptions.domain import subscriptions
from subscriptions.subscription.subscription import Subscription


@subscriptions.repository(part_of=Subscription)
class SubscriptionRepository:
    def find_by_user(self, user_id) -> Subscription | None:
        items = self._dao.query.filter(user_id=str(user_id)).all().items
        return items[0] if items else None

    def get_by_user(self, user_id) -> Subscription:
        subscription = self.find_by_user(user_id)
        if subscription is None:
            raise ObjectNotFoundError({"_entity": f"No subscription found for member {user_id}"})
        return subscription

    def get_by_external_id(self, external_subscription_id) -> Subscription:
        items = self._dao.query.filter(external_subscription_id=external_subscription_id).all().items
        if not items:
            raise ObjectNotFoundError(
                {"_entity": f"No subscription found for billing id {external_subscription_id}"}
            )
        return items[0]
