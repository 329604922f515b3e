"""Inbound cross-domain event handler: Identity reacts to Subscriptions events.

Keeps Member.subscription_tier and Member.has_active_subscription in step
with the member's subscription. A member keeps their paid tier only while
the subscription is active; otherwise they are back on the free tier.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from shared.events.subscriptions import (
    SubscriptionActivated,
    SubscriptionStatusChanged,
    SubscriptionTierChanged,
)

from identity.domain import identity
from identity.member.member import FREE_TIER, Member

logger = structlog.get_logger(__name__)

identity.register_external_event(SubscriptionActivated, "Subscriptions.SubscriptionActivated.v1")
identity.register_external_event(SubscriptionTierChanged, "Subscriptions.SubscriptionTierChanged.v1")
identity.register_external_event(SubscriptionStatusChanged, "Subscriptions.SubscriptionStatusChanged.v1")


@identity.event_handler(part_of=Member, stream_category="subscriptions::subscription")
class SubscriptionEventsHandler:
    """Applies subscription changes to the owning member."""

    @handle(SubscriptionActivated)
    def on_subscription_activated(self, event: SubscriptionActivated) -> None:
        self._apply(event.user_id, event.tier, event.has_active_subscription)

    @handle(SubscriptionTierChanged)
    def on_subscription_tier_changed(self, event: SubscriptionTierChanged) -> None:
        self._apply(event.user_id, event.tier, event.has_active_subscription)

    @handle(SubscriptionStatusChanged)
    def on_subscription_status_changed(self, event: SubscriptionStatusChanged) -> None:
        self._apply(event.user_id, event.tier, event.has_active_subscription)

    def _apply(self, user_id, tier, has_active_subscription):
        repo = current_domain.repository_for(Member)
        try:
            member = repo.get(user_id)
        except ObjectNotFoundError:
            logger.warning("Subscription event for unknown member, skipping", member_id=str(user_id))
            return

        effective_tier = tier if has_active_subscription else FREE_TIER
        if member.update_subscription_access(effective_tier, bool(has_active_subscription)):
            repo.add(member)
            logger.info(
                "Member subscription access updated",
                member_id=str(user_id),
                subscription_tier=effective_tier,
                has_active_subscription=bool(has_active_subscription),
            )
