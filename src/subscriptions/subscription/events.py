"""Domain events for the Subscription aggregate.

SubscriptionActivated, SubscriptionTierChanged and SubscriptionStatusChanged
are also published as cross-domain contracts (see shared.events.subscriptions)
so the Identity domain can update member tiers.
"""

from protean.fields import Boolean, DateTime, Identifier, Integer, String

from subscriptions.domain import subscriptions


@subscriptions.event(part_of="Subscription")
class SubscriptionActivated:
    """A member started (or restarted) a paid subscription."""

    __version__ = 1

    subscription_id = Identifier(required=True)
    user_id = Identifier(required=True)
    tier = String(required=True)
    status = String(required=True)
    has_active_subscription = Boolean(required=True)
    activated_at = DateTime(required=True)


@subscriptions.event(part_of="Subscription")
class SubscriptionTierChanged:
    """A subscription moved to a different tier; its feature bundle was replaced."""

    __version__ = 1

    subscription_id = Identifier(required=True)
    user_id = Identifier(required=True)
    previous_tier = String()
    tier = String(required=True)
    has_active_subscription = Boolean(required=True)
    changed_at = DateTime(required=True)


@subscriptions.event(part_of="Subscription")
class SubscriptionStatusChanged:
    """The billing status of a subscription changed (sync, webhook or cancellation)."""

    __version__ = 1

    subscription_id = Identifier(required=True)
    user_id = Identifier(required=True)
    tier = String(required=True)
    status = String(required=True)
    has_active_subscription = Boolean(required=True)
    cancel_at_period_end = Boolean(default=False)
    changed_at = DateTime(required=True)


@subscriptions.event(part_of="Subscription")
class ProfileBoostUsed:
    """A member spent one of their monthly profile boosts."""

    __version__ = 1

    subscription_id = Identifier(required=True)
    user_id = Identifier(required=True)
    boosts_used_this_month = Integer(required=True)
    used_at = DateTime(required=True)
