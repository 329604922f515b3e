"""Cross-domain event contracts for Subscriptions domain events.

Consumed by the Identity domain to keep the denormalized
subscription_tier / has_active_subscription fields on Member in sync.

The source-of-truth events are in src/subscriptions/subscription/events.py.
"""

from protean.core.event import BaseEvent
from protean.fields import Boolean, DateTime, Identifier, String


class SubscriptionActivated(BaseEvent):
    """A member started (or restarted) a paid subscription."""

    __version__ = 1

    subscription_id = Identifier(required=True)
    user_id = Identifier(required=True)
    tier = String(required=True)
    status = String(required=True)
    has_active_subscription = Boolean(required=True)
    activated_at = DateTime(required=True)


class SubscriptionTierChanged(BaseEvent):
    """A subscription moved to a different tier; its feature bundle was replaced."""

    __version__ = 1

    subscription_id = Identifier(required=True)
    user_id = Identifier(required=True)
    previous_tier = String()
    tier = String(required=True)
    has_active_subscription = Boolean(required=True)
    changed_at = DateTime(required=True)


class SubscriptionStatusChanged(BaseEvent):
    """The billing status of a subscription changed (sync, webhook or cancellation)."""

    __version__ = 1

    subscription_id = Identifier(required=True)
    user_id = Identifier(required=True)
    tier = String(required=True)
    status = String(required=True)
    has_active_subscription = Boolean(required=True)
    cancel_at_period_end = Boolean(default=False)
    changed_at = DateTime(required=True)
