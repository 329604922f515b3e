"""Subscription aggregate (CQRS): a member's paid plan and its feature bundle.

One subscription per member. The tier decides the feature bundle; every tier
change replaces the whole bundle. ``has_active_subscription`` always mirrors
``status == active`` after a command runs.

``tier`` and ``plan`` are plain strings rather than enum-checked fields:
records written by earlier releases still carry the retired ``basic`` tier
and must load so the backfill migration can rewrite them.

Status transitions are driven by the billing provider (webhook/sync), except
for explicit cancellation:
    ACTIVE → PAST_DUE | UNPAID | PAUSED | CANCELED | ...
    any → ACTIVE (payment recovered, or reactivated by a new purchase)
    CANCELED → ACTIVE only through reactivation
"""

import json
from datetime import UTC, datetime, timedelta
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from shared.errors import InvalidStateError
from subscriptions.domain import subscriptions
from subscriptions.subscription.events import (
    ProfileBoostUsed,
    SubscriptionActivated,
    SubscriptionStatusChanged,
    SubscriptionTierChanged,
)
from subscriptions.subscription.features import (
    FeatureCheck,
    Tier,
    check_allowance,
    features_for_tier,
    is_known_tier,
    normalize_tier,
)

_MONTHLY_PERIOD = timedelta(days=30)
_YEARLY_PERIOD = timedelta(days=365)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class SubscriptionStatus(Enum):
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELED = "canceled"
    UNPAID = "unpaid"
    TRIALING = "trialing"
    INCOMPLETE = "incomplete"
    INCOMPLETE_EXPIRED = "incomplete_expired"
    PAUSED = "paused"


class SubscriptionPlan(Enum):
    FREE = "free"
    BASIC = "basic"  # Retired, rewritten to PRO by the feature backfill
    PRO = "pro"
    PREMIUM = "premium"
    ARTIST_BASIC = "artist_basic"
    ARTIST_PRO = "artist_pro"
    VENUE_BASIC = "venue_basic"
    VENUE_PRO = "venue_pro"
    ENTERPRISE = "enterprise"


def _validated_tier(tier):
    if not is_known_tier(tier):
        raise ValidationError({"tier": [f"Unknown subscription tier: {tier}"]})
    return normalize_tier(tier)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@subscriptions.aggregate
class Subscription:
    """A member's subscription to a GigMatch tier."""

    user_id = Identifier(required=True, unique=True)

    # Plan
    plan = String(choices=SubscriptionPlan)
    tier = String(max_length=20)
    features = Text()  # JSON: {feature_name: bool | int}, -1 is unlimited
    status = String(choices=SubscriptionStatus, default=SubscriptionStatus.ACTIVE.value)
    has_active_subscription = Boolean()

    # Billing provider linkage
    external_subscription_id = String(max_length=255)
    external_customer_id = String(max_length=255)
    is_yearly_billing = Boolean(default=False)
    current_period_start = DateTime()
    current_period_end = DateTime()
    cancel_at_period_end = Boolean(default=False)
    canceled_at = DateTime()

    # Usage
    boosts_used_this_month = Integer(default=0)

    # Timestamps
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def boost_usage_cannot_be_negative(self):
        if self.boosts_used_this_month is not None and self.boosts_used_this_month < 0:
            raise ValidationError({"boosts_used_this_month": ["Boost usage cannot be negative"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def activate(
        cls,
        user_id,
        tier,
        external_subscription_id=None,
        external_customer_id=None,
        is_yearly_billing=False,
    ):
        """Start a new active subscription on ``tier``."""
        tier = _validated_tier(tier)
        now = datetime.now(UTC)

        subscription = cls(
            user_id=user_id,
            plan=tier,
            tier=tier,
            features=json.dumps(features_for_tier(tier)),
            status=SubscriptionStatus.ACTIVE.value,
            has_active_subscription=True,
            external_subscription_id=external_subscription_id,
            external_customer_id=external_customer_id,
            is_yearly_billing=is_yearly_billing,
            current_period_start=now,
            current_period_end=now + (_YEARLY_PERIOD if is_yearly_billing else _MONTHLY_PERIOD),
            cancel_at_period_end=False,
            boosts_used_this_month=0,
            created_at=now,
            updated_at=now,
        )
        subscription._raise_activated(now)
        return subscription

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    @property
    def feature_bundle(self) -> dict:
        return json.loads(self.features) if self.features else {}

    @property
    def is_active(self) -> bool:
        return self.status == SubscriptionStatus.ACTIVE.value

    def effective_features(self) -> dict:
        """Features the member can use right now.

        Anything other than an active subscription falls back to the free
        bundle.
        """
        if not self.is_active:
            return features_for_tier(Tier.FREE.value)
        return self.feature_bundle or features_for_tier(self.tier)

    def check_feature(self, feature: str, used: int = 0) -> FeatureCheck:
        return check_allowance(self.effective_features(), feature, used)

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def reactivate(
        self,
        tier,
        external_subscription_id=None,
        external_customer_id=None,
        is_yearly_billing=False,
    ):
        """Restart this member's subscription on ``tier`` (new purchase)."""
        tier = _validated_tier(tier)
        now = datetime.now(UTC)

        with atomic_change(self):
            self.plan = tier
            self.tier = tier
            self.features = json.dumps(features_for_tier(tier))
            self.status = SubscriptionStatus.ACTIVE.value
            self.has_active_subscription = True
            if external_subscription_id:
                self.external_subscription_id = external_subscription_id
            if external_customer_id:
                self.external_customer_id = external_customer_id
            self.is_yearly_billing = is_yearly_billing
            self.current_period_start = now
            self.current_period_end = now + (_YEARLY_PERIOD if is_yearly_billing else _MONTHLY_PERIOD)
            self.cancel_at_period_end = False
            self.canceled_at = None
            self.boosts_used_this_month = 0
            self.updated_at = now

        self._raise_activated(now)

    def change_tier(self, tier):
        """Move to ``tier`` and replace the feature bundle."""
        tier = _validated_tier(tier)
        previous_tier = self.tier
        now = datetime.now(UTC)

        with atomic_change(self):
            self.plan = tier
            self.tier = tier
            self.features = json.dumps(features_for_tier(tier))
            self.updated_at = now

        self.raise_(
            SubscriptionTierChanged(
                subscription_id=str(self.id),
                user_id=str(self.user_id),
                previous_tier=previous_tier,
                tier=tier,
                has_active_subscription=bool(self.has_active_subscription),
                changed_at=now,
            )
        )

    def sync_billing_status(
        self,
        status,
        tier=None,
        current_period_start=None,
        current_period_end=None,
        cancel_at_period_end=None,
    ):
        """Apply the billing provider's view of this subscription."""
        try:
            new_status = SubscriptionStatus(status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown subscription status: {status}"]}) from None

        now = datetime.now(UTC)

        with atomic_change(self):
            self.status = new_status.value
            self.has_active_subscription = new_status == SubscriptionStatus.ACTIVE

            if tier is not None:
                tier = _validated_tier(tier)
                if tier != self.tier or not self.features:
                    self.plan = tier
                    self.tier = tier
                    self.features = json.dumps(features_for_tier(tier))

            # A new billing period restores the monthly allowances
            if current_period_start is not None and current_period_start != self.current_period_start:
                self.current_period_start = current_period_start
                self.boosts_used_this_month = 0
            if current_period_end is not None:
                self.current_period_end = current_period_end
            if cancel_at_period_end is not None:
                self.cancel_at_period_end = cancel_at_period_end

            if new_status == SubscriptionStatus.CANCELED and self.canceled_at is None:
                self.canceled_at = now
            self.updated_at = now

        self._raise_status_changed(now)

    def cancel(self, immediately=False):
        """Cancel now, or at the end of the current billing period."""
        if self.status == SubscriptionStatus.CANCELED.value:
            raise InvalidStateError({"status": ["Subscription is already canceled"]})

        now = datetime.now(UTC)

        with atomic_change(self):
            if immediately:
                self.status = SubscriptionStatus.CANCELED.value
                self.has_active_subscription = False
                self.cancel_at_period_end = False
            else:
                self.cancel_at_period_end = True
            self.canceled_at = now
            self.updated_at = now

        self._raise_status_changed(now)

    # -------------------------------------------------------------------
    # Usage
    # -------------------------------------------------------------------
    def use_profile_boost(self) -> FeatureCheck:
        """Spend one profile boost. Returns the allowance left afterwards."""
        check = self.check_feature("max_profile_boosts", used=self.boosts_used_this_month or 0)
        if not check.can_access:
            raise InvalidStateError({"boosts": ["No profile boosts remaining this month"]})

        now = datetime.now(UTC)
        self.boosts_used_this_month = (self.boosts_used_this_month or 0) + 1
        self.updated_at = now

        self.raise_(
            ProfileBoostUsed(
                subscription_id=str(self.id),
                user_id=str(self.user_id),
                boosts_used_this_month=self.boosts_used_this_month,
                used_at=now,
            )
        )
        return self.check_feature("max_profile_boosts", used=self.boosts_used_this_month)

    # -------------------------------------------------------------------
    # Event helpers
    # -------------------------------------------------------------------
    def _raise_activated(self, now):
        self.raise_(
            SubscriptionActivated(
                subscription_id=str(self.id),
                user_id=str(self.user_id),
                tier=self.tier,
                status=self.status,
                has_active_subscription=True,
                activated_at=now,
            )
        )

    def _raise_status_changed(self, now):
        self.raise_(
            SubscriptionStatusChanged(
                subscription_id=str(self.id),
                user_id=str(self.user_id),
                tier=normalize_tier(self.tier),
                status=self.status,
                has_active_subscription=bool(self.has_active_subscription),
                cancel_at_period_end=bool(self.cancel_at_period_end),
                changed_at=now,
            )
        )
