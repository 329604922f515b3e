"""Application tests for the Subscriptions → Identity event handler."""

from datetime import UTC, datetime

from identity.member.member import Member
from identity.member.subscription_events import SubscriptionEventsHandler
from protean import current_domain
from shared.events.subscriptions import (
    SubscriptionActivated,
    SubscriptionStatusChanged,
    SubscriptionTierChanged,
)


def _member(email="fan@example.com"):
    member = Member.register(email=email, full_name="Mo Tempo", role="artist")
    current_domain.repository_for(Member).add(member)
    return member


def _reload(member):
    return current_domain.repository_for(Member).get(member.id)


class TestSubscriptionActivated:
    def test_active_subscription_sets_member_tier(self):
        member = _member()

        SubscriptionEventsHandler().on_subscription_activated(
            SubscriptionActivated(
                subscription_id="sub-1",
                user_id=str(member.id),
                tier="premium",
                status="active",
                has_active_subscription=True,
                activated_at=datetime.now(UTC),
            )
        )

        refreshed = _reload(member)
        assert refreshed.subscription_tier == "premium"
        assert refreshed.has_active_subscription is True

    def test_unknown_member_is_skipped(self):
        SubscriptionEventsHandler().on_subscription_activated(
            SubscriptionActivated(
                subscription_id="sub-2",
                user_id="nobody",
                tier="pro",
                status="active",
                has_active_subscription=True,
                activated_at=datetime.now(UTC),
            )
        )

        assert current_domain.repository_for(Member)._dao.query.all().items == []


class TestTierAndStatusChanges:
    def test_tier_change_updates_member(self):
        member = _member()
        member.update_subscription_access("pro", True)
        current_domain.repository_for(Member).add(member)

        SubscriptionEventsHandler().on_subscription_tier_changed(
            SubscriptionTierChanged(
                subscription_id="sub-3",
                user_id=str(member.id),
                previous_tier="pro",
                tier="premium",
                has_active_subscription=True,
                changed_at=datetime.now(UTC),
            )
        )

        assert _reload(member).subscription_tier == "premium"

    def test_inactive_subscription_drops_member_to_free(self):
        member = _member()
        member.update_subscription_access("premium", True)
        current_domain.repository_for(Member).add(member)

        SubscriptionEventsHandler().on_subscription_status_changed(
            SubscriptionStatusChanged(
                subscription_id="sub-4",
                user_id=str(member.id),
                tier="premium",
                status="past_due",
                has_active_subscription=False,
                changed_at=datetime.now(UTC),
            )
        )

        refreshed = _reload(member)
        assert refreshed.subscription_tier == "free"
        assert refreshed.has_active_subscription is False
