"""Integration tests for the subscription feature backfill across Identity and Subscriptions."""

import json

from identity.member.member import Member
from subscriptions.migration import SubscriptionFeatureMigration
from subscriptions.subscription.features import features_for_tier
from subscriptions.subscription.subscription import Subscription


def _add_member(identity, email, tier=None):
    with identity.domain_context():
        member = Member(email=email, full_name=email.split("@")[0], role="artist", subscription_tier=tier)
        identity.repository_for(Member).add(member)
        return str(member.id)


def _add_subscription(subscriptions, user_id, **fields):
    with subscriptions.domain_context():
        subscription = Subscription(user_id=user_id, **fields)
        subscriptions.repository_for(Subscription).add(subscription)
        return str(subscription.id)


def _member(identity, member_id):
    with identity.domain_context():
        return identity.repository_for(Member).get(member_id)


def _subscription(subscriptions, subscription_id):
    with subscriptions.domain_context():
        return subscriptions.repository_for(Subscription).get(subscription_id)


class TestSubscriptionFeatureMigration:
    def _seed_legacy_records(self, identity, subscriptions):
        """Three members as earlier releases left them.

        - ``pro_id``: no tier, active pro plan without a tier or feature bundle
        - ``basic_id``: on the retired basic tier, with an active basic subscription
        - ``free_id``: no tier and no subscription
        """
        pro_id = _add_member(identity, "legacy.pro@example.com")
        basic_id = _add_member(identity, "legacy.basic@example.com", tier="basic")
        free_id = _add_member(identity, "legacy.free@example.com")

        pro_sub = _add_subscription(subscriptions, pro_id, plan="pro", status="active")
        basic_sub = _add_subscription(subscriptions, basic_id, plan="basic", tier="basic", status="active")
        return pro_id, basic_id, free_id, pro_sub, basic_sub

    def test_backfills_legacy_records(self, identity_domain, subscriptions_domain):
        pro_id, basic_id, free_id, pro_sub, basic_sub = self._seed_legacy_records(
            identity_domain, subscriptions_domain
        )

        report = SubscriptionFeatureMigration(identity_domain, subscriptions_domain).run()

        pro = _subscription(subscriptions_domain, pro_sub)
        assert pro.tier == "pro"
        assert pro.has_active_subscription is True
        features = json.loads(pro.features)
        assert features["daily_swipe_limit"] == -1
        assert features["can_see_who_liked_you"] is True

        basic = _subscription(subscriptions_domain, basic_sub)
        assert basic.tier == "pro"
        assert basic.plan == "pro"
        assert json.loads(basic.features) == features_for_tier("pro")

        assert _member(identity_domain, pro_id).subscription_tier == "pro"
        assert _member(identity_domain, pro_id).has_active_subscription is True
        assert _member(identity_domain, basic_id).subscription_tier == "pro"
        assert _member(identity_domain, free_id).subscription_tier == "free"
        assert _member(identity_domain, free_id).has_active_subscription is False

        assert report.modified == {
            "default_member_tiers": 2,
            "sync_active_member_tiers": 2,
            "backfill_subscription_tiers": 1,
            "derive_active_flags": 2,
            "backfill_missing_features": 2,
            "refresh_pro_features": 1,
            "refresh_premium_features": 0,
            "upgrade_basic_subscriptions": 1,
            "upgrade_basic_members": 1,
        }
        assert report.failures == 0

    def test_second_run_changes_nothing(self, identity_domain, subscriptions_domain):
        self._seed_legacy_records(identity_domain, subscriptions_domain)
        migration = SubscriptionFeatureMigration(identity_domain, subscriptions_domain)
        migration.run()

        report = migration.run()

        assert report.total_modified == 0
        assert set(report.modified.values()) == {0}

    def test_inactive_subscription_does_not_upgrade_member(self, identity_domain, subscriptions_domain):
        member_id = _add_member(identity_domain, "lapsed@example.com")
        _add_subscription(subscriptions_domain, member_id, plan="premium", tier="premium", status="past_due")

        SubscriptionFeatureMigration(identity_domain, subscriptions_domain).run()

        member = _member(identity_domain, member_id)
        assert member.subscription_tier == "free"
        assert member.has_active_subscription is False

    def test_current_premium_bundle_is_left_untouched(self, identity_domain, subscriptions_domain):
        member_id = _add_member(identity_domain, "vip@example.com", tier="premium")
        stored = json.dumps(features_for_tier("premium"), indent=2)
        sub_id = _add_subscription(
            subscriptions_domain,
            member_id,
            plan="premium",
            tier="premium",
            status="active",
            has_active_subscription=True,
            features=stored,
        )

        report = SubscriptionFeatureMigration(identity_domain, subscriptions_domain).run()

        assert report.modified["refresh_premium_features"] == 0
        assert _subscription(subscriptions_domain, sub_id).features == stored

    def test_small_batches_reach_every_record(self, identity_domain, subscriptions_domain):
        member_ids = [_add_member(identity_domain, f"batch{i}@example.com") for i in range(7)]

        report = SubscriptionFeatureMigration(identity_domain, subscriptions_domain, batch_size=3).run()

        assert report.modified["default_member_tiers"] == 7
        assert all(_member(identity_domain, m).subscription_tier == "free" for m in member_ids)

    def test_invalid_record_is_counted_and_skipped(self, identity_domain, subscriptions_domain):
        _add_member(identity_domain, "one@example.com")
        _add_member(identity_domain, "two@example.com")
        migration = SubscriptionFeatureMigration(identity_domain, subscriptions_domain)

        modified = migration._migrate(identity_domain, Member, lambda member: {"role": "roadie"})

        assert modified == 0
        assert migration.report.failures == 2
