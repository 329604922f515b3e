"""Subscription feature backfill: brings stored tiers and feature bundles up to date.

Records written by earlier releases can lack a tier, carry the retired
``basic`` tier, or hold a stale feature bundle. This migration walks every
member and subscription and rewrites them in a fixed order of steps:

    a. members without a tier start on ``free`` with no active subscription
    b. every active subscription pushes its tier (or plan) onto its member
    c. subscriptions without a tier inherit it from their plan
    d. ``has_active_subscription`` is derived from ``status == active``
    e. subscriptions without a feature bundle get the free bundle
    f. pro subscriptions get the current pro bundle
    g. premium subscriptions get the current premium bundle
    h. the retired ``basic`` tier becomes ``pro`` on subscriptions and members

A record counts as modified only when one of its values actually changes,
so running the migration again reports zero modifications.

Records are updated one at a time outside any cross-domain transaction. A
record that fails validation is logged, counted as a failure and skipped;
any other error (a lost database connection, for instance) aborts the run.
"""

import json
from dataclasses import dataclass, field

import structlog
from identity.member.member import Member
from protean.exceptions import ValidationError

from shared.querying import scan
from subscriptions.subscription.features import Tier, features_for_tier
from subscriptions.subscription.subscription import Subscription, SubscriptionStatus

logger = structlog.get_logger(__name__)

LEGACY_BASIC = "basic"


@dataclass
class MigrationReport:
    """Per-step modification counts of one migration run."""

    modified: dict[str, int] = field(default_factory=dict)
    failures: int = 0

    @property
    def total_modified(self) -> int:
        return sum(self.modified.values())


class SubscriptionFeatureMigration:
    def __init__(self, identity_domain, subscriptions_domain, batch_size: int = 100):
        self.identity = identity_domain
        self.subscriptions = subscriptions_domain
        self.batch_size = batch_size
        self.report = MigrationReport()

    def run(self) -> MigrationReport:
        self.report = MigrationReport()

        steps = [
            ("default_member_tiers", self.default_member_tiers),
            ("sync_active_member_tiers", self.sync_active_member_tiers),
            ("backfill_subscription_tiers", self.backfill_subscription_tiers),
            ("derive_active_flags", self.derive_active_flags),
            ("backfill_missing_features", self.backfill_missing_features),
            ("refresh_pro_features", self.refresh_pro_features),
            ("refresh_premium_features", self.refresh_premium_features),
            ("upgrade_basic_subscriptions", self.upgrade_basic_subscriptions),
            ("upgrade_basic_members", self.upgrade_basic_members),
        ]
        for name, step in steps:
            modified = step()
            self.report.modified[name] = modified
            logger.info("Migration step complete", step=name, modified=modified)

        logger.info(
            "Subscription feature migration finished",
            total_modified=self.report.total_modified,
            failures=self.report.failures,
        )
        return self.report

    # -------------------------------------------------------------------
    # Members
    # -------------------------------------------------------------------
    def default_member_tiers(self) -> int:
        def changes(member):
            if member.subscription_tier:
                return None
            return {"subscription_tier": Tier.FREE.value, "has_active_subscription": False}

        return self._migrate(self.identity, Member, changes)

    def sync_active_member_tiers(self) -> int:
        with self.subscriptions.domain_context():
            repo = self.subscriptions.repository_for(Subscription)
            active_tiers = {
                str(subscription.user_id): subscription.tier or subscription.plan or Tier.FREE.value
                for subscription in scan(repo._dao, "id", self.batch_size)
                if subscription.status == SubscriptionStatus.ACTIVE.value
            }

        def changes(member):
            tier = active_tiers.get(str(member.id))
            if tier is None:
                return None
            return {"subscription_tier": tier, "has_active_subscription": True}

        return self._migrate(self.identity, Member, changes)

    def upgrade_basic_members(self) -> int:
        def changes(member):
            if member.subscription_tier != LEGACY_BASIC:
                return None
            return {"subscription_tier": Tier.PRO.value}

        return self._migrate(self.identity, Member, changes)

    # -------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------
    def backfill_subscription_tiers(self) -> int:
        def changes(subscription):
            if subscription.tier:
                return None
            return {"tier": subscription.plan or Tier.FREE.value}

        return self._migrate(self.subscriptions, Subscription, changes)

    def derive_active_flags(self) -> int:
        def changes(subscription):
            return {"has_active_subscription": subscription.status == SubscriptionStatus.ACTIVE.value}

        return self._migrate(self.subscriptions, Subscription, changes)

    def backfill_missing_features(self) -> int:
        def changes(subscription):
            if subscription.features:
                return None
            return {"features": json.dumps(features_for_tier(Tier.FREE.value))}

        return self._migrate(self.subscriptions, Subscription, changes)

    def refresh_pro_features(self) -> int:
        return self._refresh_bundle(Tier.PRO.value)

    def refresh_premium_features(self) -> int:
        return self._refresh_bundle(Tier.PREMIUM.value)

    def upgrade_basic_subscriptions(self) -> int:
        def changes(subscription):
            if LEGACY_BASIC not in (subscription.tier, subscription.plan):
                return None
            return {
                "tier": Tier.PRO.value,
                "plan": Tier.PRO.value,
                "features": _bundle_json(subscription, Tier.PRO.value),
            }

        return self._migrate(self.subscriptions, Subscription, changes)

    def _refresh_bundle(self, tier: str) -> int:
        def changes(subscription):
            if subscription.tier != tier:
                return None
            return {"features": _bundle_json(subscription, tier)}

        return self._migrate(self.subscriptions, Subscription, changes)

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def _migrate(self, domain, aggregate_cls, changes) -> int:
        """Apply ``changes(record)`` to every record of ``aggregate_cls``.

        ``changes`` returns the field values the record should have, or None
        to leave it alone. Returns the number of records actually modified.
        """
        modified = 0
        with domain.domain_context():
            repo = domain.repository_for(aggregate_cls)
            for record in scan(repo._dao, "id", self.batch_size):
                wanted = changes(record)
                if not wanted:
                    continue

                updates = {name: value for name, value in wanted.items() if getattr(record, name) != value}
                if not updates:
                    continue

                try:
                    for name, value in updates.items():
                        setattr(record, name, value)
                    repo.add(record)
                except ValidationError as exc:
                    self.report.failures += 1
                    logger.warning(
                        "Skipping record that failed validation",
                        aggregate=aggregate_cls.__name__,
                        record_id=str(record.id),
                        errors=exc.messages,
                    )
                    continue

                modified += 1

        return modified


def _bundle_json(subscription, tier: str) -> str:
    """The tier's bundle as stored JSON, keeping the current value when already equivalent."""
    bundle = features_for_tier(tier)
    if subscription.features and json.loads(subscription.features) == bundle:
        return subscription.features
    return json.dumps(bundle)
