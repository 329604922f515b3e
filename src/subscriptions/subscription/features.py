"""Tier to feature-bundle resolution.

Every subscription tier maps to a fixed bundle of feature flags. Numeric
allowances use ``-1`` for "unlimited". The bundles are plain data: no domain
or repository access, so the same mapping is used by the Subscription
aggregate, the feature-access API and the backfill migration.
"""

import copy
from dataclasses import dataclass
from enum import Enum

UNLIMITED = -1


class Tier(Enum):
    FREE = "free"
    PRO = "pro"
    PREMIUM = "premium"


# Tier values written by earlier releases, and what they mean today
LEGACY_TIER_ALIASES = {
    "basic": Tier.PRO.value,
}

_TIER_RANK = {
    Tier.FREE.value: 0,
    Tier.PRO.value: 1,
    Tier.PREMIUM.value: 2,
}

FEATURE_BUNDLES = {
    Tier.FREE.value: {
        "daily_swipe_limit": 100,
        "can_see_who_liked_you": False,
        "boosts_per_month": 0,
        "max_profile_boosts": 0,
        "priority_in_search": False,
        "advanced_analytics": False,
        "custom_profile_url": False,
        "verified_badge": False,
        "unlimited_messages": True,
        "can_see_views": False,
        "can_use_advanced_filters": False,
        "can_message_first": False,
        "can_see_read_receipts": False,
        "max_gig_applications": 5,
        "can_access_analytics": False,
        "max_media_uploads": 3,
    },
    Tier.PRO.value: {
        "daily_swipe_limit": UNLIMITED,
        "can_see_who_liked_you": True,
        "boosts_per_month": 5,
        "max_profile_boosts": 5,
        "priority_in_search": False,
        "advanced_analytics": True,
        "custom_profile_url": False,
        "verified_badge": False,
        "unlimited_messages": True,
        "can_see_views": True,
        "can_use_advanced_filters": True,
        "can_message_first": True,
        "can_see_read_receipts": True,
        "max_gig_applications": 20,
        "can_access_analytics": True,
        "max_media_uploads": 10,
    },
    Tier.PREMIUM.value: {
        "daily_swipe_limit": UNLIMITED,
        "can_see_who_liked_you": True,
        "boosts_per_month": UNLIMITED,
        "max_profile_boosts": UNLIMITED,
        "priority_in_search": True,
        "advanced_analytics": True,
        "custom_profile_url": True,
        "verified_badge": True,
        "unlimited_messages": True,
        "can_see_views": True,
        "can_use_advanced_filters": True,
        "can_message_first": True,
        "can_see_read_receipts": True,
        "max_gig_applications": UNLIMITED,
        "can_access_analytics": True,
        "max_media_uploads": UNLIMITED,
    },
}


def normalize_tier(tier: str | None) -> str:
    """Return the canonical tier value for ``tier``.

    Legacy aliases are rewritten and missing or unknown values fall back to
    ``free``.
    """
    if not tier:
        return Tier.FREE.value
    tier = LEGACY_TIER_ALIASES.get(tier, tier)
    return tier if tier in FEATURE_BUNDLES else Tier.FREE.value


def is_known_tier(tier: str | None) -> bool:
    return bool(tier) and (tier in FEATURE_BUNDLES or tier in LEGACY_TIER_ALIASES)


def features_for_tier(tier: str | None) -> dict:
    """Return a fresh copy of the feature bundle for ``tier``."""
    return copy.deepcopy(FEATURE_BUNDLES[normalize_tier(tier)])


def tier_rank(tier: str | None) -> int:
    return _TIER_RANK[normalize_tier(tier)]


def tier_satisfies(tier: str | None, required: str) -> bool:
    """True when ``tier`` is at least as high as ``required``."""
    return tier_rank(tier) >= tier_rank(required)


@dataclass(frozen=True)
class FeatureCheck:
    """Outcome of checking a numeric or boolean feature allowance."""

    feature: str
    can_access: bool
    limit: int | bool | None = None
    remaining: int | None = None


def check_allowance(features: dict, feature: str, used: int = 0) -> FeatureCheck:
    """Check whether ``features`` still allow ``feature`` after ``used`` uses.

    Boolean flags grant or deny outright. Numeric allowances grant while
    ``used`` is below the limit; ``-1`` is unlimited and reports
    ``remaining=-1``.
    """
    limit = features.get(feature)

    if limit is None:
        return FeatureCheck(feature=feature, can_access=False)

    if isinstance(limit, bool):
        return FeatureCheck(feature=feature, can_access=limit, limit=limit)

    if limit == UNLIMITED:
        return FeatureCheck(feature=feature, can_access=True, limit=limit, remaining=UNLIMITED)

    remaining = max(0, limit - used)
    return FeatureCheck(feature=feature, can_access=remaining > 0, limit=limit, remaining=remaining)
