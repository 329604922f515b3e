"""Subscriptions bounded context: Tiers, Feature Bundles, and Payment Methods.

Owns the one-per-member Subscription aggregate, the tier to feature-bundle
mapping, billing-status sync from the payment provider, and stored payment
methods. Publishes subscription events that the Identity domain consumes to
keep member tiers in sync.
"""

import structlog
from protean.domain import Domain

subscriptions = Domain(name="subscriptions")

logger = structlog.get_logger(__name__)
