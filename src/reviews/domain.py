"""Reviews & Ratings bounded context: Gig Reviews, Ratings, and Moderation.

Handles the review lifecycle (CQRS), helpful votes, owner responses,
moderation, and rating aggregation onto artist and venue profiles.
Integrates with the Identity domain (who owns which profile) and the Gigs
service (who took part in which completed gig) via cross-domain events.
"""

import structlog
from protean.domain import Domain

reviews = Domain(name="reviews")

logger = structlog.get_logger(__name__)
