"""GigMatch Observatory: real-time message flow observability.

Uses Protean's built-in Observatory server to provide a live dashboard,
Prometheus metrics, and REST API for monitoring the event pipeline across
the Identity, Reviews and Subscriptions domains.

Usage:
    uvicorn src.observatory:app --host 0.0.0.0 --port 9000
"""

from identity.domain import identity
from protean.server.observatory import create_observatory_app
from reviews.domain import reviews
from subscriptions.domain import subscriptions

identity.init()
reviews.init()
subscriptions.init()

app = create_observatory_app(
    domains=[identity, reviews, subscriptions],
    title="GigMatch Observatory",
)
