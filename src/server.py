"""Protean Engine runner for GigMatch domains.

Starts Engine workers that process events asynchronously:
- OutboxProcessor: polls outbox table, publishes events to Redis Streams
- StreamSubscriptions: reads Redis Streams, invokes event handlers

Usage:
    python src/server.py                        # Run every domain engine
    python src/server.py --domain reviews       # Run only the reviews engine
    python src/server.py --domain subscriptions # Run only the subscriptions engine
"""

import argparse
import asyncio

from protean.server.engine import Engine

DOMAIN_NAMES = ["identity", "reviews", "subscriptions"]


def _get_domain(name):
    """Import and initialize a domain by name."""
    if name == "identity":
        from identity.domain import identity as domain
    elif name == "reviews":
        from reviews.domain import reviews as domain
    elif name == "subscriptions":
        from subscriptions.domain import subscriptions as domain
    else:
        raise ValueError(f"Unknown domain: {name}")

    domain.init()
    return domain


async def run(domain_names):
    engines = [Engine(_get_domain(name)) for name in domain_names]
    await asyncio.gather(*(engine.run() for engine in engines))


def main():
    parser = argparse.ArgumentParser(description="GigMatch Engine runner")
    parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        help="Run a single domain engine (default: run all)",
    )
    args = parser.parse_args()

    domain_names = [args.domain] if args.domain else DOMAIN_NAMES

    asyncio.run(run(domain_names))


if __name__ == "__main__":
    main()
