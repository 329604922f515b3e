"""Backfill subscription tiers and feature bundles.

Brings every stored member and subscription up to date with the current
tier to feature-bundle mapping: missing tiers default to ``free``, active
subscriptions push their tier onto members, stale pro/premium bundles are
replaced, and the retired ``basic`` tier becomes ``pro``.

The run is idempotent: a second run reports zero modifications.

Events raised by the rewritten records are published with LOW processing
priority, so with priority lanes enabled they queue behind production
traffic instead of delaying it.

Usage:
    python scripts/migrate_subscription_features.py
    python scripts/migrate_subscription_features.py --batch-size 500
"""

import argparse
import sys
import time

# Add src/ to path so we can import domain modules
sys.path.insert(0, "src")


def main():
    parser = argparse.ArgumentParser(description="Backfill subscription tiers and feature bundles")
    parser.add_argument("--batch-size", type=int, default=100, help="Records loaded per query (default: 100)")
    args = parser.parse_args()

    from identity.domain import identity
    from identity.utils.logging import get_logger
    from protean.utils.processing import Priority, processing_priority
    from subscriptions.domain import subscriptions
    from subscriptions.migration import SubscriptionFeatureMigration

    logger = get_logger("migrate_subscription_features")

    identity.init()
    subscriptions.init()

    print(f"\n{'='*60}")
    print("  GigMatch: Subscription Feature Migration")
    print(f"{'='*60}")
    print(f"  Batch size:   {args.batch_size:,}")
    print(f"{'='*60}\n")

    start = time.monotonic()
    try:
        with processing_priority(Priority.LOW):
            report = SubscriptionFeatureMigration(identity, subscriptions, batch_size=args.batch_size).run()
    except Exception:
        logger.exception("Subscription feature migration aborted")
        sys.exit(1)

    elapsed = time.monotonic() - start

    print(f"{'Step':<32}{'Modified':>10}")
    print(f"{'-'*42}")
    for step, modified in report.modified.items():
        print(f"{step:<32}{modified:>10,}")
    print(f"{'-'*42}")
    print(f"{'Total':<32}{report.total_modified:>10,}")

    print(f"\n{'='*60}")
    print("  Migration Complete")
    print(f"{'='*60}")
    print(f"  Total time:   {elapsed:.1f}s")
    print(f"  Failures:     {report.failures:,}")
    print(f"{'='*60}\n")


if __name__ == "__main__":
    main()
