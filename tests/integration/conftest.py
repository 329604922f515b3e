"""Fixtures for cross-domain integration tests.

The subscription feature migration and the subscription → member sync touch
both the Identity and the Subscriptions domains, so these tests initialize
both and reset both after every test.
"""

import os

import pytest


@pytest.fixture(scope="session")
def _identity_domain(request):
    """Initialize the identity domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from identity.domain import identity

    identity.init()
    return identity


@pytest.fixture(scope="session")
def _subscriptions_domain(request):
    """Initialize the subscriptions domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from subscriptions.domain import subscriptions

    subscriptions.init()
    return subscriptions


@pytest.fixture(scope="session", autouse=True)
def setup_databases(_identity_domain, _subscriptions_domain):
    """Create database schemas for both domains."""
    from shared.db import drop_db, setup_db

    setup_db(_identity_domain)
    setup_db(_subscriptions_domain)

    yield

    drop_db(_identity_domain)
    drop_db(_subscriptions_domain)


@pytest.fixture(autouse=True)
def reset_domains(_identity_domain, _subscriptions_domain):
    yield

    from shared.db import reset_data

    for domain in (_identity_domain, _subscriptions_domain):
        with domain.domain_context():
            reset_data(domain)


@pytest.fixture
def identity_domain(_identity_domain):
    return _identity_domain


@pytest.fixture
def subscriptions_domain(_subscriptions_domain):
    return _subscriptions_domain
