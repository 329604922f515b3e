import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def subscriptions_bed():
    from subscriptions.domain import subscriptions

    bed = DomainFixture(subscriptions)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(subscriptions_bed):
    with subscriptions_bed.domain_context():
        yield
