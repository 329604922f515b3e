"""Schema management for the GigMatch domains.

Relational providers (sqlite, postgresql) need their tables created before
use; the memory provider needs nothing. Used by ``manage.py`` and the test
suites.
"""

from protean.domain import Domain
from sqlalchemy import create_engine

_RELATIONAL_PROVIDERS = ("sqlite", "postgresql")


def _relational_providers(domain: Domain):
    for _, provider in domain.providers.items():
        if provider.conn_info["provider"] in _RELATIONAL_PROVIDERS:
            yield provider


def _register_models(domain: Domain, provider) -> None:
    # Touching the DAO registers the element's model with SQLAlchemy metadata
    registries = (
        domain.registry.aggregates,
        domain.registry.entities,
        domain.registry.projections,
    )
    for registry in registries:
        for _, record in registry.items():
            if record.cls.meta_.provider == provider.name:
                domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain) -> None:
    """Create the tables of every relational provider of ``domain``."""
    with domain.domain_context():
        for provider in _relational_providers(domain):
            _register_models(domain, provider)
            provider._metadata.create_all(create_engine(provider.conn_info["database_uri"]))


def drop_db(domain: Domain) -> None:
    """Drop the tables of every relational provider of ``domain``."""
    with domain.domain_context():
        for provider in _relational_providers(domain):
            provider._metadata.drop_all(create_engine(provider.conn_info["database_uri"]))


def reset_data(domain: Domain) -> None:
    """Empty every provider, broker and the event store of ``domain``.

    Must be called inside the domain's context.
    """
    for _, provider in domain.providers.items():
        provider._data_reset()

    for _, broker in domain.brokers.items():
        broker._data_reset()

    domain.event_store.store._data_reset()
