"""Identity bounded context: GigMatch members and the profiles they own.

Every entrypoint (API, engine, CLI, tests) imports this module first, so
logging for the whole application is configured here.
"""

from protean.domain import Domain

from identity.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

identity = Domain(name="identity")
