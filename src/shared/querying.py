"""Batched iteration over repository queries.

A Protean queryset returns a single page per ``.all()`` call (100 records by
default). Aggregations and migrations need every matching record, so they
walk the result set page by page with a stable ordering.
"""

from collections.abc import Iterator
from typing import Any


def scan(dao, order_by: str, batch_size: int = 100, **criteria: Any) -> Iterator[Any]:
    """Yield every record matching ``criteria``, ``batch_size`` at a time.

    ``dao`` is a repository DAO (``repository._dao``). ``order_by`` must name a
    unique field whose values do not change while the scan runs, usually the
    identifier. Ties or updated values shift page offsets, so records would be
    skipped or repeated between batches.
    """
    query = dao.query.filter(**criteria) if criteria else dao.query
    query = query.order_by(order_by)

    offset = 0
    while True:
        items = query.offset(offset).limit(batch_size).all().items
        yield from items
        if len(items) < batch_size:
            return
        offset += batch_size
