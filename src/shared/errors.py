"""Business error taxonomy shared by all GigMatch domains.

Field and invariant failures keep using ``protean.exceptions.ValidationError``
and missing records ``protean.exceptions.ObjectNotFoundError``. The errors
below cover the remaining outcomes of a command: the caller may not do this,
the record already exists, or the current state does not allow it.

Each error carries a ``messages`` dict shaped like Protean's
ValidationError (``{"field": ["message", ...]}``) so API clients see a single
error format.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError
from protean.integrations.fastapi import register_exception_handlers


class DomainError(Exception):
    """Base class for business errors that map to a fixed HTTP status."""

    status_code = 400

    def __init__(self, messages: dict[str, list[str]]) -> None:
        super().__init__(messages)
        self.messages = messages


class ForbiddenError(DomainError):
    """The caller is not allowed to act on this resource."""

    status_code = 403


class ConflictError(DomainError):
    """The operation would duplicate an existing record."""

    status_code = 409


class InvalidStateError(DomainError):
    """The resource is not in a state that allows the operation."""

    status_code = 422


def register_error_handlers(app: FastAPI) -> None:
    """Install Protean's exception handlers plus the GigMatch business errors."""
    register_exception_handlers(app)

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.messages})

    @app.exception_handler(ExpectedVersionError)
    async def version_conflict_handler(request: Request, exc: ExpectedVersionError) -> JSONResponse:
        # Another request saved the same aggregate first
        return JSONResponse(
            status_code=ConflictError.status_code,
            content={"error": {"version": ["The record was changed by another request, please retry"]}},
        )
