"""Map domain errors to HTTP responses."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError

from boutique.errors import EmptyCartError, SelfActionError, UnauthorizedTransitionError

logger = structlog.get_logger(__name__)

# Most specific first: EmptyCartError is a ValidationError, the transition
# errors are InvalidOperationErrors.
_STATUS_CODES = (
    (EmptyCartError, 400, "empty_cart"),
    (UnauthorizedTransitionError, 403, "unauthorized_transition"),
    (SelfActionError, 403, "self_action"),
    (ValidationError, 400, "validation_error"),
    (ObjectNotFoundError, 404, "not_found"),
    (InvalidOperationError, 409, "invalid_operation"),
)


def _messages(exc):
    messages = getattr(exc, "messages", None)
    return dict(messages) if isinstance(messages, dict) else {"error": [str(exc)]}


async def domain_error_handler(request: Request, exc: Exception) -> JSONResponse:
    for exc_type, status_code, kind in _STATUS_CODES:
        if isinstance(exc, exc_type):
            logger.info("Request rejected", path=request.url.path, error=kind, status_code=status_code)
            return JSONResponse(status_code=status_code, content={"error": kind, "messages": _messages(exc)})
    raise exc


def register_exception_handlers(app: FastAPI) -> None:
    for exc_type in (ValidationError, ObjectNotFoundError, InvalidOperationError):
        app.add_exception_handler(exc_type, domain_error_handler)
