"""Typed fault taxonomy and boundary fault translation for HTTP APIs."""

from faultline.exceptions import (
    BadRequestError,
    ConflictError,
    Fault,
    FaultKind,
    ForbiddenError,
    GoneError,
    NotFoundError,
    UnauthorizedError,
    UnexpectedError,
    UnprocessableError,
    default_message,
    status_for,
    status_text,
)
from faultline.schemas.error import ErrorDetail, ErrorResponse
from faultline.translator import (
    FaultTranslator,
    HandlerResult,
    RequestContext,
    ResponseOutcome,
)

__all__ = [
    "BadRequestError",
    "ConflictError",
    "ErrorDetail",
    "ErrorResponse",
    "Fault",
    "FaultKind",
    "FaultTranslator",
    "ForbiddenError",
    "GoneError",
    "HandlerResult",
    "NotFoundError",
    "RequestContext",
    "ResponseOutcome",
    "UnauthorizedError",
    "UnexpectedError",
    "UnprocessableError",
    "default_message",
    "status_for",
    "status_text",
]
