"""Fault taxonomy raised by services and caught at the API boundary.

Every fault kind is declared together with the HTTP status it maps to, so the
kind → status table is total by construction. Services raise ``Fault``
subclasses to signal failures; the translator in ``faultline.translator``
turns them into the standard error envelope:
{"error": {"code": "...", "message": "..."}}.
"""

from enum import Enum
from http import HTTPStatus


class FaultKind(Enum):
    """Classification tags for faults, each bound to one status code.

    Member value is ``(status, default_message)``. A ``None`` message falls
    back to the canonical status text.
    """

    BAD_REQUEST = (HTTPStatus.BAD_REQUEST, None)
    UNAUTHORIZED = (HTTPStatus.UNAUTHORIZED, None)
    FORBIDDEN = (HTTPStatus.FORBIDDEN, None)
    NOT_FOUND = (HTTPStatus.NOT_FOUND, None)
    CONFLICT = (HTTPStatus.CONFLICT, None)
    GONE = (HTTPStatus.GONE, None)
    UNPROCESSABLE = (HTTPStatus.UNPROCESSABLE_ENTITY, "The request was rejected")
    UNEXPECTED = (HTTPStatus.INTERNAL_SERVER_ERROR, None)

    def __init__(self, status: HTTPStatus, message: str | None) -> None:
        if not isinstance(status, HTTPStatus):
            raise TypeError(f"fault kind {self.name} must declare an HTTPStatus")
        self.status = status
        self.message = message


def status_text(status: int) -> str:
    """Canonical text for a status code: 410 → "Gone", 500 → "InternalServerError".

    Codes unknown to ``http.HTTPStatus`` render as their decimal string.
    """
    try:
        name = HTTPStatus(status).name
    except ValueError:
        return str(status)
    return "".join(part.capitalize() for part in name.split("_"))


def status_for(kind: FaultKind) -> HTTPStatus:
    """Return the status code declared for ``kind``."""
    return kind.status


def default_message(kind: FaultKind) -> str:
    """Return the declared message for ``kind``, or its status text."""
    return kind.message or status_text(kind.status)


class Fault(Exception):
    """Base class for all faults.

    ``error_code`` is an optional machine-readable code for validated business
    rejections (e.g. "ITEM_NOT_AVAILABLE"). ``cause`` is the lower-level error
    being wrapped, if any; it is chained as ``__cause__`` as well.
    """

    kind: FaultKind = FaultKind.UNEXPECTED

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        if not isinstance(cls.kind, FaultKind):
            raise TypeError(f"{cls.__name__}.kind must be a FaultKind")

    def __init__(
        self,
        message: str | None = None,
        *,
        error_code: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.message = message or default_message(self.kind)
        self.error_code = error_code
        self.cause = cause
        super().__init__(self.message)
        if cause is not None:
            self.__cause__ = cause

    @property
    def status_code(self) -> HTTPStatus:
        return status_for(self.kind)


class BadRequestError(Fault):
    """Raised when a request is malformed beyond schema validation."""

    kind = FaultKind.BAD_REQUEST


class UnauthorizedError(Fault):
    kind = FaultKind.UNAUTHORIZED


class ForbiddenError(Fault):
    kind = FaultKind.FORBIDDEN


class NotFoundError(Fault):
    """Raised when a requested entity does not exist."""

    kind = FaultKind.NOT_FOUND

    def __init__(
        self,
        entity: str,
        identifier: object,
        *,
        error_code: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(
            f"{entity} with id {identifier} not found", error_code=error_code, cause=cause
        )


class ConflictError(Fault):
    """Raised when an operation conflicts with existing state (e.g. duplicate)."""

    kind = FaultKind.CONFLICT


class GoneError(Fault):
    """Raised when a resource existed but is permanently unavailable."""

    kind = FaultKind.GONE


class UnprocessableError(Fault):
    """Raised for business-rule rejections; usually carries an ``error_code``."""

    kind = FaultKind.UNPROCESSABLE


class UnexpectedError(Fault):
    """Wraps a lower-level failure that should surface as a generic 500."""

    kind = FaultKind.UNEXPECTED
