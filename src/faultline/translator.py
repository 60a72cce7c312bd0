"""Fault translation at the API boundary.

Every result of request processing, whether a response or a raised exception,
passes through ``FaultTranslator.handle`` and comes out as exactly one
``ResponseOutcome``:

- success responses are checked for serializability before they are returned
- non-success responses get the standard error envelope
- faults carrying a business error code become 422 with that code
- classified faults (a ``Fault`` with a non-500 kind) keep their status
- everything else is logged once and becomes a generic 500

The translator never raises. Internal details of unexpected failures are
logged, never echoed to the caller.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

import pydantic_core
from pydantic import ValidationError
from structlog.stdlib import BoundLogger

from faultline.exceptions import Fault, FaultKind, status_text
from faultline.logging import get_logger
from faultline.schemas.error import ErrorResponse

ErrorCodeResolver = Callable[[BaseException], str | None]
Serializer = Callable[[Any], bytes]


@dataclass(frozen=True)
class RequestContext:
    """What the translator knows about the request being handled.

    ``component`` names the logical handler that was executing (route or
    endpoint name). It is attached to every unexpected-fault log entry,
    together with ``method``, ``path`` and ``request_id``.
    """

    component: str
    method: str | None = None
    path: str | None = None
    request_id: str | None = None


@dataclass(frozen=True)
class ResponseOutcome:
    """Status code plus serializable body, produced fresh per request."""

    status_code: int
    body: Any = None

    @property
    def is_success(self) -> bool:
        return self.status_code < HTTPStatus.BAD_REQUEST

    def render(self) -> bytes:
        """Serialize the body to JSON bytes."""
        return pydantic_core.to_json(self.body)


@dataclass(frozen=True)
class HandlerResult:
    """Outcome of the inner handler: either a response or a raised exception."""

    response: ResponseOutcome | None = None
    error: Exception | None = None

    def __post_init__(self) -> None:
        if (self.response is None) == (self.error is None):
            raise ValueError("HandlerResult needs exactly one of response or error")

    @classmethod
    def ok(cls, response: ResponseOutcome) -> "HandlerResult":
        return cls(response=response)

    @classmethod
    def failed(cls, error: Exception) -> "HandlerResult":
        return cls(error=error)


def fault_error_code(exc: BaseException) -> str | None:
    """Default error-code resolver: the ``error_code`` carried by a ``Fault``."""
    if isinstance(exc, Fault):
        return exc.error_code
    return None


def status_outcome(status_code: int) -> ResponseOutcome:
    """Generic envelope for a status: code is the decimal status, message its text."""
    body = ErrorResponse.build(str(int(status_code)), status_text(status_code))
    return ResponseOutcome(status_code=status_code, body=body.model_dump())


def _fallback_outcome() -> ResponseOutcome:
    # Built from literals only: used when the translator itself has failed.
    return ResponseOutcome(
        status_code=500,
        body={"error": {"code": "500", "message": "InternalServerError"}},
    )


class FaultTranslator:
    """Converts handler results into response outcomes.

    Args:
        logger: Logger for unexpected faults. Defaults to this module's logger.
        error_code_resolver: Returns the business error code for an exception,
            or None. Defaults to ``fault_error_code``.
        serializer: Wire serializer used to check success bodies before they
            are committed. Defaults to ``pydantic_core.to_json``.

    Usage:
        translator = FaultTranslator()
        outcome = await translator.invoke(RequestContext("orders"), place_order)
    """

    def __init__(
        self,
        logger: BoundLogger | None = None,
        *,
        error_code_resolver: ErrorCodeResolver | None = None,
        serializer: Serializer | None = None,
    ) -> None:
        self._logger = logger if logger is not None else get_logger(__name__)
        self._error_code_resolver = error_code_resolver or fault_error_code
        self._serializer = serializer or pydantic_core.to_json

    async def invoke(
        self,
        context: RequestContext,
        call: Callable[[], Awaitable[Any]],
    ) -> ResponseOutcome:
        """Await the inner handler and translate whatever it produced.

        A return value that is not a ``ResponseOutcome`` is treated as a 200
        body. Cancellation propagates untouched: nothing is returned or logged.
        """
        try:
            value = await call()
        except Exception as exc:
            return self.handle(context, HandlerResult.failed(exc))

        if not isinstance(value, ResponseOutcome):
            value = ResponseOutcome(status_code=HTTPStatus.OK, body=value)
        return self.handle(context, HandlerResult.ok(value))

    def handle(self, context: RequestContext, result: HandlerResult) -> ResponseOutcome:
        """Translate one handler result. Never raises."""
        try:
            return self._translate(context, result)
        except Exception:
            return _fallback_outcome()

    def _translate(self, context: RequestContext, result: HandlerResult) -> ResponseOutcome:
        if result.error is not None:
            return self._from_exception(context, result.error)

        response = result.response
        if response is None:
            return _fallback_outcome()

        if response.is_success:
            try:
                self._serializer(response.body)
            except Exception as exc:
                return self._unexpected(context, exc)
            return response

        return self._from_status(response)

    def _from_status(self, response: ResponseOutcome) -> ResponseOutcome:
        try:
            envelope = ErrorResponse.model_validate(response.body)
        except ValidationError:
            return status_outcome(response.status_code)
        return ResponseOutcome(status_code=response.status_code, body=envelope.model_dump())

    def _from_exception(self, context: RequestContext, exc: Exception) -> ResponseOutcome:
        error_code = self._error_code_resolver(exc)
        if error_code:
            message = exc.message if isinstance(exc, Fault) else str(exc)
            body = ErrorResponse.build(error_code, message)
            return ResponseOutcome(
                status_code=HTTPStatus.UNPROCESSABLE_ENTITY, body=body.model_dump()
            )

        if isinstance(exc, Fault) and exc.kind is not FaultKind.UNEXPECTED:
            return status_outcome(exc.status_code)

        return self._unexpected(context, exc)

    def _unexpected(self, context: RequestContext, exc: BaseException) -> ResponseOutcome:
        self._logger.error(
            "unhandled_exception",
            component=context.component,
            method=context.method,
            path=context.path,
            request_id=context.request_id,
            exc_info=exc,
        )
        return status_outcome(HTTPStatus.INTERNAL_SERVER_ERROR)
