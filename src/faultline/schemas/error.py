"""Error response schemas.

All error responses use the same envelope: {"error": {"code": "...", "message": "..."}}.
The translator in ``faultline.translator`` constructs these from faults and
non-success results.
"""

from pydantic import BaseModel, ConfigDict


class ErrorDetail(BaseModel):
    """Inner error object with a machine-readable code and human-readable message."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    code: str
    message: str


class ErrorResponse(BaseModel):
    """Top-level error envelope returned by all error responses."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    error: ErrorDetail

    @classmethod
    def build(cls, code: str, message: str) -> "ErrorResponse":
        return cls(error=ErrorDetail(code=code, message=message))
