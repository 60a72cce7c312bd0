import json

import pytest
from pydantic import ValidationError

from faultline.schemas.error import ErrorDetail, ErrorResponse
from faultline.translator import ResponseOutcome


def test_envelope_wire_shape() -> None:
    envelope = ErrorResponse.build("ITEM_NOT_AVAILABLE", "Item is not available")
    assert json.loads(envelope.model_dump_json()) == {
        "error": {"code": "ITEM_NOT_AVAILABLE", "message": "Item is not available"}
    }


def test_envelope_survives_the_wire() -> None:
    envelope = ErrorResponse.build("500", "Dépôt indisponible")
    decoded = ErrorResponse.model_validate_json(ResponseOutcome(500, envelope).render())
    assert decoded == envelope
    assert decoded.error == ErrorDetail(code="500", message="Dépôt indisponible")


def test_envelope_rejects_extra_fields() -> None:
    with pytest.raises(ValidationError):
        ErrorResponse.model_validate({"error": {"code": "1", "message": "m", "trace": "..."}})


def test_envelope_requires_code_and_message() -> None:
    with pytest.raises(ValidationError):
        ErrorResponse.model_validate({"error": {"code": "1"}})
