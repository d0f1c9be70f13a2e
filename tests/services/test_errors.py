"""Tests for service-layer error types."""

import httpx

from src.services.errors import (
    CarrierRejectionError,
    DHLServiceError,
    MalformedResponseError,
    TransportError,
)


class TestTransportError:
    """Test TransportError constructors."""

    def test_for_status(self):
        error = TransportError.for_status(503, "down")
        assert error.error_code == "E-4002"
        assert error.status_code == 503
        assert error.body == "down"
        assert str(error) == "[E-4002] DHL responded with HTTP 503."

    def test_for_exception(self):
        error = TransportError.for_exception(httpx.ConnectError("refused"))
        assert error.error_code == "E-4001"
        assert "refused" in error.message
        assert error.status_code is None

    def test_for_exception_without_text(self):
        error = TransportError.for_exception(httpx.ReadTimeout(""))
        assert "ReadTimeout" in error.message

    def test_is_service_error(self):
        assert isinstance(TransportError.for_status(500, ""), DHLServiceError)


class TestCarrierRejectionError:
    """Test CarrierRejectionError construction."""

    def test_from_conditions_keeps_verbatim_values(self):
        conditions = [("154", "Null field value is invalid"), ("111", "Parse error")]
        error = CarrierRejectionError.from_conditions(conditions, "<body/>")
        assert error.code == "154"
        assert error.message == "Null field value is invalid"
        assert error.conditions == conditions
        assert error.error_code == "E-2002"
        assert "Null field value is invalid" in error.friendly_message
        assert error.raw_body == "<body/>"
        assert str(error) == "[E-2002] DHL condition 154: Null field value is invalid"

    def test_conditions_copied(self):
        conditions = [("1", "a")]
        error = CarrierRejectionError.from_conditions(conditions, "")
        conditions.append(("2", "b"))
        assert error.conditions == [("1", "a")]


class TestMalformedResponseError:
    """Test MalformedResponseError construction."""

    def test_for_body(self):
        error = MalformedResponseError.for_body("<x/>")
        assert error.error_code == "E-3006"
        assert error.raw_body == "<x/>"
        assert error.remediation

    def test_reason_appended(self):
        error = MalformedResponseError.for_body("", reason="no element found")
        assert error.message.endswith("(no element found)")
