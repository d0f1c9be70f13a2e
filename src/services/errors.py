"""Shared service-layer error types.

Runtime failures of shipment creation, one class per outcome:
- TransportError: the request never produced a usable HTTP response.
- CarrierRejectionError: DHL answered with condition code(s) instead of
  an airway bill number.
- MalformedResponseError: the body yielded neither a result nor a condition.

Centralised here to avoid circular imports between service modules.
"""

from dataclasses import dataclass, field

from src.errors.dhl_translation import translate_dhl_condition
from src.errors.registry import get_error


@dataclass
class DHLServiceError(Exception):
    """Error from the DHL service layer.

    Attributes:
        message: Human-readable error message
        error_code: Registry error code (E-XXXX format)
        remediation: Suggested fix
        details: Raw error details
    """

    message: str
    error_code: str = "E-3005"
    remediation: str = ""
    details: dict | None = None

    def __str__(self) -> str:
        """Return formatted error message."""
        return f"[{self.error_code}] {self.message}"


@dataclass
class TransportError(DHLServiceError):
    """Network or HTTP-level failure talking to DHL. Never retried here.

    Attributes:
        status_code: HTTP status when a response was received.
        body: Response body when a response was received.
    """

    error_code: str = "E-4001"
    status_code: int | None = None
    body: str = ""

    @classmethod
    def for_status(cls, status_code: int, body: str) -> "TransportError":
        error = get_error("E-4002")
        return cls(
            message=error.message_template.format(status_code=status_code) if error else f"HTTP {status_code}",
            error_code="E-4002",
            remediation=error.remediation if error else "",
            status_code=status_code,
            body=body,
        )

    @classmethod
    def for_exception(cls, exc: Exception) -> "TransportError":
        error = get_error("E-4001")
        details = str(exc) or type(exc).__name__
        return cls(
            message=error.message_template.format(details=details) if error else details,
            error_code="E-4001",
            remediation=error.remediation if error else "",
        )


@dataclass
class CarrierRejectionError(DHLServiceError):
    """DHL parsed the request and rejected it with a condition.

    `code` and `message` are DHL's ConditionCode and ConditionData
    verbatim (first condition). All conditions are kept in order.

    Attributes:
        code: DHL condition code, e.g. "154".
        conditions: Every (code, message) pair found in the response.
        friendly_message: Registry message for display.
        raw_body: Response body as received.
    """

    code: str = ""
    conditions: list[tuple[str, str]] = field(default_factory=list)
    friendly_message: str = ""
    raw_body: str = ""

    def __str__(self) -> str:
        return f"[{self.error_code}] DHL condition {self.code}: {self.message}"

    @classmethod
    def from_conditions(
        cls, conditions: list[tuple[str, str]], raw_body: str
    ) -> "CarrierRejectionError":
        """Build the error from the conditions found in a response.

        Args:
            conditions: Non-empty list of (code, message) pairs.
            raw_body: Response body.

        Returns:
            CarrierRejectionError for the first condition.
        """
        code, message = conditions[0]
        error_code, friendly, remediation = translate_dhl_condition(code, message)
        return cls(
            message=message,
            error_code=error_code,
            remediation=remediation,
            code=code,
            conditions=list(conditions),
            friendly_message=friendly,
            raw_body=raw_body,
        )


@dataclass
class MalformedResponseError(DHLServiceError):
    """Response had no airway bill number and no recognizable condition.

    The whole body is kept for diagnostics.
    """

    error_code: str = "E-3006"
    raw_body: str = ""

    @classmethod
    def for_body(cls, raw_body: str, reason: str = "") -> "MalformedResponseError":
        error = get_error("E-3006")
        message = error.message_template if error else "Malformed DHL response."
        if reason:
            message = f"{message} ({reason})"
        return cls(
            message=message,
            remediation=error.remediation if error else "",
            raw_body=raw_body,
        )
