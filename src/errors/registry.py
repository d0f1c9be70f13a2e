"""Error code registry with E-XXXX format codes.

This module defines the error code system for shipment creation,
organizing errors into categories:
- E-2xxx: Request validation errors reported by the carrier
- E-3xxx: Carrier API errors
- E-4xxx: System/transport errors
- E-5xxx: Authentication errors

Each error includes a code, title, message template, and remediation steps.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """Categories for error codes."""

    VALIDATION = "validation"  # E-2xxx: Request validation errors
    CARRIER_API = "carrier_api"  # E-3xxx: Carrier API errors
    SYSTEM = "system"  # E-4xxx: System/transport errors
    AUTH = "auth"  # E-5xxx: Authentication errors


@dataclass
class ErrorCode:
    """Definition of an error code with metadata.

    Attributes:
        code: Error code in E-XXXX format.
        category: Error category for grouping.
        title: Short title for display.
        message_template: Message with {placeholders} for context.
        remediation: Action user should take to resolve.
        is_retryable: Whether the operation can be retried without user action.
    """

    code: str  # E-XXXX format
    category: ErrorCategory
    title: str  # Short title for display
    message_template: str  # Message with {placeholders}
    remediation: str  # Action user should take
    is_retryable: bool = False  # Can be retried without user action


# Error registry - all defined error codes
ERROR_REGISTRY: dict[str, ErrorCode] = {
    # Validation errors (E-2xxx)
    "E-2001": ErrorCode(
        code="E-2001",
        category=ErrorCategory.VALIDATION,
        title="Invalid Postal Code",
        message_template="DHL rejected the postal code: {carrier_message}",
        remediation="Check the postal code and city of both addresses and retry.",
    ),
    "E-2002": ErrorCode(
        code="E-2002",
        category=ErrorCategory.VALIDATION,
        title="Missing or Invalid Field",
        message_template="DHL rejected a request field: {carrier_message}",
        remediation="Check required address, contact and customs fields. Use request overrides for fields not set by default.",
    ),
    "E-2003": ErrorCode(
        code="E-2003",
        category=ErrorCategory.VALIDATION,
        title="Invalid Product Code",
        message_template="DHL product is not available: {carrier_message}",
        remediation="Choose a GlobalProductCode that is valid for this route.",
    ),
    # Carrier API errors (E-3xxx)
    "E-3001": ErrorCode(
        code="E-3001",
        category=ErrorCategory.CARRIER_API,
        title="DHL Service Unavailable",
        message_template="DHL XML-PI is not responding: {carrier_message}",
        remediation="Wait a few minutes and retry.",
        is_retryable=True,
    ),
    "E-3005": ErrorCode(
        code="E-3005",
        category=ErrorCategory.CARRIER_API,
        title="DHL Rejected Shipment",
        message_template="DHL returned an error: {carrier_message}",
        remediation="Review the DHL condition code and message, correct the request and retry.",
    ),
    "E-3006": ErrorCode(
        code="E-3006",
        category=ErrorCategory.CARRIER_API,
        title="Malformed DHL Response",
        message_template="DHL response contained neither an airway bill number nor an error condition.",
        remediation="Inspect the raw response body. Contact DHL support if the issue persists.",
    ),
    # System errors (E-4xxx)
    "E-4001": ErrorCode(
        code="E-4001",
        category=ErrorCategory.SYSTEM,
        title="Network Error",
        message_template="Could not reach DHL: {details}",
        remediation="Check network connectivity and the configured endpoint, then retry.",
        is_retryable=True,
    ),
    "E-4002": ErrorCode(
        code="E-4002",
        category=ErrorCategory.SYSTEM,
        title="Unexpected HTTP Status",
        message_template="DHL responded with HTTP {status_code}.",
        remediation="Retry later. Check the DHL endpoint configuration if this repeats.",
        is_retryable=True,
    ),
    # Auth errors (E-5xxx)
    "E-5001": ErrorCode(
        code="E-5001",
        category=ErrorCategory.AUTH,
        title="DHL Authentication Failed",
        message_template="DHL rejected the site credentials: {carrier_message}",
        remediation="Check the DHL site ID and password in your configuration.",
    ),
    "E-5003": ErrorCode(
        code="E-5003",
        category=ErrorCategory.AUTH,
        title="DHL Account Not Authorized",
        message_template="DHL account cannot be billed: {carrier_message}",
        remediation="Verify the DHL account number and that it is enabled for this product.",
    ),
}


def get_error(code: str) -> ErrorCode | None:
    """Get error definition by code.

    Args:
        code: Error code in E-XXXX format.

    Returns:
        ErrorCode if found, None otherwise.
    """
    return ERROR_REGISTRY.get(code)


def get_errors_by_category(category: ErrorCategory) -> list[ErrorCode]:
    """Get all errors in a category.

    Args:
        category: The error category to filter by.

    Returns:
        List of ErrorCode objects in the specified category.
    """
    return [e for e in ERROR_REGISTRY.values() if e.category == category]
