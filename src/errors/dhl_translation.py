"""DHL condition code translation to friendly E-code messages.

This module maps DHL XML-PI condition codes and condition text to the
error code registry, providing user-friendly error messages with
actionable remediation steps. The original DHL code and text are kept
verbatim on the raised error; this only adds the friendly layer.
"""

from src.errors.registry import get_error


# Map of DHL condition codes to registry error codes
DHL_CONDITION_MAP: dict[str, str] = {
    "111": "E-2002",  # Error in parsing request XML
    "154": "E-2002",  # Null field value is invalid
}

# Condition text fragments that identify an error when the code is unknown
DHL_MESSAGE_PATTERNS: dict[str, str] = {
    "postal code": "E-2001",
    "postcode": "E-2001",
    "product": "E-2003",
    "password": "E-5001",
    "site id": "E-5001",
    "siteid": "E-5001",
    "authentication": "E-5001",
    "account": "E-5003",
    "unavailable": "E-3001",
    "field value is invalid": "E-2002",
}


def translate_dhl_condition(
    condition_code: str | None,
    condition_message: str | None,
    context: dict | None = None,
) -> tuple[str, str, str]:
    """Translate a DHL condition to a registry error.

    Args:
        condition_code: DHL condition code (e.g., "154").
        condition_message: DHL condition text.
        context: Additional template context.

    Returns:
        Tuple of (error_code, formatted_message, remediation).
    """
    context = context or {}
    carrier_message = condition_message or f"Code: {condition_code}"

    # Try direct code lookup first
    if condition_code and condition_code in DHL_CONDITION_MAP:
        error = get_error(DHL_CONDITION_MAP[condition_code])
        if error:
            message = _format_message(
                error.message_template, carrier_message=carrier_message, **context
            )
            return (error.code, message, error.remediation)

    # Try message pattern matching
    if condition_message:
        message_lower = condition_message.lower()
        for pattern, sa_code in DHL_MESSAGE_PATTERNS.items():
            if pattern in message_lower:
                error = get_error(sa_code)
                if error:
                    message = _format_message(
                        error.message_template, carrier_message=carrier_message, **context
                    )
                    return (error.code, message, error.remediation)

    # Fallback to generic rejection
    error = get_error("E-3005")
    if error:
        message = _format_message(
            error.message_template, carrier_message=carrier_message, **context
        )
        return (error.code, message, error.remediation)

    return (
        "E-3005",
        f"DHL error: {carrier_message}",
        "Contact support with this error message for assistance.",
    )


def _format_message(template: str, **kwargs: object) -> str:
    """Format a message template with context, ignoring missing keys."""
    try:
        return template.format(**kwargs)
    except KeyError:
        # Keep template if some placeholders are missing
        return template
