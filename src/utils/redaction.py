"""Secret redaction for safe logging of DHL requests and responses.

The XML-PI request carries the site password in the ServiceHeader, so
anything logged from the payload tree or the serialized document goes
through here first. Key matching is a case-insensitive substring match
and handles nested dicts and lists of dicts.
"""

import re

# Substring patterns matched case-insensitively against dict keys
_DEFAULT_SENSITIVE_PATTERNS = frozenset({
    "password", "secret", "token", "authorization", "credential",
})

# Keys whose entire value is redacted (regardless of content type)
_CONTAINER_KEYS = frozenset({"credentials", "headers"})

_REDACTED = "***REDACTED***"


def _is_sensitive_key(key: str, sensitive_patterns: frozenset[str]) -> bool:
    key_lower = key.lower()
    return any(pattern in key_lower for pattern in sensitive_patterns)


def redact_for_logging(
    obj: dict,
    sensitive_patterns: frozenset[str] = _DEFAULT_SENSITIVE_PATTERNS,
) -> dict:
    """Redact sensitive values from a dict for safe logging.

    Args:
        obj: Dict to redact (not mutated; a copy is returned).
        sensitive_patterns: Substring patterns whose matching keys' values
            should be replaced. Matching is case-insensitive.

    Returns:
        New dict with sensitive values replaced by '***REDACTED***'.
    """
    result = {}
    for key, value in obj.items():
        if key.lower() in _CONTAINER_KEYS or _is_sensitive_key(key, sensitive_patterns):
            result[key] = _REDACTED
        elif isinstance(value, dict):
            result[key] = redact_for_logging(value, sensitive_patterns)
        elif isinstance(value, list):
            result[key] = [
                redact_for_logging(item, sensitive_patterns) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value
    return result


_SENSITIVE_KEYWORDS = r"password|secret|token|authorization|credential"

_SENSITIVE_VALUE_PATTERNS = re.compile(
    r"(?i)"
    r"(?:"
    # <Password>value</Password>, with or without a namespace prefix
    r"(<(?:\w+:)?(?:" + _SENSITIVE_KEYWORDS + r")>)[^<]*(</(?:\w+:)?(?:" + _SENSITIVE_KEYWORDS + r")>)"
    r"|"
    # Authorization: Bearer <token>
    r"Authorization\s*:\s*Bearer\s+\S+"
    r"|"
    # key = "quoted value" or key="quoted value"
    r"(?:" + _SENSITIVE_KEYWORDS + r")\s*[=:]\s*\"[^\"]*\""
    r"|"
    # key=value (unquoted, consumes until whitespace/end)
    r"(?:" + _SENSITIVE_KEYWORDS + r")\s*[=:]\s*[^\s<]+"
    r")",
)


def _replace(match: re.Match) -> str:
    if match.group(1):
        return f"{match.group(1)}{_REDACTED}{match.group(2)}"
    return _REDACTED


def sanitize_error_message(msg: str | None, max_length: int = 2000) -> str | None:
    """Sanitize free text (error messages, XML bodies) for logging.

    Redacts sensitive XML elements and key=value pairs, then truncates
    to max_length.

    Args:
        msg: Text to sanitize (None passes through).
        max_length: Maximum length of the sanitized text.

    Returns:
        Sanitized and truncated text, or None.
    """
    if msg is None:
        return None
    sanitized = _SENSITIVE_VALUE_PATTERNS.sub(_replace, msg)
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length - 3] + "..."
    return sanitized
