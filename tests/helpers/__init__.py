"""Test helper utilities."""

from tests.helpers.mock_dhl_server import (
    SAMPLE_LABEL,
    MockDHLServer,
    RecordedRequest,
    error_body,
    success_body,
)

__all__ = [
    "MockDHLServer",
    "RecordedRequest",
    "SAMPLE_LABEL",
    "error_body",
    "success_body",
]
