"""Error handling framework for carrier shipment creation.

This package provides:
- Error code registry with E-XXXX format codes
- DHL condition translation to friendly messages

Error categories:
- E-2xxx: Request validation errors
- E-3xxx: Carrier API errors
- E-4xxx: System/transport errors
- E-5xxx: Authentication errors
"""

from src.errors.registry import (
    ErrorCategory,
    ErrorCode,
    ERROR_REGISTRY,
    get_error,
    get_errors_by_category,
)
from src.errors.dhl_translation import (
    DHL_CONDITION_MAP,
    translate_dhl_condition,
)

__all__ = [
    # Registry
    "ErrorCode",
    "ErrorCategory",
    "ERROR_REGISTRY",
    "get_error",
    "get_errors_by_category",
    # DHL translation
    "translate_dhl_condition",
    "DHL_CONDITION_MAP",
]
