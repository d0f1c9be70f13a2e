"""Canonical DHL XML-PI payload constants.

Single source of truth for DHL wire codes, field limits, defaults and
endpoints. Payload-building modules import from here instead of using
inline magic strings.
"""

from enum import Enum


# ---------------------------------------------------------------------------
# Carrier identity
# ---------------------------------------------------------------------------

DHL_CARRIER_NAME = "DHL"

# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

DHL_BASE_URLS: dict[str, str] = {
    "test": "https://xmlpitest-ea.dhl.com/XMLShippingServlet",
    "production": "https://xmlpi-ea.dhl.com/XMLShippingServlet",
}

DHL_XML_MEDIA_TYPE = "text/xml"
DHL_UTF8_QUERY: dict[str, str] = {"isUTF8Support": "true"}

# ---------------------------------------------------------------------------
# Document envelope
# ---------------------------------------------------------------------------

DHL_SCHEMA_VERSION = "10.0"
DHL_REQUEST_ROOT = "req:ShipmentRequest"
DHL_REQUEST_NAMESPACE = "http://www.dhl.com"
DHL_XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
DHL_SCHEMA_LOCATION = "http://www.dhl.com ship-val-global-req.xsd"

DHL_SOFTWARE_NAME = "3PV"
DHL_SOFTWARE_VERSION = "10.0"
DHL_LANGUAGE_CODE = "en"

# ---------------------------------------------------------------------------
# Field limits
# ---------------------------------------------------------------------------

DHL_COUNTRY_NAME_MAX_LEN = 35
DHL_MESSAGE_REFERENCE_LEN = 32

# ---------------------------------------------------------------------------
# Special services
# ---------------------------------------------------------------------------


class SpecialServiceCode(str, Enum):
    """DHL special service type codes used by this integration."""

    SIGNATURE_REQUIRED = "SA"
    INSURANCE = "II"


# ---------------------------------------------------------------------------
# Unit codes
# ---------------------------------------------------------------------------

DHL_WEIGHT_UNIT_POUND = "L"
DHL_WEIGHT_UNIT_KILOGRAM = "K"
DHL_DIMENSION_UNIT_INCH = "I"
DHL_DIMENSION_UNIT_CENTIMETER = "C"

# ---------------------------------------------------------------------------
# Billing / customs
# ---------------------------------------------------------------------------

SHIPPING_PAYMENT_TYPE_SHIPPER = "S"
DEFAULT_CURRENCY_CODE = "USD"
DEFAULT_INCOTERM = "DAP"
EXPORT_QUANTITY_UNIT = "PCS"
FILING_TYPE_ITN = "ITN"

# Incoterms under which the sender pays duties and taxes
SENDER_PAYS_INCOTERMS: frozenset[str] = frozenset({"DDP"})

# ---------------------------------------------------------------------------
# Pieces
# ---------------------------------------------------------------------------

DEFAULT_PACKAGE_TYPE = "YP"  # "Your packaging"
PIECE_WEIGHT_DECIMALS = 2
PIECE_DIMENSION_DECIMALS = 0

# ---------------------------------------------------------------------------
# Label specification
# ---------------------------------------------------------------------------

DEFAULT_LABEL_FORMAT = "PDF"
DEFAULT_LABEL_TEMPLATE = "8X4_A4_PDF"

# ---------------------------------------------------------------------------
# Response element names
# ---------------------------------------------------------------------------

RESPONSE_AWB_ELEMENT = "AirwayBillNumber"
RESPONSE_IMAGE_ELEMENT = "OutputImage"
RESPONSE_CONDITION_ELEMENT = "Condition"
RESPONSE_CONDITION_CODE_ELEMENT = "ConditionCode"
RESPONSE_CONDITION_DATA_ELEMENT = "ConditionData"
