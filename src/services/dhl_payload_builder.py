"""DHL payload builder for XML-PI shipment requests.

Maps a NormalizedShipment into the ShipmentRequest tree expected by the
DHL XML-PI (schema 10.0). Every top-level section is always present;
optional leaves are None (null nodes) until dhl_xml prunes them.
Caller-supplied overrides from ShipmentRequest.extra are applied last.

Example:
    from src.services.dhl_payload_builder import build_shipment_payload

    normalized = normalize_request(request)
    tree = build_shipment_payload(
        normalized,
        credentials=credentials,
        country_names=country_names,
        now=datetime.now(UTC),
    )
    xml = serialize_shipment_request(tree)
"""

import logging
import uuid
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from src.services.connection_types import DHLCredentials
from src.services.dhl_constants import (
    DEFAULT_LABEL_FORMAT,
    DEFAULT_LABEL_TEMPLATE,
    DEFAULT_PACKAGE_TYPE,
    DHL_COUNTRY_NAME_MAX_LEN,
    DHL_LANGUAGE_CODE,
    DHL_SOFTWARE_NAME,
    DHL_SOFTWARE_VERSION,
    EXPORT_QUANTITY_UNIT,
    FILING_TYPE_ITN,
    PIECE_DIMENSION_DECIMALS,
    PIECE_WEIGHT_DECIMALS,
    SHIPPING_PAYMENT_TYPE_SHIPPER,
    SpecialServiceCode,
)
from src.services.dhl_request_normalizer import NormalizedShipment
from src.services.measurement import format_decimal
from src.services.parcel import Parcel
from src.services.payload_tree import PayloadNode, set_path
from src.services.shipment_models import Address, ExportDeclaration, PaymentType

logger = logging.getLogger(__name__)


def optional_text(value: str | None) -> str | None:
    """Return the value, or None when it is empty."""
    return value if value else None


def country_name(
    country_code: str, country_names: Mapping[str, str]
) -> str | None:
    """Look up a country name, truncated to the DHL field limit.

    Truncation counts code points, so multi-byte names are never split
    inside a character.

    Args:
        country_code: ISO 3166-1 alpha-2 code.
        country_names: Injected code -> name table.

    Returns:
        Name of at most 35 characters, or None if the code is unknown.
    """
    name = country_names.get(country_code)
    if not name:
        logger.warning("No country name for code %r; CountryName omitted", country_code)
        return None
    return name[:DHL_COUNTRY_NAME_MAX_LEN]


def build_address_block(
    address: Address, country_names: Mapping[str, str]
) -> dict[str, Any]:
    """Build the address fields shared by Consignee and Shipper."""
    return {
        "CompanyName": address.name,
        "AddressLine1": optional_text(address.address1),
        "AddressLine2": optional_text(address.address2),
        "AddressLine3": optional_text(address.address3),
        "City": address.city,
        "PostalCode": address.zip,
        "CountryCode": address.country_code,
        "CountryName": country_name(address.country_code, country_names),
        "Contact": {
            "PersonName": address.contact_name,
            "PhoneNumber": address.contact_phone,
        },
    }


def build_pieces(parcels: tuple[Parcel, ...]) -> list[dict[str, Any]]:
    """Build Piece records, numbered from 1 in parcel order."""
    return [
        {
            "PieceID": index,
            "PackageType": DEFAULT_PACKAGE_TYPE,
            "Weight": parcel.weight.format(PIECE_WEIGHT_DECIMALS),
            "Width": parcel.width.format(PIECE_DIMENSION_DECIMALS),
            "Height": parcel.height.format(PIECE_DIMENSION_DECIMALS),
            "Depth": parcel.length.format(PIECE_DIMENSION_DECIMALS),
        }
        for index, parcel in enumerate(parcels, start=1)
    ]


def build_export_line_items(normalized: NormalizedShipment) -> list[dict[str, Any]]:
    """Build ExportLineItem records, numbered from 1.

    The unit value is the declaration's total value divided by its
    quantity. Weights are expressed in the request's mass unit.
    """
    items = []
    declarations: list[ExportDeclaration] = normalized.request.export_declarations
    for line_number, decl in enumerate(declarations, start=1):
        weight = {
            "Weight": decl.weight.convert_to(normalized.mass_unit).format(2),
            "WeightUnit": normalized.weight_unit_code,
        }
        items.append({
            "LineNumber": line_number,
            "Quantity": decl.quantity,
            "QuantityUnit": EXPORT_QUANTITY_UNIT,
            "Description": decl.description,
            "Value": format_decimal(decl.unit_value, 2),
            "Weight": weight,
            "GrossWeight": dict(weight),
            "ManufactureCountryCode": decl.origin_country_code,
        })
    return items


def build_special_services(normalized: NormalizedShipment) -> list[dict[str, Any]]:
    """Build SpecialService entries, plus insurance when an insured value is set."""
    request = normalized.request
    services: list[dict[str, Any]] = [
        {"SpecialServiceType": code} for code in normalized.special_services
    ]
    if request.insured_value > 0:
        services.append({
            "SpecialServiceType": SpecialServiceCode.INSURANCE.value,
            "ChargeValue": format_decimal(request.insured_value, 2),
            "CurrencyCode": request.currency,
        })
    return services


def build_dutiable(normalized: NormalizedShipment) -> dict[str, Any]:
    """Build the Dutiable section.

    Value, currency and incoterm are only set for dutiable shipments.
    The ITN filing block is only added when a transaction number exists.
    """
    request = normalized.request
    dutiable: dict[str, Any] = {
        "DeclaredValue": format_decimal(normalized.declared_value, 2) if request.is_dutiable else None,
        "DeclaredCurrency": request.currency if request.is_dutiable else None,
        "TermsOfTrade": request.incoterm if request.is_dutiable else None,
    }
    if request.international_transaction_no:
        dutiable["Filing"] = {
            "FilingType": FILING_TYPE_ITN,
            "ITN": request.international_transaction_no,
        }
    return dutiable


def build_billing(
    normalized: NormalizedShipment, credentials: DHLCredentials
) -> dict[str, Any]:
    """Build the Billing section.

    DutyAccountNumber is only present for dutiable shipments; DHL rejects
    non-dutiable requests that carry it. It holds the account number when
    the incoterm makes the sender pay duty, otherwise it is null.
    """
    request = normalized.request
    billing: dict[str, Any] = {
        "ShipperAccountNumber": credentials.account_number,
        "ShippingPaymentType": SHIPPING_PAYMENT_TYPE_SHIPPER,
        "BillingAccountNumber": credentials.account_number,
    }
    if request.is_dutiable:
        sender_pays = request.payment_type_of_incoterm() is PaymentType.SENDER
        billing["DutyAccountNumber"] = credentials.account_number if sender_pays else None
    return billing


def build_shipment_payload(
    normalized: NormalizedShipment,
    credentials: DHLCredentials,
    country_names: Mapping[str, str],
    now: datetime,
    message_reference: str | None = None,
) -> PayloadNode:
    """Build the complete DHL ShipmentRequest tree.

    Args:
        normalized: Output of normalize_request().
        credentials: DHL site credentials and account number.
        country_names: Country code -> country name table.
        now: Current time, used for MessageTime and the default date.
        message_reference: 28-32 character message reference. A random
            32-character hex string is used when omitted.

    Returns:
        Map node with every top-level section present. Overrides from
        request.extra have been applied; nulls are not yet pruned.

    Raises:
        ValueError: If an override path is malformed.
    """
    request = normalized.request
    shipment_date = (request.date or now.date()).strftime("%Y-%m-%d")

    consignee = build_address_block(request.recipient, country_names)

    shipper = {"ShipperID": credentials.account_number}
    shipper.update(build_address_block(request.sender, country_names))

    data: dict[str, Any] = {
        "Request": {
            "ServiceHeader": {
                "MessageTime": now.isoformat(timespec="seconds"),
                "MessageReference": message_reference or uuid.uuid4().hex,
                "SiteID": credentials.site_id,
                "Password": credentials.password,
            },
            "MetaData": {
                "SoftwareName": DHL_SOFTWARE_NAME,
                "SoftwareVersion": DHL_SOFTWARE_VERSION,
            },
        },
        "LanguageCode": DHL_LANGUAGE_CODE,
        "Billing": build_billing(normalized, credentials),
        "Consignee": consignee,
        "Dutiable": build_dutiable(normalized),
        "ExportDeclaration": {
            "InvoiceNumber": request.reference,
            "InvoiceDate": shipment_date,
            "ExportLineItem": build_export_line_items(normalized),
        },
        "Reference": {
            "ReferenceID": request.reference,
        },
        "ShipmentDetails": {
            "Pieces": {
                "Piece": build_pieces(normalized.parcels),
            },
            "WeightUnit": normalized.weight_unit_code,
            "GlobalProductCode": request.service,
            "Date": shipment_date,
            "Contents": normalized.contents,
            "DimensionUnit": normalized.dimension_unit_code,
            "IsDutiable": "Y" if request.is_dutiable else "N",
            "CurrencyCode": request.currency,
        },
        "Shipper": shipper,
        "SpecialService": build_special_services(normalized),
        "LabelImageFormat": request.label_format or DEFAULT_LABEL_FORMAT,
        "Label": {
            "LabelTemplate": request.label_size or DEFAULT_LABEL_TEMPLATE,
        },
    }

    tree = PayloadNode.from_value(data)

    for path, value in request.extra.items():
        logger.debug("Applying payload override at %s", path)
        set_path(tree, path, value)

    return tree
