"""Carrier-agnostic shipment request and result types.

These are the domain-facing shapes accepted and returned by shipment
services. They carry no wire-format knowledge; see dhl_payload_builder
for the DHL mapping.
"""

from dataclasses import dataclass, field
from datetime import date as date_type
from enum import Enum
from typing import Any

from src.services.dhl_constants import (
    DEFAULT_CURRENCY_CODE,
    DEFAULT_INCOTERM,
    SENDER_PAYS_INCOTERMS,
)
from src.services.measurement import Mass
from src.services.parcel import Parcel


class UnitSystem(str, Enum):
    """Unit system a request is expressed in on the wire."""

    IMPERIAL = "imperial"
    METRIC = "metric"


class PaymentType(str, Enum):
    """Party responsible for duties under an incoterm."""

    SENDER = "sender"
    RECIPIENT = "recipient"


@dataclass(frozen=True)
class Address:
    """Postal address plus contact for one party of a shipment."""

    name: str
    address1: str = ""
    address2: str = ""
    address3: str = ""
    city: str = ""
    zip: str = ""
    country_code: str = ""
    contact_name: str = ""
    contact_phone: str = ""
    state: str = ""


@dataclass(frozen=True)
class ExportDeclaration:
    """One customs line: what is shipped, how many, and its total value.

    Attributes:
        description: Goods description.
        quantity: Number of units, at least 1.
        value: Total value of the line in the request currency.
        weight: Total weight of the line.
        origin_country_code: ISO country of manufacture.
    """

    description: str
    quantity: int
    value: float
    weight: Mass
    origin_country_code: str

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError(
                f"Export declaration quantity must be positive, got {self.quantity}"
            )

    @property
    def unit_value(self) -> float:
        return self.value / self.quantity


@dataclass
class ShipmentRequest:
    """Everything needed to book one shipment with a carrier.

    Attributes:
        service: Carrier product code (DHL GlobalProductCode).
        reference: Customer reference, also used as the invoice number.
        sender: Shipper address.
        recipient: Consignee address.
        parcels: Packages, at least one.
        units: Unit system used on the wire.
        date: Shipment date. Defaults to the service clock's date.
        special_services: Requested special service codes, in order.
        is_dutiable: Whether customs duty applies.
        currency: ISO 4217 code for declared and insured values.
        incoterm: Trade term deciding who pays duty.
        contents: Contents description. Falls back to export declarations.
        value: Declared value. Falls back to export declaration total.
        insured_value: Insured amount in major units; 0 means no insurance.
        signature_required: Add the signature special service.
        international_transaction_no: ITN for the customs filing block.
        label_format: Label image format (default PDF).
        label_size: Label template (default 8X4_A4_PDF).
        export_declarations: Customs lines.
        extra: Dotted path -> value overrides applied to the wire payload last.
    """

    service: str
    reference: str
    sender: Address
    recipient: Address
    parcels: list[Parcel]
    units: UnitSystem = UnitSystem.METRIC
    date: date_type | None = None
    special_services: list[str] = field(default_factory=list)
    is_dutiable: bool = False
    currency: str = DEFAULT_CURRENCY_CODE
    incoterm: str = DEFAULT_INCOTERM
    contents: str = ""
    value: float = 0.0
    insured_value: float = 0.0
    signature_required: bool = False
    international_transaction_no: str = ""
    label_format: str = ""
    label_size: str = ""
    export_declarations: list[ExportDeclaration] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.parcels:
            raise ValueError("ShipmentRequest requires at least one parcel")
        self.units = UnitSystem(self.units)

    def payment_type_of_incoterm(self) -> PaymentType:
        """Classify who pays duty under this request's incoterm."""
        if self.incoterm and self.incoterm.strip().upper() in SENDER_PAYS_INCOTERMS:
            return PaymentType.SENDER
        return PaymentType.RECIPIENT


@dataclass(frozen=True)
class ShipmentResult:
    """A booked shipment.

    Attributes:
        tracking_number: Carrier airway bill / tracking number.
        carrier_name: Carrier display name.
        label_data: Decoded label image bytes.
        raw_response: Response body as received, kept for diagnostics.
    """

    tracking_number: str
    carrier_name: str
    label_data: bytes
    raw_response: str
