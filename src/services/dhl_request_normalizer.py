"""Normalize a ShipmentRequest before it is mapped to the DHL payload.

Picks the wire unit system, converts parcels into it and derives the
defaults DHL needs (total weight, contents, declared value, effective
special services). Pure: no I/O, never raises for missing optional data.

Example:
    normalized = normalize_request(request)
    normalized.weight_unit_code   # "K" for metric requests
"""

from dataclasses import dataclass

from src.services.dhl_constants import (
    DHL_DIMENSION_UNIT_CENTIMETER,
    DHL_DIMENSION_UNIT_INCH,
    DHL_WEIGHT_UNIT_KILOGRAM,
    DHL_WEIGHT_UNIT_POUND,
    SpecialServiceCode,
)
from src.services.measurement import LengthUnit, Mass, MassUnit
from src.services.parcel import Parcel, total_weight
from src.services.shipment_models import ShipmentRequest, UnitSystem

UNIT_PAIRS: dict[UnitSystem, tuple[LengthUnit, MassUnit]] = {
    UnitSystem.IMPERIAL: (LengthUnit.INCH, MassUnit.POUND),
    UnitSystem.METRIC: (LengthUnit.CENTIMETER, MassUnit.KILOGRAM),
}


@dataclass(frozen=True)
class NormalizedShipment:
    """A request with every quantity in one unit system plus derived values.

    Attributes:
        request: The original request (unchanged).
        length_unit: Length unit of every converted dimension.
        mass_unit: Mass unit of every converted weight.
        parcels: Parcels converted to (length_unit, mass_unit).
        total_weight: Sum of parcel weights in mass_unit.
        contents: Effective contents description.
        declared_value: Effective declared value.
        special_services: Effective special service codes, no duplicates.
    """

    request: ShipmentRequest
    length_unit: LengthUnit
    mass_unit: MassUnit
    parcels: tuple[Parcel, ...]
    total_weight: Mass
    contents: str
    declared_value: float
    special_services: tuple[str, ...]

    @property
    def weight_unit_code(self) -> str:
        return DHL_WEIGHT_UNIT_POUND if self.mass_unit is MassUnit.POUND else DHL_WEIGHT_UNIT_KILOGRAM

    @property
    def dimension_unit_code(self) -> str:
        return DHL_DIMENSION_UNIT_INCH if self.length_unit is LengthUnit.INCH else DHL_DIMENSION_UNIT_CENTIMETER


def resolve_contents(request: ShipmentRequest) -> str:
    """Explicit contents, else the comma-joined declaration descriptions."""
    if request.contents:
        return request.contents
    return ",".join(decl.description for decl in request.export_declarations)


def resolve_declared_value(request: ShipmentRequest) -> float:
    """Explicit value when non-zero, else the sum of declaration values."""
    if request.value:
        return float(request.value)
    return float(sum(decl.value for decl in request.export_declarations))


def resolve_special_services(request: ShipmentRequest) -> tuple[str, ...]:
    """Requested services in order without duplicates, plus signature if asked.

    Args:
        request: Shipment request.

    Returns:
        Ordered tuple of service codes. The signature code is appended
        only when signature_required is set and it is not already present.
    """
    services = list(dict.fromkeys(request.special_services))
    signature = SpecialServiceCode.SIGNATURE_REQUIRED.value
    if request.signature_required and signature not in services:
        services.append(signature)
    return tuple(services)


def normalize_request(request: ShipmentRequest) -> NormalizedShipment:
    """Convert a request into the single unit system used on the wire.

    Args:
        request: Shipment request in any mix of units.

    Returns:
        NormalizedShipment with converted parcels and derived defaults.
    """
    length_unit, mass_unit = UNIT_PAIRS[request.units]
    parcels = tuple(p.convert_to(length_unit, mass_unit) for p in request.parcels)

    return NormalizedShipment(
        request=request,
        length_unit=length_unit,
        mass_unit=mass_unit,
        parcels=parcels,
        total_weight=total_weight(parcels, mass_unit),
        contents=resolve_contents(request),
        declared_value=resolve_declared_value(request),
        special_services=resolve_special_services(request),
    )
