"""Parcel value object: three dimensions, a weight and an insured value."""

from dataclasses import dataclass
from typing import Any, Iterable

from src.services.dhl_constants import DEFAULT_CURRENCY_CODE
from src.services.measurement import Length, LengthUnit, Mass, MassUnit, Money


@dataclass(frozen=True)
class Parcel:
    """A single physical package.

    Immutable; conversions return a new Parcel. The insured value is
    carried through conversions unchanged.
    """

    width: Length
    height: Length
    length: Length
    weight: Mass
    insured_value: Money

    def convert_to(self, length_unit: LengthUnit, mass_unit: MassUnit) -> "Parcel":
        """Return this parcel with dimensions and weight in the given units."""
        return Parcel(
            width=self.width.convert_to(length_unit),
            height=self.height.convert_to(length_unit),
            length=self.length.convert_to(length_unit),
            weight=self.weight.convert_to(mass_unit),
            insured_value=self.insured_value,
        )

    def volume(self, unit: LengthUnit) -> float:
        """Volume in cubic `unit`. Zero when any dimension is zero."""
        result = 1.0
        for side in (self.width, self.height, self.length):
            result *= side.convert_to(unit).value
        return result

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly representation."""
        return {
            "width": {"value": self.width.value, "unit": self.width.unit.value},
            "height": {"value": self.height.value, "unit": self.height.unit.value},
            "length": {"value": self.length.value, "unit": self.length.unit.value},
            "weight": {"value": self.weight.value, "unit": self.weight.unit.value},
            "insured_value": {
                "amount": self.insured_value.amount,
                "currency": self.insured_value.currency,
            },
        }

    @classmethod
    def make(
        cls,
        width: float,
        height: float,
        length: float,
        weight: float,
        insured_value: int | None = None,
        currency_code: str | None = None,
        length_unit: LengthUnit | None = None,
        mass_unit: MassUnit | None = None,
    ) -> "Parcel":
        """Build a parcel from plain numbers.

        Args:
            width: Width in `length_unit`.
            height: Height in `length_unit`.
            length: Length in `length_unit`.
            weight: Weight in `mass_unit`.
            insured_value: Insured value in minor units (default 0).
            currency_code: ISO 4217 code (default USD).
            length_unit: Defaults to meters.
            mass_unit: Defaults to kilograms.

        Returns:
            New Parcel.
        """
        length_unit = length_unit or LengthUnit.METER
        mass_unit = mass_unit or MassUnit.KILOGRAM
        return cls(
            width=Length(width, length_unit),
            height=Length(height, length_unit),
            length=Length(length, length_unit),
            weight=Mass(weight, mass_unit),
            insured_value=Money(insured_value or 0, currency_code or DEFAULT_CURRENCY_CODE),
        )


def total_weight(parcels: Iterable[Parcel], unit: MassUnit) -> Mass:
    """Sum parcel weights in `unit`. Returns zero mass for no parcels."""
    total = Mass.zero(unit)
    for parcel in parcels:
        total = total.add(parcel.weight)
    return total
