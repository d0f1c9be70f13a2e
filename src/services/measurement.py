"""Physical quantities and money used by parcel and customs data.

Length and mass carry a unit from a fixed enumeration and convert through
a factor table relative to the dimension's base unit (meter, kilogram).
Money is kept in integer minor units and never converted between
currencies.

Example:
    from src.services.measurement import Length, LengthUnit

    width = Length(10, LengthUnit.INCH)
    width.convert_to(LengthUnit.CENTIMETER).format(0)  # "25"
"""

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from enum import Enum


class LengthUnit(str, Enum):
    """Supported length units."""

    MILLIMETER = "millimeter"
    CENTIMETER = "centimeter"
    METER = "meter"
    INCH = "inch"
    FOOT = "foot"


class MassUnit(str, Enum):
    """Supported mass units."""

    GRAM = "gram"
    KILOGRAM = "kilogram"
    POUND = "pound"
    OUNCE = "ounce"


# Size of one unit expressed in meters
LENGTH_FACTORS: dict[LengthUnit, float] = {
    LengthUnit.MILLIMETER: 0.001,
    LengthUnit.CENTIMETER: 0.01,
    LengthUnit.METER: 1.0,
    LengthUnit.INCH: 0.0254,
    LengthUnit.FOOT: 0.3048,
}

# Size of one unit expressed in kilograms
MASS_FACTORS: dict[MassUnit, float] = {
    MassUnit.GRAM: 0.001,
    MassUnit.KILOGRAM: 1.0,
    MassUnit.POUND: 0.45359237,
    MassUnit.OUNCE: 0.028349523125,
}


_FLOAT_MAX_DIGITS = 310


def format_decimal(value: float, places: int) -> str:
    """Format a number as fixed-point text for the wire.

    Rounds half away from zero and always uses '.' as the separator.
    Never produces exponential notation.

    Args:
        value: Number to format.
        places: Digits after the decimal point.

    Returns:
        Fixed-point string, e.g. format_decimal(2.005, 2) == "2.01".
    """
    quantum = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        # Wide enough for every integer digit of a finite float.
        ctx.prec = _FLOAT_MAX_DIGITS + max(places, 0)
        rounded = Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP)
    if rounded == 0:
        rounded = abs(rounded)
    return f"{rounded:f}"


def _check_magnitude(value: float) -> float:
    value = float(value)
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"Quantity magnitude must be finite and non-negative, got {value!r}")
    return value


@dataclass(frozen=True)
class Length:
    """A length with its unit."""

    value: float
    unit: LengthUnit

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _check_magnitude(self.value))
        object.__setattr__(self, "unit", LengthUnit(self.unit))

    @classmethod
    def zero(cls, unit: LengthUnit) -> "Length":
        return cls(0.0, unit)

    def convert_to(self, unit: LengthUnit) -> "Length":
        """Return this length expressed in another length unit.

        Raises:
            TypeError: If unit is not a LengthUnit.
        """
        if not isinstance(unit, LengthUnit):
            raise TypeError(f"Cannot convert length to {unit!r}")
        if unit is self.unit:
            return self
        meters = self.value * LENGTH_FACTORS[self.unit]
        return Length(meters / LENGTH_FACTORS[unit], unit)

    def add(self, other: "Length") -> "Length":
        """Sum two lengths, expressed in this length's unit."""
        if not isinstance(other, Length):
            raise TypeError(f"Cannot add {type(other).__name__} to Length")
        return Length(self.value + other.convert_to(self.unit).value, self.unit)

    def format(self, decimal_places: int) -> str:
        return format_decimal(self.value, decimal_places)


@dataclass(frozen=True)
class Mass:
    """A mass with its unit."""

    value: float
    unit: MassUnit

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _check_magnitude(self.value))
        object.__setattr__(self, "unit", MassUnit(self.unit))

    @classmethod
    def zero(cls, unit: MassUnit) -> "Mass":
        return cls(0.0, unit)

    def convert_to(self, unit: MassUnit) -> "Mass":
        """Return this mass expressed in another mass unit.

        Raises:
            TypeError: If unit is not a MassUnit.
        """
        if not isinstance(unit, MassUnit):
            raise TypeError(f"Cannot convert mass to {unit!r}")
        if unit is self.unit:
            return self
        kilograms = self.value * MASS_FACTORS[self.unit]
        return Mass(kilograms / MASS_FACTORS[unit], unit)

    def add(self, other: "Mass") -> "Mass":
        """Sum two masses, expressed in this mass's unit."""
        if not isinstance(other, Mass):
            raise TypeError(f"Cannot add {type(other).__name__} to Mass")
        return Mass(self.value + other.convert_to(self.unit).value, self.unit)

    def format(self, decimal_places: int) -> str:
        return format_decimal(self.value, decimal_places)


@dataclass(frozen=True)
class Money:
    """Monetary amount in integer minor units (cents) of an ISO 4217 currency."""

    amount: int
    currency: str

    def __post_init__(self) -> None:
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise TypeError(f"Money amount must be an integer of minor units, got {self.amount!r}")
        object.__setattr__(self, "currency", str(self.currency).upper())

    @classmethod
    def zero(cls, currency: str) -> "Money":
        return cls(0, currency)

    def add(self, other: "Money") -> "Money":
        """Sum two amounts of the same currency.

        Raises:
            ValueError: If the currencies differ.
        """
        if other.currency != self.currency:
            raise ValueError(
                f"Cannot add {other.currency} to {self.currency} without conversion"
            )
        return Money(self.amount + other.amount, self.currency)

    def is_zero(self) -> bool:
        return self.amount == 0

    def format(self, decimal_places: int = 2) -> str:
        """Format in major units, e.g. Money(1050, "USD").format() == "10.50"."""
        major = Decimal(self.amount).scaleb(-2)
        return f"{major.quantize(Decimal(1).scaleb(-decimal_places), rounding=ROUND_HALF_UP):f}"
