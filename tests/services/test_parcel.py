"""Tests for the Parcel value object."""

import pytest

from src.services.measurement import Length, LengthUnit, Mass, MassUnit, Money
from src.services.parcel import Parcel, total_weight


class TestParcelMake:
    """Test the Parcel.make factory."""

    def test_defaults(self):
        """Meters, kilograms, USD and zero insured value by default."""
        parcel = Parcel.make(1, 2, 3, 4)
        assert parcel.width == Length(1, LengthUnit.METER)
        assert parcel.weight == Mass(4, MassUnit.KILOGRAM)
        assert parcel.insured_value == Money(0, "USD")

    def test_explicit_units_and_currency(self):
        parcel = Parcel.make(
            10, 20, 30, 5,
            insured_value=2500,
            currency_code="eur",
            length_unit=LengthUnit.INCH,
            mass_unit=MassUnit.POUND,
        )
        assert parcel.length == Length(30, LengthUnit.INCH)
        assert parcel.weight.unit is MassUnit.POUND
        assert parcel.insured_value == Money(2500, "EUR")


class TestParcelConversion:
    """Test unit conversion of whole parcels."""

    def test_convert_to_imperial(self):
        parcel = Parcel.make(
            2.54, 5.08, 7.62, 0.45359237,
            insured_value=100,
            length_unit=LengthUnit.CENTIMETER,
        )
        converted = parcel.convert_to(LengthUnit.INCH, MassUnit.POUND)
        assert converted.width.value == pytest.approx(1)
        assert converted.height.value == pytest.approx(2)
        assert converted.length.value == pytest.approx(3)
        assert converted.weight.value == pytest.approx(1)
        assert converted.insured_value == parcel.insured_value

    def test_original_unchanged(self, parcel):
        parcel.convert_to(LengthUnit.INCH, MassUnit.POUND)
        assert parcel.width.unit is LengthUnit.CENTIMETER


class TestParcelVolume:
    """Test volume computation."""

    def test_volume_in_requested_unit(self, parcel):
        assert parcel.volume(LengthUnit.CENTIMETER) == pytest.approx(6000)
        assert parcel.volume(LengthUnit.METER) == pytest.approx(0.006)

    def test_zero_dimension_gives_zero(self):
        assert Parcel.make(0, 1, 1, 1).volume(LengthUnit.METER) == 0


class TestTotalWeight:
    """Test total_weight folding."""

    def test_sums_mixed_units(self):
        parcels = [
            Parcel.make(1, 1, 1, 1, mass_unit=MassUnit.KILOGRAM),
            Parcel.make(1, 1, 1, 500, mass_unit=MassUnit.GRAM),
        ]
        total = total_weight(parcels, MassUnit.KILOGRAM)
        assert total.unit is MassUnit.KILOGRAM
        assert total.value == pytest.approx(1.5)

    def test_empty_is_zero(self):
        total = total_weight([], MassUnit.POUND)
        assert total == Mass(0, MassUnit.POUND)


class TestParcelToDict:
    """Test JSON-friendly serialization."""

    def test_to_dict(self, parcel):
        data = parcel.to_dict()
        assert data["width"] == {"value": 10.0, "unit": "centimeter"}
        assert data["weight"] == {"value": 2.5, "unit": "kilogram"}
        assert data["insured_value"] == {"amount": 0, "currency": "USD"}
